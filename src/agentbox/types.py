"""Data models for agentbox."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from agentbox.errors import CleanupWarning
from agentbox.security.validation import (
    validate_branch_name,
    validate_repo_name,
    validate_repository_url,
)


@dataclass(frozen=True)
class RepositoryReference:
    """The repository a session clones.

    Construction runs every field through its validator, so an instance
    only exists for input that passed validation.  Fields hold the
    normalized (trimmed) values.
    """

    url: str
    name: str
    branch: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", validate_repository_url(self.url))
        object.__setattr__(self, "name", validate_repo_name(self.name))
        object.__setattr__(self, "branch", validate_branch_name(self.branch))


# --- Config discovery ---


class ConfigCategory(str, Enum):
    PRIMARY_SHARE = "primary-share"
    PRIMARY_CONFIG = "primary-config"
    ALTERNATIVE = "alternative"


@dataclass(frozen=True)
class ConfigDiscoveryResult:
    categories: Mapping[ConfigCategory, Path] = field(default_factory=dict)
    found: tuple[Path, ...] = ()

    def get(self, category: ConfigCategory) -> Path | None:
        return self.categories.get(category)

    @property
    def empty(self) -> bool:
        return not self.found


# --- Launch spec ---


@dataclass(frozen=True)
class VolumeMount:
    host_path: str
    container_path: str
    readonly: bool = False


@dataclass(frozen=True)
class EphemeralVolumes:
    """Engine-managed volumes created for one session and removed at its end."""

    state: str
    workspace: str

    def names(self) -> tuple[str, str]:
        return (self.state, self.workspace)


@dataclass(frozen=True)
class SecurityOptions:
    no_new_privileges: bool = True
    cap_drop: tuple[str, ...] = ("ALL",)
    cap_add: tuple[str, ...] = ()


@dataclass(frozen=True)
class LaunchSpec:
    """Fully assembled container invocation.

    Built once by :func:`agentbox.container_runner.build_launch_spec` and
    serialized to CLI args only at the spawn boundary.
    """

    image: str
    session_id: str
    container_name: str
    security: SecurityOptions
    mounts: tuple[VolumeMount, ...]
    env: Mapping[str, str]
    volumes: EphemeralVolumes
    network: str
    command: tuple[str, ...]
    interactive: bool = True


# --- Lifecycle ---


class SessionState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    EXITING = "exiting"
    CLEANED = "cleaned"


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of one best-effort teardown step."""

    resource: str
    warning: CleanupWarning | None = None

    @property
    def ok(self) -> bool:
        return self.warning is None
