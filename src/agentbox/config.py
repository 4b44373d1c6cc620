"""Centralized configuration — Pydantic BaseSettings with TOML + env sources.

Settings live in ``~/.config/agentbox/config.toml``.  Environment variables
override the file using the ``AGENTBOX_`` prefix and ``__`` as the nested
delimiter (e.g. ``AGENTBOX_CONTAINER__IMAGE``).  The file is read from the
user's home, never from the working directory: the working directory is
the repository being sandboxed.

Priority (highest wins): init args > env vars > config.toml

Usage::

    from agentbox.config import get_settings

    s = get_settings()
    print(s.container.image)
"""

from __future__ import annotations

import re
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

_CONFIG_FILE = Path.home() / ".config" / "agentbox" / "config.toml"
_NAME_PREFIX_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]{0,39}")
_REFERENCE_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.:/@-]*")

# ---------------------------------------------------------------------------
# Sub-models (each maps to a [section] in config.toml)
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    """Base for all config sub-models — reject unknown keys so typos fail loudly."""

    model_config = {"extra": "forbid"}


class ContainerConfig(_StrictModel):
    image: str = "agentbox"
    runtime: str | None = None  # "docker" | "podman" | plugin runtime name | None
    network: str = "bridge"
    name_prefix: str = "agentbox"  # container/volume names are "<prefix>-<kind>-<session>"
    build_context: str | None = None  # None = recipe bundled with the package

    @field_validator("image", "network")
    @classmethod
    def validate_reference(cls, v: str) -> str:
        # Passed as a CLI argument; a leading "-" would be parsed as a flag
        if _REFERENCE_RE.fullmatch(v) is None:
            raise ValueError(f"invalid image or network reference: {v!r}")
        return v

    @field_validator("name_prefix")
    @classmethod
    def validate_name_prefix(cls, v: str) -> str:
        if _NAME_PREFIX_RE.fullmatch(v) is None:
            raise ValueError("name_prefix may only contain letters, digits, '.', '_' and '-'")
        return v


class TimeoutsConfig(_StrictModel):
    """Upper bounds (seconds) for every external command."""

    check: float = 5.0
    build: float = 1800.0
    stop: float = 10.0
    stop_grace: int = 5  # passed to `<engine> stop -t`
    volume_rm: float = 10.0

    @field_validator("check", "build", "stop", "volume_rm")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("stop_grace")
    @classmethod
    def validate_grace(cls, v: int) -> int:
        # 0 means kill immediately
        if v < 0:
            raise ValueError("stop_grace must not be negative")
        return v


# NOTE: changing these defaults changes what host credential material a
# container can see.
class CredentialsConfig(_StrictModel):
    agent_socket_env: str = "SSH_AUTH_SOCK"
    mount_ssh_dir: bool = False  # read-only ~/.ssh fallback; off = agent forwarding only
    mount_gitconfig: bool = True


class LoggingConfig(_StrictModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


class PluginConfig(_StrictModel):
    enabled: bool = True


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        toml_file=_CONFIG_FILE,
        env_prefix="AGENTBOX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    container: ContainerConfig = ContainerConfig()
    timeouts: TimeoutsConfig = TimeoutsConfig()
    credentials: CredentialsConfig = CredentialsConfig()
    logging: LoggingConfig = LoggingConfig()
    plugins: dict[str, PluginConfig] = {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init > env vars > config.toml."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    # --- Computed properties ---

    @cached_property
    def home_dir(self) -> Path:
        return Path.home()

    @cached_property
    def config_file(self) -> Path:
        return _CONFIG_FILE

    @cached_property
    def build_context_dir(self) -> Path:
        if self.container.build_context:
            return Path(self.container.build_context).expanduser().resolve()
        return Path(__file__).resolve().parent / "container"


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_settings: Settings | None = None


def get_settings() -> Settings:
    """Lazy cached singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Clear the cached singleton (for tests)."""
    global _settings
    _settings = None
