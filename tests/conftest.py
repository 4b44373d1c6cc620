"""Shared test fixtures for agentbox."""

from __future__ import annotations

import subprocess

import pytest

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, importable by test files)
# ---------------------------------------------------------------------------

# Cached property names that must be set via __dict__ (not model_construct).
_CACHED_PROPERTY_NAMES = frozenset(
    {
        "home_dir",
        "config_file",
        "build_context_dir",
    }
)


def make_settings(**overrides):
    """Create a Settings object with sensible defaults for testing.

    Accepts both model fields (container, timeouts, etc.) and cached property
    overrides (home_dir, build_context_dir).

    Usage::

        s = make_settings(home_dir=tmp_path)
        s = make_settings(credentials=CredentialsConfig(mount_ssh_dir=True))
    """
    from agentbox.config import (
        ContainerConfig,
        CredentialsConfig,
        LoggingConfig,
        Settings,
        TimeoutsConfig,
    )

    # Separate cached properties from model fields
    cached = {k: overrides.pop(k) for k in list(overrides) if k in _CACHED_PROPERTY_NAMES}

    defaults = {
        "container": ContainerConfig(),
        "timeouts": TimeoutsConfig(),
        "credentials": CredentialsConfig(),
        "logging": LoggingConfig(),
        "plugins": {},
    }
    defaults.update(overrides)
    s = Settings.model_construct(**defaults)

    for key, value in cached.items():
        s.__dict__[key] = value

    return s


def make_ctx(**overrides):
    """SessionContext over :func:`make_settings` with the given overrides."""
    from agentbox.context import SessionContext

    return SessionContext(settings=make_settings(**overrides))


def ok(stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], 0, stdout=stdout, stderr=stderr)


def fail(stderr: str = "", returncode: int = 1) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], returncode, stdout="", stderr=stderr)


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _clean_git_env():
    """Strip git env vars that pre-commit leaks during its stash cycle.

    Tests that create temporary git repos would otherwise inherit
    GIT_INDEX_FILE / GIT_DIR / GIT_WORK_TREE and operate on the wrong repo.
    """
    import os

    for var in ("GIT_INDEX_FILE", "GIT_DIR", "GIT_WORK_TREE"):
        os.environ.pop(var, None)


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Ensure each test starts with a clean Settings singleton.

    Uses ``make_settings()`` to build from pure defaults: no config.toml,
    no env, no file I/O. Tests are fully isolated from the user's config.
    """
    safe = make_settings()
    monkeypatch.setattr("agentbox.config._settings", safe)


@pytest.fixture(autouse=True)
def reset_runtime():
    """Clear the cached runtime so detection runs per test."""
    from agentbox.runtime import reset_runtime

    reset_runtime()
    yield
    reset_runtime()
