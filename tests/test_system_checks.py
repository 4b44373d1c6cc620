"""Tests for host requirement checks."""

from __future__ import annotations

import socket
from unittest.mock import MagicMock, patch

import pytest
from conftest import make_ctx

from agentbox.config import CredentialsConfig
from agentbox.errors import RequirementError
from agentbox.system_checks import check_agent_socket, check_requirements

_WORK_TREE = "agentbox.system_checks.is_inside_work_tree"


@pytest.fixture
def agent_socket(tmp_path, monkeypatch):
    """A live UNIX socket exported as SSH_AUTH_SOCK."""
    path = tmp_path / "agent.sock"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.bind(str(path))
    monkeypatch.setenv("SSH_AUTH_SOCK", str(path))
    yield path
    sock.close()


def _runtime(**kwargs):
    runtime = MagicMock()
    runtime.name = "docker"
    runtime.cli = "docker"
    runtime.version.return_value = "Docker version 27.0.3"
    for key, value in kwargs.items():
        setattr(runtime, key, value)
    return runtime


# ---------------------------------------------------------------------------
# check_agent_socket
# ---------------------------------------------------------------------------


class TestCheckAgentSocket:
    def test_unset(self, monkeypatch):
        monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
        with pytest.raises(RequirementError, match="SSH agent not found") as exc_info:
            check_agent_socket()
        assert "ssh-add" in exc_info.value.hint

    def test_missing_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SSH_AUTH_SOCK", str(tmp_path / "gone.sock"))
        with pytest.raises(RequirementError, match="not accessible"):
            check_agent_socket()

    def test_regular_file_is_rejected(self, tmp_path, monkeypatch):
        fake = tmp_path / "not-a-socket"
        fake.write_text("")
        monkeypatch.setenv("SSH_AUTH_SOCK", str(fake))
        with pytest.raises(RequirementError, match="not a socket"):
            check_agent_socket()

    def test_relative_path_is_rejected(self, monkeypatch):
        monkeypatch.setenv("SSH_AUTH_SOCK", "agent.sock")
        with pytest.raises(RequirementError, match="absolute path"):
            check_agent_socket()

    def test_live_socket(self, agent_socket):
        assert check_agent_socket() == agent_socket

    def test_custom_env_var(self, agent_socket, monkeypatch):
        monkeypatch.delenv("SSH_AUTH_SOCK")
        monkeypatch.setenv("MY_AGENT_SOCK", str(agent_socket))
        assert check_agent_socket("MY_AGENT_SOCK") == agent_socket


# ---------------------------------------------------------------------------
# check_requirements
# ---------------------------------------------------------------------------


class TestCheckRequirements:
    def test_all_satisfied(self, agent_socket):
        ctx = make_ctx()
        runtime = _runtime()
        with patch(_WORK_TREE, return_value=True):
            assert check_requirements(ctx, runtime) == agent_socket

        runtime.version.assert_called_once_with(5.0)
        runtime.ensure_running.assert_called_once_with(5.0)

    def test_engine_missing_stops_early(self, agent_socket):
        runtime = _runtime()
        runtime.version.side_effect = RequirementError("docker is not installed")
        with patch(_WORK_TREE) as mock_tree:
            with pytest.raises(RequirementError, match="not installed"):
                check_requirements(make_ctx(), runtime)
        runtime.ensure_running.assert_not_called()
        mock_tree.assert_not_called()

    def test_daemon_down(self, agent_socket):
        runtime = _runtime()
        runtime.ensure_running.side_effect = RequirementError("docker daemon is not running")
        with pytest.raises(RequirementError, match="daemon is not running"):
            check_requirements(make_ctx(), runtime)

    def test_not_a_git_repository(self, agent_socket):
        with patch(_WORK_TREE, return_value=False):
            with pytest.raises(RequirementError, match="Not in a git repository"):
                check_requirements(make_ctx(), _runtime())

    def test_missing_agent(self, monkeypatch):
        monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
        with patch(_WORK_TREE, return_value=True):
            with pytest.raises(RequirementError, match="SSH agent not found"):
                check_requirements(make_ctx(), _runtime())

    def test_uses_configured_socket_env(self, agent_socket, monkeypatch):
        monkeypatch.setenv("OTHER_SOCK", str(agent_socket))
        monkeypatch.delenv("SSH_AUTH_SOCK")
        ctx = make_ctx(credentials=CredentialsConfig(agent_socket_env="OTHER_SOCK"))
        with patch(_WORK_TREE, return_value=True):
            assert check_requirements(ctx, _runtime()) == agent_socket
