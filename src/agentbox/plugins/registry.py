"""Plugin manager for agentbox.

Built on pluggy.  The built-in container runtimes are ordinary plugins
listed in :data:`BUILTIN_PLUGINS`; third-party packages add more under the
``agentbox`` entry-point group.  Any plugin, built-in or not, can be
switched off with ``[plugins.<key>] enabled = false``.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

import pluggy

from agentbox.config import Settings, get_settings
from agentbox.logger import logger
from agentbox.plugins.hookspecs import AgentboxSpec

ENTRY_POINT_GROUP = "agentbox"

# config key -> "module:ClassName"
BUILTIN_PLUGINS: dict[str, str] = {
    "docker-runtime": "agentbox.runtime.plugins.docker_runtime:DockerRuntimePlugin",
    "podman-runtime": "agentbox.runtime.plugins.podman_runtime:PodmanRuntimePlugin",
}


def _is_disabled(settings: Settings, key: str) -> bool:
    plugin_cfg = settings.plugins.get(key)
    return plugin_cfg is not None and not plugin_cfg.enabled


def _register_builtins(pm: pluggy.PluginManager, settings: Settings) -> None:
    for key, target in BUILTIN_PLUGINS.items():
        if _is_disabled(settings, key):
            logger.info("Plugin disabled via config", plugin=key)
            continue
        module_path, class_name = target.split(":")
        try:
            plugin_cls = getattr(importlib.import_module(module_path), class_name)
            pm.register(plugin_cls(), name=f"builtin-{key}")
        except Exception:
            logger.exception("Failed to load built-in plugin", plugin=key)


def _register_entrypoints(pm: pluggy.PluginManager, settings: Settings) -> None:
    count = pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
    if count:
        logger.info("Discovered third-party plugins", count=count)

    for plugin in list(pm.get_plugins()):
        name = pm.get_name(plugin) or ""
        # Entry points may expose the class itself; hooks on it would lack `self`
        if isinstance(plugin, type):
            pm.unregister(plugin=plugin)
            logger.warning("Unregistered class-based plugin object", plugin=name)
        elif not name.startswith("builtin-") and _is_disabled(settings, name):
            pm.unregister(plugin=plugin)
            logger.info("Plugin disabled via config", plugin=name)


def get_plugin_manager() -> pluggy.PluginManager:
    """Create a plugin manager with the enabled built-in and third-party plugins."""
    pm = pluggy.PluginManager(ENTRY_POINT_GROUP)
    pm.add_hookspecs(AgentboxSpec)

    settings = get_settings()
    _register_builtins(pm, settings)
    _register_entrypoints(pm, settings)

    logger.debug("Plugin manager ready", plugins=[pm.get_name(p) for p in pm.get_plugins()])
    return pm


def collect_hook_results(
    hook_attr: str,
    validator: Callable[[Any], bool],
    label: str,
    *,
    pm: pluggy.PluginManager | None = None,
) -> list[Any]:
    """Call the no-argument hook *hook_attr* and keep the results *validator* accepts.

    ``None`` results are dropped silently, invalid ones with a warning.  A
    plugin that raises makes the whole call yield nothing.
    """
    pm = pm or get_plugin_manager()
    try:
        provided = getattr(pm.hook, hook_attr)()
    except Exception:
        logger.exception("Plugin hook failed", hook=hook_attr, label=label)
        return []

    accepted: list[Any] = []
    for item in provided:
        if item is None:
            continue
        if validator(item):
            accepted.append(item)
        else:
            logger.warning("Ignoring invalid plugin result", label=label, type=type(item).__name__)
    return accepted
