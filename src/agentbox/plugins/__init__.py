"""Plugin system: hookspecs, built-in registry and entry-point discovery."""

from agentbox.plugins.registry import collect_hook_results, get_plugin_manager

__all__ = ["collect_hook_results", "get_plugin_manager"]
