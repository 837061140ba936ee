"""Dynamic plugin discovery and loading."""

from plugin_manager.plugins.loader import PluginLoader

__all__ = ["PluginLoader"]
