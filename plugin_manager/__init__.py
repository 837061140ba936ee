"""Plugin Manager - sequential plugin pipeline over keyed file collections."""

from plugin_manager.manager import PluginManager
from plugin_manager.models import (
    FileData,
    FileDataCollection,
    InvalidPluginError,
    Plugin,
    PluginExecutionError,
    PluginLoadError,
    PluginManagerError,
    PluginManagerErrorType,
    PluginNotFoundError,
)
from plugin_manager.log import PipelineLogger, get_logger

__version__ = "0.1.0"

__all__ = [
    "FileData",
    "FileDataCollection",
    "InvalidPluginError",
    "PipelineLogger",
    "Plugin",
    "PluginExecutionError",
    "PluginLoadError",
    "PluginManager",
    "PluginManagerError",
    "PluginManagerErrorType",
    "PluginNotFoundError",
    "get_logger",
]
