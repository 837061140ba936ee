"""Data and error model for the plugin pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")

# Collection of files, keyed by relative path
FileDataCollection = dict[str, T]

# A plugin transforms a collection, synchronously or via an awaitable
Plugin = Callable[
    [FileDataCollection[T]],
    Union[FileDataCollection[T], Awaitable[FileDataCollection[T]]],
]


class FileData(BaseModel):
    """A file read from disk: raw contents plus free-form metadata."""

    contents: bytes
    metadata: dict[str, Any] = Field(default_factory=dict)


class PluginManagerErrorType(str, Enum):
    """Error kinds raised by the plugin manager."""

    PLUGIN_EXECUTION_ERROR = "PLUGIN_EXECUTION_ERROR"
    PLUGIN_LOAD_ERROR = "PLUGIN_LOAD_ERROR"


class PluginManagerError(Exception):
    """Base error for the plugin manager, tagged with an error kind."""

    def __init__(
        self,
        kind: PluginManagerErrorType,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class InvalidPluginError(PluginManagerError):
    """Raised when a non-callable value is registered as a plugin."""

    def __init__(self, plugin: object) -> None:
        self.plugin = plugin
        super().__init__(
            PluginManagerErrorType.PLUGIN_EXECUTION_ERROR,
            f"Plugin must be callable, got {type(plugin).__name__}",
        )


class PluginExecutionError(PluginManagerError):
    """Raised when a registered plugin fails. ``index`` is 1-based."""

    def __init__(self, index: int, cause: Exception) -> None:
        self.index = index
        detail = str(cause) or "Unknown error"
        super().__init__(
            PluginManagerErrorType.PLUGIN_EXECUTION_ERROR,
            f"Plugin {index} failed: {detail}",
            cause,
        )


class PluginLoadError(PluginManagerError):
    """Raised when a plugin reference cannot be imported or is not callable."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(PluginManagerErrorType.PLUGIN_LOAD_ERROR, message, cause)


class PluginNotFoundError(PluginLoadError):
    """Raised when a plugin reference resolves to nothing."""

    def __init__(self, reference: str, detail: str | None = None) -> None:
        self.reference = reference
        msg = f"No plugin found for '{reference}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
