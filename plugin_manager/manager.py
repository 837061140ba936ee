"""PluginManager: runs an ordered list of plugins over a file collection."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Generic

from plugin_manager.log import PipelineLogger, get_logger
from plugin_manager.models import (
    FileDataCollection,
    InvalidPluginError,
    Plugin,
    PluginExecutionError,
    T,
)


class PluginManager(Generic[T]):
    """Holds plugins in registration order and applies them as a left fold.

    Each plugin receives the collection returned by the previous one (the
    caller's object for the first plugin, uncopied). A plugin may return the
    collection directly or an awaitable resolving to it. The first failure
    stops the run and is raised as :class:`PluginExecutionError`.
    """

    def __init__(
        self,
        plugins: Iterable[Plugin[T]] | None = None,
        *,
        logger: PipelineLogger | None = None,
    ) -> None:
        self._plugins: list[Plugin[T]] = []
        self._logger = logger if logger is not None else get_logger()
        if plugins:
            for plugin in plugins:
                self.add_plugin(plugin)

    @property
    def plugins(self) -> tuple[Plugin[T], ...]:
        return tuple(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    def add_plugin(self, plugin: Plugin[T]) -> None:
        """Append a plugin to the end of the pipeline."""
        self._logger.trace("Adding plugin to pipeline")
        if not callable(plugin):
            self._logger.error("Plugin must be callable, got %s", type(plugin).__name__)
            raise InvalidPluginError(plugin)
        self._plugins.append(plugin)
        self._logger.info("Plugin added successfully, total plugins: %d", len(self._plugins))

    async def run_plugins(self, files: FileDataCollection[T]) -> FileDataCollection[T]:
        """Run every registered plugin in order and return the final collection."""
        plugins = tuple(self._plugins)
        total = len(plugins)
        self._logger.trace("Starting plugin execution")
        self._logger.info("Running plugins, total count: %d", total)

        current = files
        for index, plugin in enumerate(plugins, start=1):
            self._logger.trace("Running plugin %d/%d", index, total)
            try:
                result = plugin(current)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                self._logger.error("Plugin %d failed: %r", index, exc)
                raise PluginExecutionError(index, exc) from exc
            current = result
            self._logger.trace("Plugin %d completed successfully", index)

        self._logger.info("All plugins executed successfully")
        return current

    def clear_plugins(self) -> None:
        """Remove all registered plugins."""
        self._logger.trace("Clearing all plugins")
        self._plugins = []
        self._logger.info("All plugins cleared")
