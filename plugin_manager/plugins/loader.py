"""Resolve plugin references from import paths or entry points."""

from __future__ import annotations

import importlib
import importlib.metadata
import inspect
import logging
from typing import TYPE_CHECKING, Any

from plugin_manager.manager import PluginManager
from plugin_manager.models import Plugin, PluginLoadError, PluginNotFoundError

if TYPE_CHECKING:
    from plugin_manager.config.models import PipelineConfig
    from plugin_manager.log import PipelineLogger

logger = logging.getLogger(__name__)


class PluginLoader:
    """Turns plugin references into callables.

    A reference is either ``"package.module:attr"`` (imported directly) or
    the name of an entry point in :attr:`GROUP`. Classes are instantiated
    with no arguments, so a plugin may be a class with ``__call__``.
    """

    GROUP = "plugin_manager.plugins"

    def __init__(self, config: PipelineConfig | None = None):
        self._config = config

    def discover(self) -> list[str]:
        """Names of all plugins registered under the entry point group."""
        return [ep.name for ep in importlib.metadata.entry_points(group=self.GROUP)]

    def load(self, reference: str) -> Plugin:
        if ":" in reference:
            obj = self._load_from_path(reference)
        else:
            obj = self._load_from_entry_point(reference)

        if inspect.isclass(obj):
            try:
                obj = obj()
            except Exception as exc:
                raise PluginLoadError(
                    f"Failed to instantiate plugin '{reference}': {exc}", exc
                ) from exc

        # Loaded code is untyped; the callable check is the only guard here
        if not callable(obj):
            raise PluginLoadError(
                f"Plugin '{reference}' is not callable (got {type(obj).__name__})"
            )
        logger.debug("loaded plugin %s", reference)
        return obj

    def load_all(self, references: list[str] | None = None) -> list[Plugin]:
        """Load references in order. Falls back to the configured plugin list."""
        if references is None:
            references = list(self._config.plugins) if self._config else []
        return [self.load(ref) for ref in references]

    def build_manager(
        self,
        references: list[str] | None = None,
        logger: PipelineLogger | None = None,
    ) -> PluginManager:
        return PluginManager(self.load_all(references), logger=logger)

    def _load_from_path(self, reference: str) -> Any:
        module_path, _, attr_path = reference.partition(":")
        if not module_path or not attr_path:
            raise PluginLoadError(
                f"Invalid plugin reference '{reference}': expected 'module:attribute'"
            )
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            # Only the reference itself missing counts as not-found, not its imports
            if exc.name and (module_path == exc.name or module_path.startswith(exc.name + ".")):
                raise PluginNotFoundError(reference, f"module '{module_path}' not found") from exc
            raise PluginLoadError(f"Error importing plugin '{reference}': {exc}", exc) from exc
        except Exception as exc:
            raise PluginLoadError(f"Error importing plugin '{reference}': {exc}", exc) from exc

        obj: Any = module
        for part in attr_path.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError as exc:
                raise PluginNotFoundError(
                    reference, f"'{module_path}' has no attribute '{attr_path}'"
                ) from exc
        return obj

    def _load_from_entry_point(self, name: str) -> Any:
        for ep in importlib.metadata.entry_points(group=self.GROUP):
            if ep.name == name:
                try:
                    return ep.load()
                except Exception as exc:
                    raise PluginLoadError(
                        f"Error loading entry point '{name}': {exc}", exc
                    ) from exc
        raise PluginNotFoundError(name, f"no entry point in group '{self.GROUP}'")
