"""Shared test fixtures for the plugin manager."""

import logging

import pytest

from plugin_manager.config.models import PipelineConfig
from plugin_manager.log import DEFAULT_LOGGER_NAME
from plugin_manager.manager import PluginManager
from plugin_manager.models import FileData


class RecordingLogger:
    """PipelineLogger that keeps (level, rendered message) pairs."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def _record(self, level, msg, *args):
        self.records.append((level, msg % args if args else msg))

    def trace(self, msg, *args):
        self._record("trace", msg, *args)

    def info(self, msg, *args):
        self._record("info", msg, *args)

    def error(self, msg, *args):
        self._record("error", msg, *args)

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture(autouse=True)
def _reset_package_loggers():
    """Drop handlers installed by configure_logging (e.g. via the CLI)."""
    yield
    for name in ("plugin_manager", DEFAULT_LOGGER_NAME):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def manager(recording_logger):
    return PluginManager(logger=recording_logger)


@pytest.fixture
def mock_files():
    return {
        "test.txt": FileData(contents=b"test content"),
    }


@pytest.fixture
def sample_config():
    return PipelineConfig()


@pytest.fixture
def site_dir(tmp_path):
    """A small source tree with nested files and an ignored directory."""
    src = tmp_path / "src"
    (src / "posts").mkdir(parents=True)
    (src / ".git").mkdir()
    (src / "index.md").write_text("# Home\n")
    (src / "posts" / "first.md").write_text("hello world\n")
    (src / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return src
