"""Tests for the plugin-manager CLI (run, plugins list, config show/init)."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from plugin_manager.cli import app
from plugin_manager.config.loader import DEFAULT_CONFIG_TEMPLATE

runner = CliRunner()

SITE_PLUGINS = "pm_site_plugins"

SITE_PLUGINS_SOURCE = textwrap.dedent(
    """
    def upper(files):
        return {
            k: v.model_copy(update={"contents": v.contents.upper()})
            for k, v in files.items()
        }

    async def to_html(files):
        return {k.replace(".md", ".html"): v for k, v in files.items()}

    def explode(files):
        raise RuntimeError("render failed")

    def not_a_mapping(files):
        return ["oops"]

    def escape(files):
        return {"../outside.txt": b"x"}

    def clash(files):
        return {"a": b"x", "a/b.txt": b"y"}
    """
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test in an empty project dir with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path


@pytest.fixture
def site_plugins(tmp_path, monkeypatch):
    plugin_dir = tmp_path / "plugin_src"
    plugin_dir.mkdir()
    (plugin_dir / f"{SITE_PLUGINS}.py").write_text(SITE_PLUGINS_SOURCE)
    monkeypatch.syspath_prepend(str(plugin_dir))
    yield SITE_PLUGINS
    sys.modules.pop(SITE_PLUGINS, None)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


def test_run_applies_plugins_in_order(site_dir, tmp_path, site_plugins):
    out = tmp_path / "public"
    result = runner.invoke(app, [
        "run", str(site_dir), "-o", str(out),
        "-p", f"{site_plugins}:upper", "-p", f"{site_plugins}:to_html",
    ])
    assert result.exit_code == 0, result.output
    assert (out / "index.html").read_text() == "# HOME\n"
    assert (out / "posts" / "first.html").read_text() == "HELLO WORLD\n"
    assert not (out / "index.md").exists()


def test_run_without_plugins_copies_tree(site_dir, tmp_path):
    out = tmp_path / "public"
    result = runner.invoke(app, ["run", str(site_dir), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert (out / "index.md").read_text() == "# Home\n"
    assert not (out / ".git").exists()


def test_run_uses_config_defaults(site_dir, tmp_path, site_plugins):
    (tmp_path / "plugin-manager.yaml").write_text(
        f"plugins:\n  - '{site_plugins}:upper'\n"
        f"source:\n  directory: '{site_dir}'\n"
        "output:\n  directory: site-out\n"
    )
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "site-out" / "index.md").read_text() == "# HOME\n"


def test_run_dry_run_writes_nothing(site_dir, tmp_path):
    out = tmp_path / "public"
    result = runner.invoke(app, ["run", str(site_dir), "-o", str(out), "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "dry run" in result.output.lower()
    assert not out.exists()


def test_run_plugin_failure_exits_1(site_dir, tmp_path, site_plugins):
    out = tmp_path / "public"
    result = runner.invoke(app, [
        "run", str(site_dir), "-o", str(out),
        "-p", f"{site_plugins}:upper", "-p", f"{site_plugins}:explode",
    ])
    assert result.exit_code == 1
    assert "Plugin 2 failed: render failed" in result.output
    assert not out.exists()


def test_run_unknown_plugin_exits_1(site_dir, tmp_path):
    with patch("plugin_manager.plugins.loader.importlib.metadata.entry_points", return_value=[]):
        result = runner.invoke(app, ["run", str(site_dir), "-p", "no-such-plugin"])
    assert result.exit_code == 1
    assert "No plugin found" in result.output


def test_run_missing_source_exits_1(tmp_path):
    result = runner.invoke(app, ["run", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_run_non_mapping_result_exits_1(site_dir, site_plugins):
    result = runner.invoke(app, ["run", str(site_dir), "-p", f"{site_plugins}:not_a_mapping"])
    assert result.exit_code == 1
    assert "expected a mapping" in result.output


def test_run_escaping_key_exits_1(site_dir, tmp_path, site_plugins):
    out = tmp_path / "public"
    result = runner.invoke(app, ["run", str(site_dir), "-o", str(out), "-p", f"{site_plugins}:escape"])
    assert result.exit_code == 1
    assert "escapes" in result.output
    assert not (tmp_path / "outside.txt").exists()


def test_run_conflicting_keys_exits_1(site_dir, tmp_path, site_plugins):
    out = tmp_path / "public"
    result = runner.invoke(app, ["run", str(site_dir), "-o", str(out), "-p", f"{site_plugins}:clash"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "conflicts with" in result.output
    assert not out.exists()


def test_run_output_path_is_a_file_exits_1(site_dir, tmp_path):
    out = tmp_path / "public"
    out.write_text("not a directory")
    result = runner.invoke(app, ["run", str(site_dir), "-o", str(out)])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not isinstance(result.exception, OSError)


def test_run_unreadable_source_exits_1(site_dir):
    with patch("plugin_manager.cli.read_directory", side_effect=PermissionError("Permission denied")):
        result = runner.invoke(app, ["run", str(site_dir)])
    assert result.exit_code == 1
    assert "Permission denied" in result.output


def test_invalid_config_exits_1(tmp_path):
    (tmp_path / "plugin-manager.yaml").write_text("log_level: loud\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


# ---------------------------------------------------------------------------
# plugins list
# ---------------------------------------------------------------------------


def test_plugins_list_empty():
    with patch("plugin_manager.plugins.loader.importlib.metadata.entry_points", return_value=[]):
        result = runner.invoke(app, ["plugins", "list"])
    assert result.exit_code == 0
    assert "No plugins registered" in result.output


def test_plugins_list_shows_names():
    eps = []
    for name in ("permalinks", "markdown"):
        ep = MagicMock()
        ep.name = name
        eps.append(ep)
    with patch("plugin_manager.plugins.loader.importlib.metadata.entry_points", return_value=eps):
        result = runner.invoke(app, ["plugins", "list"])
    assert result.exit_code == 0
    assert "markdown" in result.output
    assert "permalinks" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def test_config_show_dumps_yaml():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "log_level" in result.output
    assert "build" in result.output


def test_config_init_creates_file(tmp_path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "plugin-manager.yaml").read_text() == DEFAULT_CONFIG_TEMPLATE


def test_config_init_refuses_overwrite(tmp_path):
    target = tmp_path / "plugin-manager.yaml"
    target.write_text("plugins: []\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert target.read_text() == "plugins: []\n"


def test_config_init_force_overwrites(tmp_path):
    target = tmp_path / "plugin-manager.yaml"
    target.write_text("plugins: []\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert Path(target).read_text() == DEFAULT_CONFIG_TEMPLATE
