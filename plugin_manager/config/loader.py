"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import PipelineConfig

CONFIG_FILENAME = "plugin-manager.yaml"


def load_config(cli_path: str | None = None) -> PipelineConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path(".") / CONFIG_FILENAME,
        Path.home() / ".plugin-manager" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping at top level")
                raw = _expand_env_vars(raw)
                return PipelineConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return PipelineConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `plugin-manager config init`
DEFAULT_CONFIG_TEMPLATE = """\
# plugin-manager.yaml

# Plugins, run in this order. Each entry is either "package.module:function"
# or the name of an entry point in the "plugin_manager.plugins" group.
plugins: []
#  - "mysite.plugins:render_markdown"
#  - "permalinks"

# Input directory
source:
  directory: "src"
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv", ".DS_Store"]

# Output directory
output:
  directory: "build"

# Logging
log_level: "info"              # trace | debug | info | warn | error
log_format: "text"             # text | json
"""
