from .loader import DEFAULT_CONFIG_TEMPLATE, load_config
from .models import OutputConfig, PipelineConfig, SourceConfig

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "OutputConfig",
    "PipelineConfig",
    "SourceConfig",
    "load_config",
]
