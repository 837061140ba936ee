from pydantic import BaseModel, Field
from typing import Literal


class SourceConfig(BaseModel):
    directory: str = "src"
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv", ".DS_Store"
    ])


class OutputConfig(BaseModel):
    directory: str = "build"


class PipelineConfig(BaseModel):
    plugins: list[str] = Field(default_factory=list)
    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["trace", "debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
