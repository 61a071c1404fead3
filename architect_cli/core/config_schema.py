"""
Configuration Schemas.

Pydantic models defining the expected structure of the optional YAML
config file (~/.config/architect/config.yaml). If the file has wrong types
or unknown keys, a clear ValidationError is raised at startup instead of a
setting being silently ignored.

Example:

    server: http://localhost:3001
    timeout: 15
    logging:
      level: WARNING
      format: console
      file:
        enabled: false
        path: ~/.architect/cli.jsonl
        max_bytes: 5242880
        backup_count: 3
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# logging
# =============================================================================


class FileHandlerSchema(_StrictBase):
    enabled: bool = False
    path: str = "~/.architect/cli.jsonl"
    max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    backup_count: int = Field(default=3, ge=0)


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json"] = "console"
    file: FileHandlerSchema = Field(default_factory=FileHandlerSchema)


# =============================================================================
# config.yaml
# =============================================================================


class ConfigFileSchema(_StrictBase):
    server: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
