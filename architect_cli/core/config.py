"""
Configuration Management.

Resolves the CLI configuration once at startup. Each setting is taken from
the first source that provides it:

    1. Command-line flag (--server, --config)
    2. Environment (ARCHITECT_SERVER, ARCHITECT_TIMEOUT, ARCHITECT_CONFIG,
       ARCHITECT_LOG_LEVEL)
    3. YAML config file (--config, ARCHITECT_CONFIG, or
       ~/.config/architect/config.yaml when present)
    4. Built-in defaults

The result is an immutable CliConfig threaded through command construction.
Nothing here is cached at module level.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from architect_cli.core.config_schema import ConfigFileSchema, LoggingSchema
from architect_cli.core.exceptions import ConfigError

DEFAULT_SERVER_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 15.0
SERVER_ENV_VAR = "ARCHITECT_SERVER"


def default_config_path() -> Path:
    """Location of the per-user config file."""
    return Path.home() / ".config" / "architect" / "config.yaml"


class Settings(BaseSettings):
    """Overrides read from ARCHITECT_* environment variables."""

    server: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    log_level: str | None = None
    config_path: Path | None = Field(default=None, validation_alias="architect_config")

    model_config = SettingsConfigDict(
        env_prefix="ARCHITECT_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("server", "log_level", "config_path", mode="before")
    @classmethod
    def _empty_as_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CliConfig(BaseModel):
    """Effective configuration for one CLI invocation."""

    model_config = ConfigDict(frozen=True)

    server_url: str = DEFAULT_SERVER_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
    config_path: Path | None = None

    @field_validator("server_url")
    @classmethod
    def _check_server_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"server URL must start with http:// or https:// (got '{value}')")
        return value

    def with_server(self, server_url: str) -> "CliConfig":
        """Return a copy pointing at another server."""
        try:
            return CliConfig(**{**self.model_dump(), "server_url": server_url})
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {_first_error(e)}") from e


def _first_error(error: ValidationError) -> str:
    """Flatten the first pydantic error into one readable line."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"].removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def load_config_file(path: Path, required: bool = False) -> ConfigFileSchema:
    """
    Load and validate a YAML config file.

    Args:
        path: File to read. A leading ~ is expanded.
        required: Raise if the file does not exist (it was named explicitly).

    Returns:
        Validated file contents, or defaults when an optional file is absent.

    Raises:
        ConfigError: If the file is missing (when required), unreadable,
            not valid YAML, or does not match ConfigFileSchema.
    """
    path = path.expanduser()

    if not path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {path}")
        return ConfigFileSchema()

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read configuration file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid configuration in {path}: expected a mapping at the top level")

    try:
        return ConfigFileSchema(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {_first_error(e)}") from e


def resolve_config(
    server_url: str | None = None,
    config_path: Path | None = None,
    settings: Settings | None = None,
) -> CliConfig:
    """
    Build the effective configuration.

    Args:
        server_url: Value of the --server flag, if given.
        config_path: Value of the --config flag, if given.
        settings: Environment overrides. Read from os.environ when None.

    Raises:
        ConfigError: On any invalid source.
    """
    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            raise ConfigError(f"Invalid ARCHITECT_* environment setting: {_first_error(e)}") from e

    explicit_path = config_path or settings.config_path
    path = explicit_path or default_config_path()
    file_config = load_config_file(path, required=explicit_path is not None)

    logging_config = file_config.logging
    if settings.log_level:
        try:
            logging_config = LoggingSchema(
                **{**logging_config.model_dump(), "level": settings.log_level.upper()}
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid ARCHITECT_LOG_LEVEL: {_first_error(e)}") from e

    try:
        return CliConfig(
            server_url=server_url or settings.server or file_config.server or DEFAULT_SERVER_URL,
            timeout=settings.timeout or file_config.timeout or DEFAULT_TIMEOUT,
            logging=logging_config,
            config_path=path.expanduser() if path.expanduser().exists() else None,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_first_error(e)}") from e
