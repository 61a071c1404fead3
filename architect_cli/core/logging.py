"""
Centralized Logging Configuration.

Every module logs through structlog loggers obtained from get_logger().
setup_logging() is called once per invocation by the root command, after
the configuration has been resolved; --verbose/--debug override the level
from the config file.

Console records go to stderr so that stdout carries only command output
(tables, --json dumps). The optional file handler always writes JSON lines.

Fields in every record:
    timestamp   - ISO 8601 timestamp
    level       - debug, info, warning, error, critical
    logger      - Module path (e.g., architect_cli.cli.client)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    source      - Origin context, passed explicitly (cli, config)

Usage:
    from architect_cli.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    log_with_source(logger, "cli", "debug", "API request", method="GET")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from architect_cli.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "cli",
    "config",
    "unknown",
})
"""Values accepted as ``source``. Callers always set it explicitly."""

# Chatty at DEBUG; never let them below WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign (stdlib) records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=chain)


def _file_handler(file_config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    path = Path(file_config.path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    config: LoggingSchema | None = None,
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool = True,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger for one CLI invocation.

    Root handlers installed by an earlier call are closed and replaced.

    Args:
        config: `logging` section of the CLI config; defaults when None.
        level: Overrides config.level (set by --verbose/--debug).
        format_type: Overrides config.format ('console' or 'json').
        enable_console: Attach the stderr handler.
        enable_file_logging: Overrides config.file.enabled.
    """
    config = config or LoggingSchema()
    log_level = getattr(logging, (level or config.level).upper())
    use_file = config.file.enabled if enable_file_logging is None else enable_file_logging

    chain = _shared_processors()
    structlog.configure(
        processors=chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), chain)

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if enable_console:
        if (format_type or config.format) == "json":
            console_formatter = json_formatter
        else:
            console_formatter = _formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), chain)
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(console_formatter)
        root.addHandler(console)

    if use_file:
        root.addHandler(_file_handler(config.file, json_formatter))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> Any:
    """Return a structlog logger, typically for ``__name__``."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message tagged with an explicit source.

    Args:
        logger: Logger from get_logger()
        source: One of VALID_SOURCES
        level: debug, info, warning, error or critical
        message: Event text
        **kwargs: Extra fields for the record

    Raises:
        AttributeError: If level is not a logger method (there is no fallback)
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
