"""Shared logging configuration using structlog."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

import structlog

from ds_common.config.env import parse_bool_env

# prompt_toolkit's event loop logs through asyncio; keep it out of the picker.
_QUIET_LOGGERS = ("asyncio",)


@dataclass(frozen=True)
class LogSettings:
    level: int
    json: bool
    log_file: str | None


def _resolve_level(value: str | int | None, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if value is None:
        return logging.WARNING
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    return logging._nameToLevel.get(value.upper(), logging.WARNING)


def resolve_settings(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
) -> LogSettings:
    """Merge explicit arguments with ``DS_LOG_LEVEL``/``DS_LOG_JSON``/``DS_LOG_FILE``."""
    env_json = parse_bool_env(os.environ.get("DS_LOG_JSON"))
    return LogSettings(
        level=_resolve_level(level or os.environ.get("DS_LOG_LEVEL"), debug),
        json=bool(env_json if json is None else json),
        log_file=os.environ.get("DS_LOG_FILE") if log_file is None else log_file,
    )


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _build_handler(settings: LogSettings) -> logging.Handler:
    renderer: structlog.types.Processor
    if settings.json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=not settings.log_file)

    handler: logging.Handler
    if settings.log_file:
        handler = logging.FileHandler(settings.log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[*_shared_processors(), structlog.stdlib.ExtraAdder()],
        )
    )
    return handler


def _configure_structlog() -> None:
    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
    force: bool = False,
) -> LogSettings:
    """Route stdlib and structlog records through one structlog formatter.

    A log file replaces the stderr handler: the picker owns the terminal while
    it runs and stray writes to stderr would tear its layout. Without ``force``
    an already configured root logger is left untouched.
    """
    settings = resolve_settings(level=level, debug=debug, log_file=log_file, json=json)
    root_logger = logging.getLogger()

    if force or not root_logger.handlers:
        root_logger.handlers.clear()
        root_logger.addHandler(_build_handler(settings))
        root_logger.setLevel(settings.level)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(settings.level, logging.WARNING))

    _configure_structlog()
    return settings
