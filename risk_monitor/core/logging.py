"""Logging configuration.

structlog renders both its own loggers and stdlib ``logging`` records, so
``logger.info("...", extra={...})`` in service modules comes out as the same
JSON (or console) line as a structlog call.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import ExtraAdder, ProcessorFormatter, add_logger_name

from risk_monitor.core.config import Settings

HANDLER_NAME = "risk_monitor"


def _level_name(level: Any) -> str:
    return str(getattr(level, "value", level)).upper()


def _render_chain(log_record_format: str) -> list[Any]:
    if log_record_format == "json":
        return [structlog.processors.format_exc_info, JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(settings: Settings) -> None:
    """Configure structured logging for structlog and stdlib loggers."""
    level = _level_name(settings.app.log_level)
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
    ]
    render = _render_chain(settings.observability.log_record_format)

    structlog.configure(
        processors=[*shared, structlog.processors.StackInfoRenderer(), *render],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=[*shared, add_logger_name, ExtraAdder()],
            processors=[ProcessorFormatter.remove_processors_meta, *render],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> Any:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger().bind(logger=name)
