"""
Structured logging for scoutboard.

Every event carries the board timezone and scope, since both decide what
"today" and "overdue" mean for the event. Console output in development,
JSON lines elsewhere.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import Processor

from scoutboard.config.settings import Settings, get_settings

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite", "uvicorn.access")


def add_board_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp app identity and board settings onto the event."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("board_tz", settings.board.timezone)
    event_dict.setdefault("board_scope", settings.board.scope)
    return event_dict


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain ending in the renderer for the environment."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_board_context,
    ]
    if settings.environment == "development":
        return processors + [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging from settings."""
    settings = settings or get_settings()

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def board_context(kind: str, **values: Any) -> Iterator[None]:
    """Bind the pipeline kind (and extra values) to every event in the block."""
    with structlog.contextvars.bound_contextvars(board=kind, **values):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
