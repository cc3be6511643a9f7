"""Structured logging.

Every module logs through structlog with dotted event names
(``tick.completed``, ``position.opened``) and keyword fields. Output goes
to stdout, rendered as colored console lines in development or one JSON
object per line when ``LOG_FORMAT=json``. Standard-library loggers
(uvicorn, SQLAlchemy, httpx) share the same renderer.

Usage:
    setup_logging(settings)  # once, from the application lifespan
    logger = get_logger(__name__)
    logger.info("tick.completed", price="64000.10", signal="NONE")
"""

import logging
import re
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from emabot import __version__

from .settings import Settings, get_settings

# Keys whose values never reach the log output
REDACTED_KEYS = frozenset({"password", "secret", "token", "authorization", "database_url", "dsn"})

_URL_PASSWORD = re.compile(r"(?P<scheme>[a-z][a-z0-9+.-]*://[^:/@\s]+):[^@\s]+@", re.IGNORECASE)


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return _URL_PASSWORD.sub(r"\g<scheme>:***@", value)
    if isinstance(value, dict):
        return {
            k: "[REDACTED]" if k.lower() in REDACTED_KEYS else _redact(v)
            for k, v in value.items()
        }
    return value


def redact_credentials(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask sensitive keys and passwords embedded in connection URLs.

    Store errors quote the DSN, so values are scanned as well as keys.
    """
    for key, value in event_dict.items():
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = "[REDACTED]"
        elif key != "event":
            event_dict[key] = _redact(value)
    return event_dict


def _bot_context(settings: Settings) -> Processor:
    static = {"service": "emabot", "version": __version__, "symbol": settings.symbol}

    def add_bot_context(
        logger: logging.Logger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_bot_context


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _bot_context(settings),
        redact_credentials,
    ]

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str, **extra: Any) -> None:
    """Attach ``request_id`` (and ``extra``) to every log line of the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **extra)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
