"""Logging configuration for the checkout domain.

Standard library handlers carry the output; structlog sits on top and adds
structured context (cart pid, order number, stage) to every log line.

Environment:
    LOG_LEVEL          explicit level, overrides the environment default
    PROTEAN_ENV        production/staging log INFO as JSON, test logs WARNING
    CART_LOG_DIR       directory for the rotating log files ("" = console only)
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Mapping
from contextvars import Token
from pathlib import Path
from typing import Any

import structlog

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(current_env(), "INFO")).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    """Route everything through the root logger: stdout plus optional checkout log files."""
    log_level = get_log_level()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setLevel(log_level)

    log_dir = os.getenv("CART_LOG_DIR", "logs")
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(path / "checkout.log", log_level))
        handlers.append(_rotating_handler(path / "checkout_error.log", logging.ERROR))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = handlers

    for noisy in ("protean", "asyncio", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def drop_unset_values(logger, method_name, event_dict):
    """Leave out keys whose value is None (e.g. the order number before create)."""
    return {key: value for key, value in event_dict.items() if value is not None}


def _renderer():
    if current_env() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            drop_unset_values,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure all logging for the checkout."""
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_checkout_context(**kwargs: Any) -> Mapping[str, Token]:
    """Bind context (cart pid, order item id, ...) to all subsequent log lines of this checkout.

    Returns the tokens that restore the previous values.
    """
    return structlog.contextvars.bind_contextvars(**kwargs)


def reset_checkout_context(tokens: Mapping[str, Token]) -> None:
    """Undo one ``bind_checkout_context()``; context bound by callers is kept."""
    structlog.contextvars.reset_contextvars(**tokens)
