"""Loguru setup shared by the API process and its worker threads.

Every line carries the correlation id of the request that produced it;
background threads (hashing pool, mail delivery) log "-" unless they copy
the context over.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
_DEFAULT_LOG_FILE = Path(__file__).resolve().parents[2] / "instance" / "app.log"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")

_logger.configure(extra={"correlation_id": "-"})


def _resolve_log_file() -> Path | None:
    configured = os.getenv("LOG_FILE")
    if configured is None:
        return _DEFAULT_LOG_FILE
    # empty string turns the file sink off
    return Path(configured) if configured else None


class _StdlibBridge(logging.Handler):
    """Routes werkzeug and other stdlib loggers into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(correlation_id=_correlation_id.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Attribute proxy that binds the current correlation id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_correlation_id.get()), name)


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or "-")


def get_correlation_id() -> str:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set("-")


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """(Re)install sinks. Safe to call once per create_app."""

    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()
    common = {"level": level, "format": _LINE_FORMAT, "filter": sanitize_record, "diagnose": False}

    _logger.remove()
    _logger.add(sys.stderr, colorize=True, backtrace=debug_mode, **common)

    log_file = _resolve_log_file()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file,
            colorize=False,
            backtrace=False,
            enqueue=True,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            **common,
        )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)


logger = ContextualLogger()

__all__ = [
    "ContextualLogger",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
