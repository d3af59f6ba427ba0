"""Logging utilities for the proximity assist runtime."""

from __future__ import annotations

import atexit
import logging
import logging.handlers
from pathlib import Path
import queue

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "proximity_assist"

console = Console(stderr=True)


def setup_logging() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, console=console)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


logger = setup_logging()

_queue_listener: logging.handlers.QueueListener | None = None
_queue_handler: logging.Handler | None = None
_file_log_path: Path | None = None
_atexit_registered = False


def configure_logging(level_name: str) -> None:
    """Set the application log level from a level name such as ``"DEBUG"``."""

    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        logger.warning("[CONFIG] Unknown logging level %r; using INFO", level_name)
        level = logging.INFO
    logger.setLevel(level)


def _shutdown_file_logging() -> None:
    global _queue_listener

    if _queue_listener is not None:
        _queue_listener.stop()
        _queue_listener = None


def enable_file_logging(log_path: Path) -> None:
    """Enable background file logging to the supplied log path."""

    global _queue_listener, _queue_handler, _file_log_path, _atexit_registered

    log_path = Path(log_path).expanduser()
    if _file_log_path == log_path and _queue_listener is not None:
        return

    _shutdown_file_logging()
    if _queue_handler is not None:
        logger.removeHandler(_queue_handler)
        _queue_handler = None

    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    _queue_handler = logging.handlers.QueueHandler(log_queue)
    logger.addHandler(_queue_handler)

    _queue_listener = logging.handlers.QueueListener(log_queue, file_handler)
    _queue_listener.start()
    _file_log_path = log_path

    if not _atexit_registered:
        atexit.register(_shutdown_file_logging)
        _atexit_registered = True
