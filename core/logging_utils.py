"""Lightweight logging helpers with UTC timestamps."""

from __future__ import annotations

import logging
import os
import time

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_HANDLER_NAME = "jamulus-root-handler"
_FILE_HANDLER_NAME = "jamulus-file-handler"

# Set while the dashboard owns the screen
_console_suppressed = False


_saved_handlers: list[logging.Handler] = []
_saved_logger_handlers: list[tuple[logging.Logger, logging.Handler]] = []


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def suppress_console_logging(suppress: bool = True):
    """Suppress console logging (dashboard mode). File logging continues."""
    global _console_suppressed, _saved_handlers, _saved_logger_handlers
    _console_suppressed = suppress

    root = logging.getLogger()

    if suppress:
        # Anything written to stderr would land in the middle of the grid
        _saved_handlers = []
        _saved_logger_handlers = []
        for handler in root.handlers[:]:
            if _is_console_handler(handler):
                _saved_handlers.append(handler)
                root.removeHandler(handler)

        for name in list(logging.Logger.manager.loggerDict.keys()):
            logger = logging.getLogger(name)
            for h in logger.handlers[:]:
                if _is_console_handler(h):
                    _saved_logger_handlers.append((logger, h))
                    logger.removeHandler(h)
    else:
        for handler in _saved_handlers:
            if handler not in root.handlers:
                root.addHandler(handler)
        _saved_handlers = []
        for logger, handler in _saved_logger_handlers:
            if handler not in logger.handlers:
                logger.addHandler(handler)
        _saved_logger_handlers = []


def is_console_suppressed() -> bool:
    return _console_suppressed


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        return getattr(logging, env_level, logging.INFO)
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def _formatter() -> logging.Formatter:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    formatter.converter = time.gmtime  # Force UTC timestamps
    return formatter


def setup_logging(level: str | int | None = None, log_file: str | None = None) -> logging.Logger:
    """Configure a single root handler (plus an optional file handler) once."""
    root = logging.getLogger()
    resolved_level = _resolve_level(level)

    has_handler = any(getattr(h, "name", "") == _HANDLER_NAME for h in root.handlers + _saved_handlers)
    if not has_handler:
        handler = logging.StreamHandler()
        handler.name = _HANDLER_NAME
        handler.setFormatter(_formatter())
        if _console_suppressed:
            _saved_handlers.append(handler)
        else:
            root.addHandler(handler)

    if log_file:
        has_file = any(getattr(h, "name", "") == _FILE_HANDLER_NAME for h in root.handlers)
        if not has_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.name = _FILE_HANDLER_NAME
            file_handler.setFormatter(_formatter())
            root.addHandler(file_handler)

    root.setLevel(resolved_level)
    for handler in root.handlers + _saved_handlers:
        if getattr(handler, "name", "") in (_HANDLER_NAME, _FILE_HANDLER_NAME):
            handler.setLevel(resolved_level)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured with the shared format."""
    setup_logging()
    return logging.getLogger(name)
