"""Tests for console log suppression while the dashboard owns the screen."""

import logging

from core.logging_utils import _HANDLER_NAME, is_console_suppressed, setup_logging, suppress_console_logging


def _console_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "name", "") == _HANDLER_NAME]


def test_suppress_and_restore_console_handler():
    setup_logging("INFO")
    assert len(_console_handlers()) == 1

    suppress_console_logging(True)
    try:
        assert is_console_suppressed()
        assert _console_handlers() == []
        # Re-running setup while suppressed must not sneak a handler back in
        setup_logging("DEBUG")
        assert _console_handlers() == []
    finally:
        suppress_console_logging(False)

    assert not is_console_suppressed()
    assert len(_console_handlers()) == 1


def test_file_handler_receives_records(tmp_path):
    log_file = tmp_path / "dashboard.log"
    root = logging.getLogger()
    setup_logging("INFO", str(log_file))
    try:
        logging.getLogger("dashboard.test").info("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()
    finally:
        for handler in root.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()


def test_suppression_restores_handlers_on_named_loggers():
    logger = logging.getLogger("dashboard.test.console")
    handler = logging.StreamHandler()
    logger.addHandler(handler)
    try:
        suppress_console_logging(True)
        assert handler not in logger.handlers
        suppress_console_logging(False)

        assert handler in logger.handlers
    finally:
        logger.removeHandler(handler)
