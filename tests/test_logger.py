"""Unit tests for logger setup."""

import logging

from declutter.utils.logger import setup_logger


def test_writes_to_configured_log_dir(tmp_path):
    log_dir = tmp_path / "custom_logs"
    logger = setup_logger("declutter_ai.test_log_dir", "DEBUG", str(log_dir))

    logger.debug("hello from test")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert "hello from test" in (log_dir / "app.log").read_text()

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
