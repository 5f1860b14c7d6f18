import logging
from logging.handlers import RotatingFileHandler

import pytest

from profit_tracker import settings
from profit_tracker.logger import QUIET_LOGGERS, setup_logger


@pytest.fixture
def fresh_logger():
    created = []

    def _make(name, *args, **kwargs):
        logger = setup_logger(name, *args, **kwargs)
        created.append(logger)
        return logger

    yield _make
    for logger in created:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


class TestSetupLogger:
    def test_console_and_file_handlers(self, fresh_logger):
        logger = fresh_logger("profit_tracker.test_logger", logging.DEBUG)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert (settings.LOG_DIR / settings.LOG_FILENAME).exists()

        # Calling again must not stack handlers.
        assert setup_logger("profit_tracker.test_logger").handlers == logger.handlers

    def test_rotation_follows_settings(self, fresh_logger, monkeypatch):
        monkeypatch.setattr(settings, "LOG_MAX_BYTES", 1024)
        monkeypatch.setattr(settings, "LOG_BACKUP_COUNT", 7)
        logger = fresh_logger("profit_tracker.test_rotation")
        [file_handler] = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert file_handler.maxBytes == 1024
        assert file_handler.backupCount == 7

    def test_explicit_log_file(self, fresh_logger, tmp_path):
        log_file = tmp_path / "custom" / "sales.log"
        logger = fresh_logger("profit_tracker.test_custom_file", log_file=log_file)
        logger.info("Sold 3 x Mugs")
        for handler in logger.handlers:
            handler.flush()
        assert "Sold 3 x Mugs" in log_file.read_text(encoding="utf-8")

    def test_quiets_http_libraries(self, fresh_logger):
        fresh_logger("profit_tracker.test_quiet")
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
