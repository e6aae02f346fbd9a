"""Unit tests for logging configuration."""

import logging

import pytest

from tabsense.core.logging_config import PACKAGE_LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


@pytest.mark.unit
class TestGetLogger:
    """Test logger naming."""

    def test_module_names_kept(self):
        assert get_logger("tabsense.profiler.frequency").name == "tabsense.profiler.frequency"

    def test_foreign_names_nested(self):
        assert get_logger("host_app").name == "tabsense.host_app"


@pytest.mark.unit
@pytest.mark.usefixtures("restore_package_logger")
class TestSetupLogging:
    """Test handler installation."""

    def test_sets_level(self):
        logger = setup_logging(level="debug")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_calls_do_not_duplicate_handlers(self):
        setup_logging(level="INFO")
        logger = setup_logging(level="INFO")

        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "tabsense.log"
        logger = setup_logging(level="INFO", log_file=log_file)

        get_logger("tabsense.test").info("hello from test")
        for handler in logger.handlers:
            handler.flush()

        assert "hello from test" in log_file.read_text(encoding="utf-8")

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")
