"""Unit tests for logger configuration."""

import io

from loguru import logger as _logger

from crypto_news_feed.config import Config, LoggingConfig, set_config
from crypto_news_feed.logger import get_logger, logger as app_logger, setup_logger


class TestSetupLogger:
    """Tests for setup_logger function."""

    def teardown_method(self):
        _logger.remove()

    def test_setup_logger_adds_handlers(self):
        """Test that setup_logger leaves a working logger."""
        setup_logger()

        output = io.StringIO()
        handler_id = _logger.add(output, format="{message}")
        _logger.info("Test")
        assert "Test" in output.getvalue()
        _logger.remove(handler_id)

    def test_setup_logger_writes_file(self, tmp_path):
        """Test setup_logger with file logging enabled."""
        log_file = tmp_path / "feed.log"
        set_config(
            Config(logging=LoggingConfig(file_enabled=True, console_enabled=False, file_path=str(log_file)))
        )

        setup_logger(level="DEBUG", rotation="1 MB", retention="1 day")
        _logger.info("Test message")

        # Removing the handler flushes the queue
        _logger.remove()

        content = log_file.read_text()
        assert "Test message" in content
        assert "INFO" in content

    def test_log_file_argument_overrides_config(self, tmp_path):
        configured = tmp_path / "configured.log"
        override = tmp_path / "nested" / "override.log"
        set_config(
            Config(logging=LoggingConfig(file_enabled=True, console_enabled=False, file_path=str(configured)))
        )

        setup_logger(log_file=str(override))
        _logger.info("Routed")
        _logger.remove()

        assert "Routed" in override.read_text()
        assert not configured.exists()

    def test_file_handler_disabled(self, tmp_path):
        """Test that no file is written when file logging is disabled."""
        log_file = tmp_path / "disabled.log"
        set_config(Config(logging=LoggingConfig(file_enabled=False, file_path=str(log_file))))

        setup_logger()
        _logger.info("Not written")
        _logger.remove()

        assert not log_file.exists()

    def test_level_filters_messages(self, tmp_path):
        """Test that messages below the configured level are dropped."""
        log_file = tmp_path / "level.log"
        set_config(
            Config(logging=LoggingConfig(file_enabled=True, console_enabled=False, file_path=str(log_file)))
        )

        setup_logger(level="WARNING")
        _logger.info("quiet")
        _logger.warning("loud")
        _logger.remove()

        content = log_file.read_text()
        assert "loud" in content
        assert "quiet" not in content


class TestGetLogger:
    """Tests for get_logger function."""

    def test_named_logger_binds_name(self):
        output = io.StringIO()
        handler_id = _logger.add(output, format="{extra[name]} {message}")

        get_logger("crypto_news_feed.test").info("hello")

        _logger.remove(handler_id)
        assert "crypto_news_feed.test hello" in output.getvalue()

    def test_unnamed_logger(self):
        assert get_logger() is app_logger
