"""Tests for logging_config utilities"""

import logging
import tempfile
from pathlib import Path

import pytest

from aria_snapshot_mcp.utils.logging_config import (
    get_logger,
    log_dict,
    log_tool_result,
    setup_file_logging,
)


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers replaced by setup_file_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestSetupFileLogging:
    """Tests for setup_file_logging function"""

    def test_setup_file_logging_default(self, restore_root_logging):
        """Test setup_file_logging writes to the given file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "test.log"
            logger = setup_file_logging(log_file=log_file)

            logger.info("Test message")
            for handler in logger.handlers:
                handler.flush()

            assert log_file.exists()
            assert "Test message" in log_file.read_text()

    def test_setup_file_logging_custom_level(self, restore_root_logging):
        """Test setup_file_logging with custom log level"""
        with tempfile.TemporaryDirectory() as tmpdir:
            logger = setup_file_logging(log_file=Path(tmpdir) / "test.log", level=logging.DEBUG)
            assert logger.level <= logging.DEBUG

    def test_setup_file_logging_level_name(self, restore_root_logging):
        """Test the configured level name is accepted"""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "test.log"
            logger = setup_file_logging(log_file=log_file, level="warning")

            assert logger.level == logging.WARNING
            logger.info("hidden")
            logger.warning("shown")
            for handler in logger.handlers:
                handler.flush()
            text = log_file.read_text()
            assert "shown" in text
            assert "hidden" not in text

    def test_setup_file_logging_file_only(self, restore_root_logging):
        """Test no stream handlers are left on the root logger"""
        with tempfile.TemporaryDirectory() as tmpdir:
            logger = setup_file_logging(log_file=Path(tmpdir) / "test.log")
            assert all(isinstance(handler, logging.FileHandler) for handler in logger.handlers)

    def test_setup_file_logging_creates_directory(self, restore_root_logging):
        """Test that setup_file_logging creates parent directory"""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "subdir" / "nested" / "test.log"
            setup_file_logging(log_file=log_file)

            assert log_file.parent.exists()


class TestGetLogger:
    """Tests for get_logger function"""

    def test_get_logger_returns_logger(self):
        """Test get_logger returns a logger instance"""
        assert isinstance(get_logger("test_module"), logging.Logger)

    def test_get_logger_same_name_returns_same_logger(self):
        """Test get_logger returns same logger for same name"""
        assert get_logger("same_module") is get_logger("same_module")


class TestLogDict:
    """Tests for log_dict function"""

    def test_log_dict_logs_message_and_data(self, caplog):
        """Test log_dict logs message and key-value pairs"""
        logger = logging.getLogger("test_log_dict")

        with caplog.at_level(logging.INFO):
            log_dict(logger, "Matcher configuration:", {"update_snapshots": "none", "regexify_received": True})

        assert "Matcher configuration:" in caplog.text
        assert "update_snapshots: none" in caplog.text
        assert "regexify_received: True" in caplog.text

    def test_log_dict_redacts_sensitive_values(self, caplog):
        """Test log_dict redacts sensitive values"""
        logger = logging.getLogger("test_log_dict_sensitive")

        with caplog.at_level(logging.INFO):
            log_dict(logger, "Config:", {"api_token": "secret123", "normal_value": "visible"})

        assert "***REDACTED***" in caplog.text
        assert "secret123" not in caplog.text
        assert "normal_value: visible" in caplog.text


class TestLogToolResult:
    """Tests for log_tool_result decorator"""

    @pytest.mark.asyncio
    async def test_log_tool_result_logs_json(self, caplog):
        """Test decorator logs result as JSON"""
        logger = logging.getLogger("test_tool_result")

        @log_tool_result(logger)
        async def test_tool():
            return {"valid": True, "entries": 2}

        with caplog.at_level(logging.INFO):
            result = await test_tool()

        assert result == {"valid": True, "entries": 2}
        assert "TOOL_RESULT [test_tool]" in caplog.text
        assert '"entries": 2' in caplog.text

    @pytest.mark.asyncio
    async def test_log_tool_result_without_logger(self, caplog):
        """Test decorator uses function module logger when not provided"""

        @log_tool_result()
        async def no_logger_tool():
            return {"value": 1}

        with caplog.at_level(logging.INFO):
            result = await no_logger_tool()

        assert result == {"value": 1}
        assert "TOOL_RESULT [no_logger_tool]" in caplog.text

    @pytest.mark.asyncio
    async def test_log_tool_result_non_json_serializable(self, caplog):
        """Test decorator falls back to str for non-JSON results"""
        logger = logging.getLogger("test_non_json")

        class CustomObject:
            def __str__(self):
                return "custom_object_str"

        @log_tool_result(logger)
        async def custom_tool():
            return CustomObject()

        with caplog.at_level(logging.INFO):
            result = await custom_tool()

        assert isinstance(result, CustomObject)
        assert "custom_object_str" in caplog.text

    @pytest.mark.asyncio
    async def test_log_tool_result_with_exception(self, caplog):
        """Test decorator logs and propagates exceptions"""
        logger = logging.getLogger("test_exception")

        @log_tool_result(logger)
        async def failing_tool():
            raise ValueError("Tool failed")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError, match="Tool failed"):
                await failing_tool()

        assert "TOOL_ERROR [failing_tool]" in caplog.text

    def test_log_tool_result_preserves_function_name(self):
        """Test decorator preserves function name"""

        @log_tool_result(logging.getLogger("test_preserve"))
        async def my_named_tool():
            return {}

        assert my_named_tool.__name__ == "my_named_tool"
