"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from ngss_mcp.config.models import LoggingConfig, LogOutputConfig
from ngss_mcp.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)


class TestRequestIdCorrelation:
    """Request ID context variable tests."""

    def setup_method(self) -> None:
        """Clear request ID before each test."""
        clear_request_id()

    def test_given_request_id_when_set_then_can_retrieve(self) -> None:
        """Request ID can be set and retrieved."""
        # Given
        request_id = "test-123"

        # When
        result = set_request_id(request_id)

        # Then
        assert result == request_id
        assert get_request_id() == request_id

    def test_given_no_id_when_set_then_generates_short_hex(self) -> None:
        """Set generates a 12-char hex ID when none provided."""
        # When
        rid = set_request_id()

        # Then
        assert len(rid) == 12
        int(rid, 16)

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current request ID."""
        # Given
        set_request_id("to-clear")

        # When
        clear_request_id()

        # Then
        assert get_request_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_request_id()

    def teardown_method(self) -> None:
        logging.getLogger().handlers.clear()
        clear_request_id()

    def test_given_json_format_when_log_then_valid_json_on_stderr(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields on stderr."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("corpus_loaded", standards=15)

        # Then
        captured = capsys.readouterr()
        assert captured.out == ""
        lines = [line for line in captured.err.strip().split("\n") if line]
        data = json.loads(lines[-1])
        assert data["event"] == "corpus_loaded"
        assert data["standards"] == 15
        assert data["logger"] == "test"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_request_id_when_log_then_included(self, tmp_path: Path) -> None:
        """Active request ID is attached to every event."""
        # Given
        log_file = tmp_path / "ngss.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_request_id("req-42")

        # When
        structlog.get_logger("ngss_mcp.engine.ops").info("tool_start", tool="get_standard")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["request_id"] == "req-42"
        assert data["tool"] == "get_standard"

    def test_given_level_when_below_then_filtered(self, tmp_path: Path) -> None:
        """Events below the configured level are dropped."""
        # Given
        log_file = tmp_path / "ngss.log"
        configure_logging(
            config=LoggingConfig(
                level="WARNING",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        logger = get_logger("test")

        # When
        logger.info("quiet")
        logger.warning("loud")

        # Then
        content = log_file.read_text()
        assert "quiet" not in content
        assert "loud" in content

    def test_given_multi_output_config_when_configure_then_levels_apply_per_output(
        self, tmp_path: Path
    ) -> None:
        """Each output filters at its own level."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_stdout_output_when_stdout_protected_then_written_to_stderr(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """stdout carries MCP frames under stdio, so log lines move to stderr."""
        # Given
        configure_logging(
            config=LoggingConfig(outputs=[LogOutputConfig(format="json", destination="stdout")])
        )

        # When
        get_logger("test").info("corpus_loaded")

        # Then
        captured = capsys.readouterr()
        assert captured.out == ""
        assert json.loads(captured.err.strip().splitlines()[-1])["event"] == "corpus_loaded"

    def test_given_stdout_output_when_unprotected_then_written_to_stdout(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """HTTP transport leaves stdout free for logs."""
        configure_logging(
            config=LoggingConfig(outputs=[LogOutputConfig(format="json", destination="stdout")]),
            protect_stdout=False,
        )

        get_logger("test").info("corpus_loaded")

        captured = capsys.readouterr()
        assert json.loads(captured.out.strip().splitlines()[-1])["event"] == "corpus_loaded"

    def test_given_module_logger_when_log_then_logger_name_included(
        self, tmp_path: Path
    ) -> None:
        """Module-level structlog loggers report their module name."""
        # Given
        log_file = tmp_path / "nested" / "ngss.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        # When
        structlog.get_logger("ngss_mcp.engine.cache").info("cache_cleared")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["logger"] == "ngss_mcp.engine.cache"
        assert log_file.parent.is_dir()

    def test_given_reconfigure_when_called_twice_then_single_handler_per_output(self) -> None:
        configure_logging(level="INFO")
        configure_logging(level="DEBUG")

        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_given_stdlib_logger_when_log_then_rendered_through_structlog(
        self, tmp_path: Path
    ) -> None:
        """Foreign stdlib records share the same renderer."""
        # Given
        log_file = tmp_path / "ngss.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        # When
        logging.getLogger("third.party").warning("plain stdlib message")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "plain stdlib message"
        assert data["level"] == "warning"
