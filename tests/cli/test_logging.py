"""
Tests for structured logging functionality.
"""

import json
import logging
import re
import sys

import pytest

from marathon2consul.cli.logging import (
    NOISY_LOGGERS,
    ContextLogger,
    JSONFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def make_record(msg="Registered service", args=(), level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="SyncOrchestrator",
        level=level,
        pathname="orchestrator.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


# =============================================================================
# JSONFormatter Tests
# =============================================================================


class TestJSONFormatter:
    """Tests for the JSON log formatter."""

    def test_basic_format(self):
        """Test basic JSON log output format."""
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "SyncOrchestrator"
        assert parsed["message"] == "Registered service"
        assert "timestamp" in parsed

    def test_message_args(self):
        """Test JSON format with message formatting args."""
        record = make_record(msg="Planned %d registration(s)", args=(3,))
        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["message"] == "Planned 3 registration(s)"

    def test_exception(self):
        """Test JSON format includes exception info."""
        try:
            raise ValueError("Consul refused the registration")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "Consul refused the registration"
        assert "Traceback" in parsed["exception"]["traceback"]

    def test_extra_fields_grouped_under_context(self):
        record = make_record()
        record.app_id = "/prod/web"
        record.port = 8080

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["context"] == {"app_id": "/prod/web", "port": 8080}

    def test_no_context_without_extras(self):
        parsed = json.loads(JSONFormatter().format(make_record()))
        assert "context" not in parsed

    def test_static_fields(self):
        formatter = JSONFormatter(static_fields={"service": "marathon2consul", "version": "1.0.0"})
        parsed = json.loads(formatter.format(make_record()))

        assert parsed["service"] == "marathon2consul"
        assert parsed["version"] == "1.0.0"

    def test_location(self):
        """Test JSON format includes location info when enabled."""
        record = make_record()
        record.funcName = "sync"

        parsed = json.loads(JSONFormatter(include_location=True).format(record))

        assert parsed["location"] == {"file": "orchestrator.py", "line": 42, "function": "sync"}

    def test_optional_fields_excluded(self):
        formatter = JSONFormatter(include_timestamp=False, include_level=False, include_logger=False)
        parsed = json.loads(formatter.format(make_record()))

        assert parsed == {"message": "Registered service"}

    def test_timestamp_is_iso8601_utc(self):
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", parsed["timestamp"])

    def test_non_serializable_extra(self):
        record = make_record()
        record.payload = object()

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["context"]["payload"].startswith("<object object")


# =============================================================================
# TextFormatter Tests
# =============================================================================


class TestTextFormatter:
    """Tests for the text log formatter."""

    def test_plain(self):
        output = TextFormatter(use_colors=False).format(make_record())

        assert "INFO" in output
        assert "SyncOrchestrator: Registered service" in output
        assert "\033[" not in output

    def test_colors(self):
        output = TextFormatter(use_colors=True).format(make_record(level=logging.ERROR))

        assert output.startswith(TextFormatter.LEVEL_COLORS["ERROR"])
        assert output.endswith(TextFormatter.RESET)

    def test_context(self):
        record = make_record()
        record.app_id = "/prod/web"

        output = TextFormatter(use_colors=False, include_context=True).format(record)

        assert output.endswith("app_id='/prod/web'")

    def test_context_hidden_by_default(self):
        record = make_record()
        record.app_id = "/prod/web"

        output = TextFormatter(use_colors=False).format(record)

        assert "app_id" not in output


# =============================================================================
# ContextLogger Tests
# =============================================================================


class TestContextLogger:
    """Tests for the context logger wrapper."""

    def test_context_attached(self, caplog):
        logger = ContextLogger("test.context", {"app_id": "/prod/web"})

        with caplog.at_level(logging.INFO, logger="test.context"):
            logger.info("Fetched definition")

        assert caplog.records[0].app_id == "/prod/web"
        assert caplog.records[0].getMessage() == "Fetched definition"

    def test_bind_returns_new_logger(self, caplog):
        base = get_logger("test.bind", app_id="/prod/web")
        bound = base.bind(service_id="marathon-app-prod-web-80-")

        with caplog.at_level(logging.INFO, logger="test.bind"):
            base.info("base")
            bound.info("bound")

        base_record, bound_record = caplog.records
        assert not hasattr(base_record, "service_id")
        assert bound_record.app_id == "/prod/web"
        assert bound_record.service_id == "marathon-app-prod-web-80-"

    def test_call_extra_merged(self, caplog):
        logger = get_logger("test.extra", app_id="/a")

        with caplog.at_level(logging.DEBUG, logger="test.extra"):
            logger.debug("retry", extra={"attempt": 2})

        assert caplog.records[0].attempt == 2
        assert caplog.records[0].app_id == "/a"

    def test_levels(self, caplog):
        logger = get_logger("test.levels")

        with caplog.at_level(logging.DEBUG, logger="test.levels"):
            logger.debug("d")
            logger.info("i")
            logger.warning("w")
            logger.error("e")
            logger.critical("c")

        assert [r.levelname for r in caplog.records] == [
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ]

    def test_exception_includes_exc_info(self, caplog):
        logger = get_logger("test.exception")

        with caplog.at_level(logging.ERROR, logger="test.exception"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("failed")

        assert caplog.records[0].exc_info[0] is RuntimeError


# =============================================================================
# setup_logging Tests
# =============================================================================


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_text_handler(self, restore_root_logger):
        setup_logging(level=logging.DEBUG)

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)

    def test_json_handler_with_static_fields(self, restore_root_logger):
        setup_logging(log_format="json", static_fields={"service": "marathon2consul"})

        formatter = restore_root_logger.handlers[0].formatter
        assert isinstance(formatter, JSONFormatter)
        assert formatter.static_fields == {"service": "marathon2consul"}

    def test_replaces_existing_handlers(self, restore_root_logger):
        setup_logging()
        setup_logging()

        assert len(restore_root_logger.handlers) == 1

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "sync.log"
        setup_logging(log_format="json", log_file=str(log_file))

        logging.getLogger("test.file").warning("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "written to file"

    def test_log_file_never_colored(self, restore_root_logger, tmp_path):
        setup_logging(log_file=str(tmp_path / "sync.log"))

        file_handler = restore_root_logger.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert file_handler.formatter.use_colors is False

    def test_quiets_noisy_loggers(self, restore_root_logger):
        setup_logging(level=logging.DEBUG)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
