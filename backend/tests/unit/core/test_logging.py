"""
Unit Tests for structured logging
"""
import json
import logging

from complaintdesk.core.logging_config import (
    ComplaintDeskLogger,
    JSONFormatter,
    ContextualFormatter,
    logger,
    set_request_id,
    set_user_id,
)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("complaintdesk", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:

    def test_json_formatter_includes_context_and_extra(self):
        set_request_id("req-1")
        set_user_id("user-1")
        try:
            output = json.loads(JSONFormatter().format(make_record(event_type="complaint", complaint_id="c-1")))
        finally:
            set_request_id("")
            set_user_id("")

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["request_id"] == "req-1"
        assert output["user_id"] == "user-1"
        assert output["event_type"] == "complaint"
        assert output["complaint_id"] == "c-1"

    def test_contextual_formatter_defaults_to_dash(self):
        formatter = ContextualFormatter("[%(request_id)s] [%(user_id)s] %(message)s")

        assert formatter.format(make_record()) == "[-] [-] hello"


class TestComplaintDeskLogger:

    def test_module_logger_is_custom_class(self):
        assert isinstance(logger, ComplaintDeskLogger)
        assert logger.propagate is False

    def test_complaint_event_fields(self):
        records = []

        class Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Capture()
        logger.addHandler(handler)
        try:
            logger.log_complaint_event("status_updated", "c-1", actor_id="a-1", new_status="Resolved")
        finally:
            logger.removeHandler(handler)

        assert len(records) == 1
        assert records[0].getMessage() == "Complaint status_updated: c-1 by a-1"
        assert records[0].complaint_event == "status_updated"
        assert records[0].new_status == "Resolved"

    def test_failed_auth_event_is_warning(self):
        records = []

        class Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Capture()
        logger.addHandler(handler)
        try:
            logger.log_auth_event(event="login", success=False, user_email="ann@example.com", reason="Invalid credentials")
        finally:
            logger.removeHandler(handler)

        assert records[0].levelno == logging.WARNING
        assert records[0].auth_success is False
