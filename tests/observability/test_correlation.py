"""
Test suite for correlation ID propagation and log formatting.

System role: Verification of request tracing
"""

import logging

from backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from backend.observability.logger import CorrelationIdFilter, configure_logging


class TestCorrelationId:
    """Test suite for the correlation ID context."""

    def test_set_should_use_given_id(self) -> None:
        try:
            assert set_correlation_id("abc") == "abc"
            assert get_correlation_id() == "abc"
        finally:
            clear_correlation_id()

    def test_set_without_id_should_generate_one(self) -> None:
        try:
            generated = set_correlation_id()
            assert generated
            assert get_correlation_id() == generated
        finally:
            clear_correlation_id()

    def test_clear_should_reset_to_empty(self) -> None:
        set_correlation_id("abc")
        clear_correlation_id()
        assert get_correlation_id() == ""


class TestCorrelationIdFilter:
    """Test suite for log record enrichment."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    def test_filter_should_attach_current_id(self) -> None:
        record = self._record()
        try:
            set_correlation_id("req-42")
            assert CorrelationIdFilter().filter(record)
        finally:
            clear_correlation_id()

        assert record.correlation_id == "req-42"

    def test_filter_should_use_placeholder_outside_requests(self) -> None:
        record = self._record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


class TestConfigureLogging:
    """Test suite for root logger configuration."""

    def test_configure_logging_should_install_single_correlated_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug")
            configure_logging("warning")

            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
            assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)
            assert "%(correlation_id)s" in root.handlers[0].formatter._fmt
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
