"""Tests for logging setup, masking and error aggregation."""

import json
import logging

import pytest

from cardmate.config import error_aggregator
from cardmate.config.error_aggregator import ErrorAggregator
from cardmate.config.error_aggregator import aggregate_error
from cardmate.config.error_aggregator import init_error_aggregator
from cardmate.config.logging import JsonFormatter
from cardmate.config.logging import setup_logging
from cardmate.config.logging_config import ErrorAggregationConfig
from cardmate.config.logging_config import LoggingConfig
from cardmate.config.logging_filters import SensitiveDataFilter
from cardmate.exceptions import StoreError
from cardmate.exceptions import handle_errors
from cardmate.utils.logging_utils import EnhancedLoggerMixin


@pytest.fixture
def no_aggregator():
    previous = error_aggregator._error_aggregator
    error_aggregator._error_aggregator = None
    yield
    error_aggregator._error_aggregator = previous

def test_mask_text():
    masking = SensitiveDataFilter()
    text = "GET course.php?key=abc123&mode=name | Context: token=xyz | user=bob"
    masked = masking.mask_text(text)
    assert "abc123" not in masked
    assert "xyz" not in masked
    assert "mode=name" in masked
    assert "user=bob" in masked

def test_filter_rewrites_record():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "api_key=%s", ("secret",), None)
    SensitiveDataFilter().filter(record)
    assert record.getMessage() == f"api_key={SensitiveDataFilter.MASK}"

def test_json_formatter():
    record = logging.LogRecord("cardmate.test", logging.WARNING, __file__, 1, "Something odd", (), None)
    data = json.loads(JsonFormatter().format(record))
    assert data['level'] == 'WARNING'
    assert data['message'] == 'Something odd'

def test_setup_logging_levels(tmp_path):
    setup_logging(LoggingConfig(level='ERROR'))
    assert logging.getLogger().level == logging.ERROR

    setup_logging(LoggingConfig(), verbose=True)
    assert logging.getLogger().level == logging.INFO

    log_file = tmp_path / "cardmate.log"
    setup_logging(LoggingConfig(), dev_mode=True, log_file=str(log_file))
    logging.getLogger("cardmate.test").debug("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")

def test_context_formatting(caplog):
    class Worker(EnhancedLoggerMixin):
        pass

    worker = Worker()
    worker.set_log_context(table='players')
    with caplog.at_level(logging.INFO):
        worker.info("Loaded", count=3)
    assert "Loaded | Context: table=players | count=3" in caplog.text

def test_aggregator_reports_at_threshold(caplog):
    aggregator = ErrorAggregator(ErrorAggregationConfig(enabled=True, error_threshold=2, report_interval=3600))
    try:
        aggregator.add_error("Store offline", "catalog")
        assert aggregator.pending() == {"Store offline": 1}
        with caplog.at_level(logging.ERROR, logger='error_aggregator'):
            aggregator.add_error("Store offline", "scorecards")
        assert aggregator.pending() == {}
        assert "occurrences: 2" in caplog.text
    finally:
        aggregator.shutdown()

def test_aggregate_error_without_aggregator(no_aggregator):
    aggregate_error("nothing configured", "tests")

def test_handle_errors_aggregates_and_reraises(no_aggregator):
    aggregator = init_error_aggregator(ErrorAggregationConfig(enabled=True, error_threshold=10))
    try:
        with pytest.raises(StoreError):
            with handle_errors(StoreError, "catalog", "add player"):
                raise StoreError("Failed to insert players")
        assert "Failed to insert players (Code: store_error)" in aggregator.pending()
    finally:
        aggregator.shutdown()
