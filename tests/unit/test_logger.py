# tests/unit/test_logger.py
"""Tests for logging helpers"""

import json
import logging

import pytest

from taxi_etl.utils.logger import (
    JSONFormatter,
    PerformanceLogger,
    setup_pipeline_logging,
    timed_operation,
)


def make_record(message="Loaded rows", **extra):
    record = logging.LogRecord(
        name="taxi_etl.test", level=logging.INFO, pathname=__file__, lineno=10,
        msg=message, args=(), exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry['level'] == 'INFO'
        assert entry['logger'] == 'taxi_etl.test'
        assert entry['message'] == 'Loaded rows'
        assert 'timestamp' in entry

    def test_extra_fields_are_merged(self):
        entry = json.loads(JSONFormatter().format(make_record(rows_read=5, table_name="TripData")))

        assert entry['rows_read'] == 5
        assert entry['table_name'] == "TripData"


class TestPerformanceLogger:

    def test_end_without_start(self):
        assert PerformanceLogger("test").end_operation("never_started") == 0.0

    def test_start_and_end(self):
        performance_logger = PerformanceLogger("test")

        performance_logger.start_operation("read_csv")
        duration = performance_logger.end_operation("read_csv", rows=5)

        assert duration >= 0.0
        assert "read_csv" not in performance_logger.start_times


class TestTimedOperation:

    def test_records_duration(self):
        with timed_operation("deduplicate", logging.getLogger("test")) as timer:
            pass

        assert timer.duration >= 0.0

    def test_does_not_swallow_exceptions(self):
        with pytest.raises(ValueError):
            with timed_operation("validate", logging.getLogger("test")):
                raise ValueError("bad row")


class TestSetupPipelineLogging:

    def test_creates_log_files(self, tmp_path):
        root_logger = logging.getLogger()
        saved_handlers = root_logger.handlers[:]
        saved_level = root_logger.level
        try:
            setup_pipeline_logging("INFO", str(tmp_path / "logs"))
            logging.getLogger("taxi_etl.test").error("load failed")
            for handler in root_logger.handlers:
                handler.flush()

            assert (tmp_path / "logs" / "taxi_etl.log").exists()
            assert "load failed" in (tmp_path / "logs" / "errors.log").read_text()
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)
