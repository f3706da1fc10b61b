"""Tests for logging configuration and scoped context."""

import logging

from restrouter.core.logging import configure_logging, current_log_context, get_logger, log_context


class TestLogContext:
    def test_scoped_fields(self):
        """Fields are visible inside the block and gone afterwards."""
        assert current_log_context() == {}

        with log_context(run_id="run-1", database="shop") as fields:
            assert fields == {"run_id": "run-1", "database": "shop"}
            assert current_log_context() == fields

        assert current_log_context() == {}

    def test_nesting(self):
        with log_context(run_id="run-1"):
            with log_context(database="shop"):
                assert current_log_context() == {"run_id": "run-1", "database": "shop"}
            assert current_log_context() == {"run_id": "run-1"}


class TestConfigureLogging:
    def test_levels(self):
        configure_logging(log_level="WARNING", log_format="json")
        try:
            assert logging.getLogger().level == logging.WARNING
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            configure_logging()

    def test_debug_opens_library_loggers(self):
        configure_logging(log_level="DEBUG")
        try:
            assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG
        finally:
            configure_logging()

    def test_get_logger(self):
        logger = get_logger(__name__)
        assert hasattr(logger, "info")
