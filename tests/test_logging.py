"""Unit tests for logging functionality."""

import json
import logging
import logging.handlers
import os
import sys
from unittest.mock import MagicMock

import pytest

from business_health.utils.logging import (
    ContextualLogger, OperationLogger, StructuredFormatter,
    get_logger, get_operation_logger, log_data_quality_issue, setup_logging
)


@pytest.fixture
def package_logger():
    """Restore the package logger after a test reconfigures it."""
    logger = logging.getLogger('business_health')
    handlers = logger.handlers[:]
    level = logger.level
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestStructuredFormatter:
    """Test cases for StructuredFormatter."""

    def test_basic_formatting(self):
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            name="business_health.engine",
            level=logging.INFO,
            pathname="engine.py",
            lineno=7,
            msg="Calculated %s",
            args=('acme',),
            exc_info=None
        )

        log_entry = json.loads(formatter.format(record))

        assert log_entry['level'] == 'INFO'
        assert log_entry['logger'] == 'business_health.engine'
        assert log_entry['message'] == 'Calculated acme'
        assert log_entry['line'] == 7
        assert 'timestamp' in log_entry

    def test_timestamp_from_record(self):
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            name="business_health", level=logging.INFO, pathname="x.py", lineno=1,
            msg="Scored", args=(), exc_info=None
        )
        record.created = 0.0

        log_entry = json.loads(formatter.format(record))

        assert log_entry['timestamp'] == '1970-01-01T00:00:00+00:00'

    def test_extra_fields_merged(self):
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            name="business_health", level=logging.WARNING, pathname="x.py", lineno=1,
            msg="Data quality warning", args=(), exc_info=None
        )
        record.extra_fields = {'business': 'acme', 'missing_fields': ['profit']}

        log_entry = json.loads(formatter.format(record))

        assert log_entry['business'] == 'acme'
        assert log_entry['missing_fields'] == ['profit']

    def test_exception_formatting(self):
        formatter = StructuredFormatter()
        try:
            raise ValueError("Test error")
        except ValueError:
            record = logging.LogRecord(
                name="business_health", level=logging.ERROR, pathname="x.py", lineno=1,
                msg="Error occurred", args=(), exc_info=sys.exc_info()
            )

        log_entry = json.loads(formatter.format(record))

        assert log_entry['exception']['type'] == 'ValueError'
        assert log_entry['exception']['message'] == 'Test error'


class TestContextualLogger:
    """Test cases for ContextualLogger."""

    def test_get_logger_prefixes_package(self):
        assert get_logger('scripts.report').logger.name == 'business_health.scripts.report'
        assert get_logger('business_health.engine').logger.name == 'business_health.engine'

    def test_context_and_extra_are_combined(self):
        base = MagicMock()
        logger = ContextualLogger(base)
        logger.set_context(batch='nightly')

        logger.info('Scored', extra={'business': 'acme'})

        base.log.assert_called_once_with(
            logging.INFO, 'Scored', extra={'extra_fields': {'batch': 'nightly', 'business': 'acme'}}
        )

    def test_clear_context(self):
        base = MagicMock()
        logger = ContextualLogger(base)
        logger.set_context(batch='nightly')
        logger.clear_context()

        logger.warning('Plain')

        base.log.assert_called_once_with(logging.WARNING, 'Plain')


class TestOperationLogger:
    """Test cases for OperationLogger."""

    def test_success_lifecycle(self):
        contextual = MagicMock()
        op_logger = OperationLogger(contextual, 'calculate_health_scores')

        op_logger.start(business='acme')
        op_logger.finish(success=True, overall=71.2)

        contextual.debug.assert_called_once_with('Starting operation: calculate_health_scores')
        assert contextual.info.call_args[0][0].startswith('Completed operation: calculate_health_scores')
        final_context = contextual.set_context.call_args_list[-1][1]
        assert final_context['operation_success'] is True
        assert final_context['overall'] == 71.2

    def test_failure_logged_as_error(self):
        contextual = MagicMock()
        op_logger = OperationLogger(contextual, 'calculate_health_scores')

        op_logger.finish(success=False, error='boom')

        assert contextual.error.call_args[0][0].startswith('Failed operation: calculate_health_scores')

    def test_each_call_gets_fresh_context(self):
        first = get_operation_logger('business_health.engine', 'op')
        second = get_operation_logger('business_health.engine', 'op')

        first.start(business='a')

        assert second.logger.context == {}


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_console_only(self, package_logger):
        logger = setup_logging(log_level='WARNING')

        assert logger is package_logger
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_file_handler(self, package_logger, tmp_path):
        log_file = str(tmp_path / 'logs' / 'health.log')

        logger = setup_logging(log_level='DEBUG', log_file=log_file, max_file_size='1MB', backup_count=2,
                               structured_logging=True)

        rotating = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(logger.handlers) == 2
        assert len(rotating) == 1
        assert rotating[0].maxBytes == 1024 * 1024
        assert rotating[0].backupCount == 2
        assert isinstance(rotating[0].formatter, StructuredFormatter)
        assert rotating[0].baseFilename.endswith('health.log')
        assert os.path.isdir(tmp_path / 'logs')


class TestDataQualityLogging:
    """Test cases for log_data_quality_issue."""

    @pytest.mark.parametrize('severity, method', [
        ('error', 'error'), ('warning', 'warning'), ('info', 'info')
    ])
    def test_severity_routing(self, severity, method):
        logger = MagicMock()

        log_data_quality_issue(logger, 'acme', 'financial', 'profit exceeds revenue',
                               severity=severity, invalid_values={'profit_exceeds_revenue': 'inconsistent'})

        call = getattr(logger, method).call_args
        assert 'acme' in call[0][0]
        assert call[1]['extra']['data_quality_issue'] is True
        assert call[1]['extra']['invalid_values'] == {'profit_exceeds_revenue': 'inconsistent'}
        assert call[1]['extra']['missing_fields'] == []
