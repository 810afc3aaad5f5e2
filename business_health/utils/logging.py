"""Logging configuration for the business health scoring engine."""

import logging
import logging.handlers
import os
import json
import traceback
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
import threading

from .config import config

ROOT_LOGGER_NAME = 'business_health'


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON.

        Args:
            record: Log record to format

        Returns:
            Formatted log message as JSON string
        """
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread': threading.current_thread().name,
            'process': os.getpid()
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)


class ContextualLogger:
    """Logger wrapper that adds contextual information to log messages.

    Context set with ``set_context`` belongs to this wrapper instance only;
    module-level loggers shared between threads should pass per-call
    ``extra`` fields instead.
    """

    def __init__(self, logger: logging.Logger):
        """Initialize contextual logger.

        Args:
            logger: Base logger instance
        """
        self.logger = logger
        self.context: Dict[str, Any] = {}

    def set_context(self, **kwargs):
        """Set context information for subsequent log messages."""
        self.context.update(kwargs)

    def clear_context(self):
        """Clear all context information."""
        self.context.clear()

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        extra_fields = self.context.copy()

        if 'extra' in kwargs:
            extra_fields.update(kwargs.pop('extra'))

        if extra_fields:
            kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, msg, *args, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log info message with context."""
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message with context."""
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log exception message with context."""
        kwargs['exc_info'] = True
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)


class OperationLogger:
    """Logger for tracking operations with start/end events."""

    def __init__(self, logger: ContextualLogger, operation_name: str):
        """Initialize operation logger.

        Args:
            logger: Contextual logger instance
            operation_name: Name of the operation
        """
        self.logger = logger
        self.operation_name = operation_name
        self.start_time: Optional[datetime] = None

    def start(self, **context):
        """Log operation start."""
        self.start_time = datetime.now(timezone.utc)
        self.logger.set_context(
            operation=self.operation_name,
            operation_start=self.start_time.isoformat(),
            **context
        )
        self.logger.debug(f"Starting operation: {self.operation_name}")

    def finish(self, success: bool = True, **context):
        """Log operation completion.

        Args:
            success: Whether the operation was successful
            **context: Additional context for the completion
        """
        end_time = datetime.now(timezone.utc)
        duration = (end_time - self.start_time).total_seconds() if self.start_time else 0.0

        self.logger.set_context(
            operation_end=end_time.isoformat(),
            operation_duration_seconds=duration,
            operation_success=success,
            **context
        )

        if success:
            self.logger.info(f"Completed operation: {self.operation_name} (Duration: {duration:.3f}s)")
        else:
            self.logger.error(f"Failed operation: {self.operation_name} (Duration: {duration:.3f}s)")


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: Optional[str] = None,
    backup_count: Optional[int] = None,
    structured_logging: bool = False
) -> logging.Logger:
    """Set up logging for the engine.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file; console only when not configured
        max_file_size: Maximum log file size (e.g., '10MB')
        backup_count: Number of backup log files to keep
        structured_logging: Whether to use structured JSON logging for files

    Returns:
        Configured package logger
    """
    log_level = log_level or config.get('business_health.logging.level', 'INFO')
    log_file = log_file or config.get('business_health.logging.file_path')
    max_file_size = max_file_size or config.get('business_health.logging.max_file_size', '10MB')
    if backup_count is None:
        backup_count = config.get('business_health.logging.backup_count', 5)
    structured_logging = structured_logging or config.get('business_health.logging.structured', False)

    level = getattr(logging, log_level.upper())
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_formatter = StructuredFormatter() if structured_logging else console_formatter

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        max_bytes = _parse_file_size(max_file_size)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> ContextualLogger:
    """Get a contextual logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Contextual logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f'{ROOT_LOGGER_NAME}.'):
        base_logger = logging.getLogger(name)
    else:
        base_logger = logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
    return ContextualLogger(base_logger)


def get_operation_logger(name: str, operation_name: str) -> OperationLogger:
    """Get an operation logger for tracking operation lifecycle.

    Args:
        name: Logger name (typically __name__)
        operation_name: Name of the operation to track

    Returns:
        Operation logger instance
    """
    return OperationLogger(get_logger(name), operation_name)


def log_data_quality_issue(
    logger: ContextualLogger,
    subject: str,
    data_type: str,
    issue_description: str,
    severity: str = 'warning',
    missing_fields: Optional[List[str]] = None,
    invalid_values: Optional[Dict[str, Any]] = None
):
    """Log data quality issues.

    Args:
        logger: Logger instance
        subject: Identifier of the business being scored
        data_type: Type of data (e.g., 'financial', 'operational')
        issue_description: Description of the issue
        severity: Severity level ('info', 'warning', 'error')
        missing_fields: List of missing fields
        invalid_values: Dictionary of invalid values
    """
    extra = {
        'subject': subject,
        'data_type': data_type,
        'data_quality_issue': True,
        'missing_fields': missing_fields or [],
        'invalid_values': invalid_values or {}
    }

    if severity == 'error':
        logger.error(f"Data quality error for {subject} ({data_type}): {issue_description}", extra=extra)
    elif severity == 'warning':
        logger.warning(f"Data quality warning for {subject} ({data_type}): {issue_description}", extra=extra)
    else:
        logger.info(f"Data quality info for {subject} ({data_type}): {issue_description}", extra=extra)


def _parse_file_size(size_str: str) -> int:
    """Parse file size string to bytes.

    Args:
        size_str: Size string (e.g., '10MB', '1GB')

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    if size_str.endswith('KB'):
        return int(size_str[:-2]) * 1024
    elif size_str.endswith('MB'):
        return int(size_str[:-2]) * 1024 * 1024
    elif size_str.endswith('GB'):
        return int(size_str[:-2]) * 1024 * 1024 * 1024
    else:
        # Assume bytes if no unit specified
        return int(size_str)
