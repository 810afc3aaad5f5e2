"""Custom exceptions for the business health scoring engine."""

import traceback
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class HealthScoringError(Exception):
    """Base exception for health scoring errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        """Initialize the exception with enhanced error information.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for categorization
            context: Additional context information
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)
        self.traceback_str = (
            ''.join(traceback.format_exception(
                type(original_exception), original_exception, original_exception.__traceback__
            ))
            if original_exception else None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context,
            'timestamp': self.timestamp.isoformat(),
            'original_exception': repr(self.original_exception) if self.original_exception else None,
            'traceback': self.traceback_str
        }

    def __str__(self) -> str:
        """String representation with enhanced information."""
        base_msg = f"[{self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" (Context: {context_str})"
        return base_msg


class CalculationError(HealthScoringError):
    """Raised when a health score calculation fails."""

    def __init__(
        self,
        message: str,
        business_id: Optional[str] = None,
        calculation_type: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        if business_id:
            context['business_id'] = business_id
        if calculation_type:
            context['calculation_type'] = calculation_type

        super().__init__(
            message,
            error_code=kwargs.pop('error_code', "CALCULATION_ERROR"),
            context=context,
            **kwargs
        )


class ConfigurationError(HealthScoringError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        if config_key:
            context['config_key'] = config_key
        if config_file:
            context['config_file'] = config_file

        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            context=context,
            **kwargs
        )


class ValidationError(HealthScoringError):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        validation_rule: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        if field_name:
            context['field_name'] = field_name
        if field_value is not None:
            context['field_value'] = str(field_value)
        if validation_rule:
            context['validation_rule'] = validation_rule

        super().__init__(
            message,
            error_code="VALIDATION_ERROR",
            context=context,
            **kwargs
        )
