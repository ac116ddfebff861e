"""
System failure error classifications for unrecoverable errors.

These exceptions represent failures that need a configuration or code change
rather than different input data.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(SystemFailureError):
    """Configuration could not be loaded or failed validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None,
                 config_path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or []
        self.config_path = config_path


class MetricsCalculationError(SystemFailureError):
    """Inputs to a calculation are inconsistent with each other."""

    def __init__(self, message: str, metric_name: Optional[str] = None,
                 calculation_input: Optional[dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name
        self.calculation_input = calculation_input


class PersistenceError(SystemFailureError):
    """File system export or import failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
