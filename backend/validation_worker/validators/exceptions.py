"""Validation worker exceptions.

Only configuration problems are exceptions. A value failing a rule is data,
reported as reason codes inside a ValidationResult.
"""

from typing import Optional


class ValidationWorkerError(ValueError):
    """Base class for all validation worker errors."""


class ConfigurationError(ValidationWorkerError):
    """Raised when field, rule, or policy configuration is structurally invalid.

    Always raised before an engine exists; an engine that was constructed
    successfully never raises it.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        if field:
            message = f"{message} (field '{field}')"
        super().__init__(message)
