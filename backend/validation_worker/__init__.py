"""Validation Worker — field validation with delegated password-strength scoring.

Usage:
    from validation_worker import ValidationWorker, FieldSpec, RuleSet, NotEmptyRule

    worker = ValidationWorker(fields, rule_sets, password_fields={"password"})
    result = worker.validate({"email": "dev@example.com", "password": "c0rrect-Horse"})
"""

from validation_worker.config import Settings, get_settings
from validation_worker.logging_config import configure_logging
from validation_worker.validators import (
    ConfigurationError,
    CustomPredicateRule,
    FieldSpec,
    FieldType,
    MaxLengthRule,
    MinLengthRule,
    NotEmptyRule,
    PasswordPolicy,
    PasswordStrengthProtocol,
    PasswordStrengthScorer,
    PatternRule,
    RangeRule,
    ReasonCode,
    RuleSet,
    StrengthScore,
    ValidationEngine,
    ValidationProtocol,
    ValidationResult,
)
from validation_worker.worker import ValidationWorker

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "CustomPredicateRule",
    "FieldSpec",
    "FieldType",
    "MaxLengthRule",
    "MinLengthRule",
    "NotEmptyRule",
    "PasswordPolicy",
    "PasswordStrengthProtocol",
    "PasswordStrengthScorer",
    "PatternRule",
    "RangeRule",
    "ReasonCode",
    "RuleSet",
    "Settings",
    "StrengthScore",
    "ValidationEngine",
    "ValidationProtocol",
    "ValidationResult",
    "ValidationWorker",
    "configure_logging",
    "get_settings",
]
