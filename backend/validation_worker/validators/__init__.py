"""Field Validator — deterministic rule and password-strength validation for records.

Usage:
    from validation_worker.validators import ValidationEngine, RuleSet, NotEmptyRule

    engine = ValidationEngine(fields, rule_sets, password_fields={"password"}, policy=policy)
    result = engine.validate(record)
    if not result.passed:
        # Map result.failures to user-facing messages
"""

from validation_worker.validators.base import BaseRule
from validation_worker.validators.engine import ValidationEngine
from validation_worker.validators.exceptions import ConfigurationError, ValidationWorkerError
from validation_worker.validators.loader import EngineConfig, build_engine, load_engine_config
from validation_worker.validators.models import (
    CharacterClass,
    CheckKind,
    FieldSpec,
    FieldType,
    Outcome,
    PasswordPolicy,
    ReasonCode,
    StrengthScore,
    ValidationResult,
)
from validation_worker.validators.password_strength import PasswordStrengthScorer, character_classes
from validation_worker.validators.protocols import PasswordStrengthProtocol, ValidationProtocol
from validation_worker.validators.rule_set import RuleSet
from validation_worker.validators.rules import (
    CustomPredicateRule,
    MaxLengthRule,
    MinLengthRule,
    NotEmptyRule,
    PatternRule,
    RangeRule,
    build_rule,
    is_absent,
)

__all__ = [
    "BaseRule",
    "CharacterClass",
    "CheckKind",
    "ConfigurationError",
    "CustomPredicateRule",
    "EngineConfig",
    "FieldSpec",
    "FieldType",
    "MaxLengthRule",
    "MinLengthRule",
    "NotEmptyRule",
    "Outcome",
    "PasswordPolicy",
    "PasswordStrengthProtocol",
    "PasswordStrengthScorer",
    "PatternRule",
    "RangeRule",
    "ReasonCode",
    "RuleSet",
    "StrengthScore",
    "ValidationEngine",
    "ValidationProtocol",
    "ValidationResult",
    "ValidationWorkerError",
    "build_engine",
    "build_rule",
    "character_classes",
    "is_absent",
    "load_engine_config",
]
