"""Shared fixtures for validation worker tests."""

import pytest
import structlog

from validation_worker.config import Settings
from validation_worker.validators import (
    FieldSpec,
    FieldType,
    MaxLengthRule,
    NotEmptyRule,
    PasswordPolicy,
    PatternRule,
    RangeRule,
    RuleSet,
    ValidationEngine,
)
from validation_worker.validators.reference_data import EMAIL_PATTERN


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog configuration from leaking between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings():
    """Settings isolated from any .env file or caller environment overrides."""
    return Settings(
        _env_file=None,
        DEBUG=False,
        LOG_LEVEL="info",
        PASSWORD_MIN_LENGTH=8,
        PASSWORD_MAX_LENGTH=128,
        PASSWORD_REQUIRED_CLASSES=[],
        PASSWORD_MINIMUM_TIER=2,
        PASSWORD_MIN_ENTROPY_BITS=0.0,
        PASSWORD_BANNED_VALUES_FILE="",
        PASSWORD_USE_COMMON_DENYLIST=True,
        MINIMUM_BIRTHDAY_AGE=13,
    )


@pytest.fixture
def policy():
    return PasswordPolicy(
        min_length=8,
        max_length=64,
        required_classes=frozenset({"lowercase", "digit"}),
        banned_values=frozenset({"password1"}),
        minimum_tier=2,
    )


@pytest.fixture
def signup_fields():
    return [
        FieldSpec(name="email", type=FieldType.TEXT, required=True),
        FieldSpec(name="password", type=FieldType.PASSWORD, required=True),
        FieldSpec(name="age", type=FieldType.NUMBER),
        FieldSpec(name="nickname", type=FieldType.TEXT),
    ]


@pytest.fixture
def signup_rule_sets():
    return {
        "email": RuleSet("email", [NotEmptyRule(), PatternRule(EMAIL_PATTERN)]),
        "password": RuleSet("password", [NotEmptyRule(), MaxLengthRule(64)]),
        "age": RuleSet("age", [RangeRule(13, 120)]),
    }


@pytest.fixture
def engine(signup_fields, signup_rule_sets, policy):
    return ValidationEngine(
        fields=signup_fields,
        rule_sets=signup_rule_sets,
        password_fields={"password"},
        policy=policy,
    )
