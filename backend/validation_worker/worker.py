"""Validation worker — the caller-facing wrapper around a ValidationEngine.

The worker conforms to ValidationProtocol and holds the password strength
collaborator it was given. It owns exactly one engine at a time; reconfiguring
builds a new engine and swaps the reference, so in-flight validate() calls
finish against the configuration they started with.
"""

import threading
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, Optional

import structlog

from validation_worker.config import Settings, get_settings
from validation_worker.validators.engine import ValidationEngine
from validation_worker.validators.loader import ConfigSource, load_engine_config
from validation_worker.validators.models import (
    PasswordPolicy,
    ReasonCode,
    StrengthScore,
    ValidationResult,
)
from validation_worker.validators.password_strength import PasswordStrengthScorer
from validation_worker.validators.protocols import PasswordStrengthProtocol
from validation_worker.validators.reference_data import (
    EMAIL_MAX_LENGTH,
    MAX_HUMAN_AGE,
    NAME_MAX_LENGTH,
    NAME_PATTERN,
    PHONE_PATTERN,
)
from validation_worker.validators.rule_set import RuleSet
from validation_worker.validators.rules import (
    MaxLengthRule,
    NotEmptyRule,
    PatternRule,
    RangeRule,
    is_absent,
)

logger = structlog.get_logger()


class ValidationWorker:
    """Validates records and single values; delegates password grading.

    Collaborators are injected, never looked up: the password strength worker
    and the settings are constructor arguments with defaults.
    """

    def __init__(
        self,
        fields=(),
        rule_sets: Optional[Mapping[str, RuleSet]] = None,
        password_fields=(),
        policy: Optional[PasswordPolicy] = None,
        password_strength_worker: Optional[PasswordStrengthProtocol] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            fields: Declared FieldSpecs for record validation
            rule_sets: RuleSet per field name
            password_fields: Names of password-typed fields to grade
            policy: Password policy. Defaults to PasswordPolicy.from_settings()
            password_strength_worker: Scorer. Defaults to PasswordStrengthScorer()
            settings: Settings. Defaults to get_settings()

        Raises:
            ConfigurationError: invalid fields, rules, or policy
        """
        self._settings = settings or get_settings()
        self._swap_lock = threading.Lock()
        self._engine = ValidationEngine(
            fields=fields,
            rule_sets=rule_sets or {},
            password_fields=password_fields,
            policy=policy if policy is not None else PasswordPolicy.from_settings(self._settings),
            scorer=password_strength_worker or PasswordStrengthScorer(),
        )

        # Rule sets behind the single-value checks
        self._email_rules = RuleSet("email", [
            NotEmptyRule(),
            MaxLengthRule(EMAIL_MAX_LENGTH),
            PatternRule(self._settings.EMAIL_PATTERN),
        ])
        self._name_rules = RuleSet("name", [
            NotEmptyRule(),
            MaxLengthRule(NAME_MAX_LENGTH),
            PatternRule(NAME_PATTERN),
        ])
        self._phone_rules = RuleSet("phone", [NotEmptyRule(), PatternRule(PHONE_PATTERN)])
        self._percentage_rules = RuleSet("percentage", [NotEmptyRule(), RangeRule(0, 100)])
        self._age_rule = RangeRule(self._settings.MINIMUM_BIRTHDAY_AGE, MAX_HUMAN_AGE)

    @classmethod
    def from_config(
        cls,
        source: ConfigSource,
        predicates: Optional[Mapping[str, Callable[..., Any]]] = None,
        password_strength_worker: Optional[PasswordStrengthProtocol] = None,
        settings: Optional[Settings] = None,
    ) -> "ValidationWorker":
        """Build a worker from a JSON rule config (see validators.loader)."""
        config = load_engine_config(source, predicates)
        return cls(
            fields=config.fields,
            rule_sets=config.rule_sets,
            password_fields=config.password_fields,
            policy=config.policy,
            password_strength_worker=password_strength_worker,
            settings=settings,
        )

    # ── Collaborators ──

    @property
    def engine(self) -> ValidationEngine:
        return self._engine

    @property
    def password_strength_worker(self) -> PasswordStrengthProtocol:
        return self._engine.scorer

    @password_strength_worker.setter
    def password_strength_worker(self, worker: PasswordStrengthProtocol) -> None:
        self.reconfigure(scorer=worker)

    @property
    def policy(self) -> PasswordPolicy:
        return self._engine.policy

    def reconfigure(self, **changes) -> ValidationEngine:
        """Swap in a new engine built from the current one plus `changes`.

        Accepts the keyword arguments of ValidationEngine.reconfigure().
        On ConfigurationError the current engine stays in place.
        """
        with self._swap_lock:
            engine = self._engine.reconfigure(**changes)
            self._engine = engine
        logger.info("engine_reconfigured", changed=sorted(changes))
        return engine

    # ── ValidationProtocol ──

    def validate(self, record: Mapping[str, Any], context: Optional[Mapping] = None) -> ValidationResult:
        return self._engine.validate(record, context)

    # ── Password strength ──

    def check_password_strength(self, password: str) -> StrengthScore:
        engine = self._engine
        return engine.scorer.score(password, engine.policy)

    def validate_password(self, password: Any) -> list[str]:
        """Reason codes for a standalone password: scorer reasons, then WeakPassword if below the policy tier."""
        if is_absent(password):
            return [ReasonCode.REQUIRED.value]
        engine = self._engine
        score = engine.scorer.score(password, engine.policy)
        reasons = list(score.reasons)
        if not score.meets(engine.policy):
            reasons.append(ReasonCode.WEAK_PASSWORD.value)
        return reasons

    # ── Single-value checks ──

    def validate_email(self, value: Any) -> list[str]:
        return self._email_rules.evaluate_field(value)

    def validate_name(self, value: Any) -> list[str]:
        return self._name_rules.evaluate_field(value)

    def validate_phone(self, value: Any) -> list[str]:
        return self._phone_rules.evaluate_field(value)

    def validate_number(self, value: Any, minimum=None, maximum=None) -> list[str]:
        rules = RuleSet("number", [NotEmptyRule(), RangeRule(minimum, maximum)])
        return rules.evaluate_field(value)

    def validate_percentage(self, value: Any) -> list[str]:
        return self._percentage_rules.evaluate_field(value)

    def validate_birthday(self, value: Any, today: Optional[date] = None) -> list[str]:
        """Birthday must be a date, not in the future, and old enough.

        Args:
            value: date or datetime
            today: Reference date, defaults to date.today()
        """
        if is_absent(value):
            return [ReasonCode.REQUIRED.value]
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            return [ReasonCode.TYPE_MISMATCH.value]

        today = today or date.today()
        age = today.year - value.year - ((today.month, today.day) < (value.month, value.day))
        if value > today:
            age = -1
        outcome = self._age_rule.evaluate(age)
        return [] if outcome.passed else [outcome.reason_code]
