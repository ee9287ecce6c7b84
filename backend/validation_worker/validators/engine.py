"""Validation Engine — runs field RuleSets, scores password fields, produces a result.

This is the main entry point for record validation. Configuration is checked
once, at construction; validate() only ever returns data.

Usage:
    engine = ValidationEngine(fields, rule_sets, password_fields={"password"}, policy=policy)
    result = engine.validate({"email": "a@b.co", "password": "s3cret!Pass"})
    if not result.passed:
        # Map result.failures reason codes to messages
"""

import time
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

import structlog

from validation_worker.validators.exceptions import ConfigurationError
from validation_worker.validators.models import (
    FieldSpec,
    FieldType,
    PasswordPolicy,
    ReasonCode,
    StrengthScore,
    ValidationResult,
)
from validation_worker.validators.password_strength import PasswordStrengthScorer
from validation_worker.validators.protocols import PasswordStrengthProtocol
from validation_worker.validators.rule_set import RuleSet
from validation_worker.validators.rules import is_absent

logger = structlog.get_logger()

_UNSET: Any = object()


class ValidationEngine:
    """Validates records of named fields against immutable configuration.

    Design principles:
        - Deterministic: same input → same output
        - Immutable: nothing changes after __init__; reconfigure() returns a new engine
        - Thread-safe: validate() only writes to its own result
        - Injectable: the password scorer is any PasswordStrengthProtocol
    """

    def __init__(
        self,
        fields: Union[Iterable[FieldSpec], Mapping[str, FieldSpec]],
        rule_sets: Mapping[str, RuleSet],
        password_fields: Iterable[str] = (),
        policy: Optional[PasswordPolicy] = None,
        scorer: Optional[PasswordStrengthProtocol] = None,
    ):
        """
        Args:
            fields: Declared fields, as specs or a name → spec mapping
            rule_sets: RuleSet per field name
            password_fields: Fields graded by the scorer; each must be declared
                with type 'password'
            policy: Password policy. Defaults to PasswordPolicy()
            scorer: Strength scorer. Defaults to PasswordStrengthScorer()

        Raises:
            ConfigurationError: any structural problem in the configuration
        """
        try:
            self._fields = self._index_fields(fields)
            self._policy = policy if policy is not None else PasswordPolicy()
            self._scorer = scorer if scorer is not None else PasswordStrengthScorer()
            self._rule_sets = self._bind_rule_sets(rule_sets)
            self._password_fields = self._check_password_fields(password_fields)
            self._check_policy()
        except ConfigurationError as e:
            logger.error("configuration_rejected", error=str(e), field=e.field)
            raise

        # Declaration order drives evaluation and result ordering
        self._evaluated = tuple(
            name for name in self._fields
            if name in self._rule_sets or name in self._password_fields
        )

        logger.info(
            "engine_configured",
            fields=len(self._fields),
            rule_sets=len(self._rule_sets),
            password_fields=sorted(self._password_fields),
            scorer=type(self._scorer).__name__,
        )

    # ── Construction checks ──

    @staticmethod
    def _index_fields(fields) -> Mapping[str, FieldSpec]:
        specs = fields.values() if isinstance(fields, Mapping) else fields
        indexed: dict[str, FieldSpec] = {}
        for spec in specs:
            if not isinstance(spec, FieldSpec):
                raise ConfigurationError(f"Not a field spec: {spec!r}")
            if spec.name in indexed:
                raise ConfigurationError("Field declared more than once", field=spec.name)
            indexed[spec.name] = spec
        if isinstance(fields, Mapping):
            for key, spec in fields.items():
                if key != spec.name:
                    raise ConfigurationError(f"Field mapped under key '{key}'", field=spec.name)
        return MappingProxyType(indexed)

    def _bind_rule_sets(self, rule_sets: Mapping[str, RuleSet]) -> Mapping[str, RuleSet]:
        bound: dict[str, RuleSet] = {}
        for name, rule_set in rule_sets.items():
            if not isinstance(rule_set, RuleSet):
                raise ConfigurationError(f"Not a RuleSet: {rule_set!r}", field=name)
            if name not in self._fields:
                raise ConfigurationError("RuleSet references an undeclared field", field=name)
            if rule_set.field != name:
                raise ConfigurationError(f"RuleSet for '{rule_set.field}' mapped under key '{name}'", field=name)
            rule_set.check()
            # Either side may mark the field required; neither can clear the other
            bound[name] = rule_set.with_required(rule_set.required or self._fields[name].required)
        return MappingProxyType(bound)

    def _check_password_fields(self, password_fields: Iterable[str]) -> frozenset[str]:
        names = frozenset(password_fields)
        for name in sorted(names):
            spec = self._fields.get(name)
            if spec is None:
                raise ConfigurationError("Password field is not declared", field=name)
            if spec.type != FieldType.PASSWORD:
                raise ConfigurationError(f"Password field declared as type '{spec.type.value}'", field=name)
        return names

    def _check_policy(self) -> None:
        if not isinstance(self._policy, PasswordPolicy):
            raise ConfigurationError(f"Not a PasswordPolicy: {self._policy!r}")
        if not isinstance(self._scorer, PasswordStrengthProtocol):
            raise ConfigurationError(f"Scorer {self._scorer!r} has no score(password, policy) method")
        self._policy.check()

    # ── Accessors ──

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return self._fields

    @property
    def rule_sets(self) -> Mapping[str, RuleSet]:
        return self._rule_sets

    @property
    def password_fields(self) -> frozenset[str]:
        return self._password_fields

    @property
    def policy(self) -> PasswordPolicy:
        return self._policy

    @property
    def scorer(self) -> PasswordStrengthProtocol:
        return self._scorer

    # ── Evaluation ──

    def validate(self, record: Mapping[str, Any], context: Optional[Mapping] = None) -> ValidationResult:
        """Validate a record and produce a result.

        Fields without a RuleSet or password scoring are ignored, which allows
        partial, staged validation.

        Args:
            record: Field name → value. Missing fields are treated as None
            context: Optional read-only data handed to every rule

        Returns:
            ValidationResult with pass/fail, reason codes, and strength scores

        Raises:
            TypeError: record is not a mapping
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"record must be a mapping, got {type(record).__name__}")

        start_time = time.perf_counter()
        failures: dict[str, list[str]] = {}
        strengths: dict[str, StrengthScore] = {}

        for name in self._evaluated:
            reasons = self._evaluate(name, record.get(name), context, strengths)
            if reasons:
                failures[name] = reasons

        result = ValidationResult.build(failures, strengths)

        logger.debug(
            "validation_complete",
            passed=result.passed,
            failed_fields=result.failed_fields,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
        )
        return result

    def validate_field(self, name: str, value: Any, context: Optional[Mapping] = None) -> list[str]:
        """Validate a single field in isolation; unknown fields pass."""
        if name not in self._evaluated:
            return []
        return self._evaluate(name, value, context, {})

    def _evaluate(
        self,
        name: str,
        value: Any,
        context: Optional[Mapping],
        strengths: dict[str, StrengthScore],
    ) -> list[str]:
        rule_set = self._rule_sets.get(name)
        if rule_set is not None:
            reasons = rule_set.evaluate_field(value, context)
        elif self._fields[name].required and is_absent(value):
            reasons = [ReasonCode.REQUIRED.value]
        else:
            reasons = []

        # Only a password that passed its own rules is graded
        if name in self._password_fields and not reasons and value is not None:
            try:
                score = self._scorer.score(value, self._policy)
            except Exception as e:
                # An injected scorer must not break the whole record
                logger.error(
                    "scorer_failed",
                    scorer=type(self._scorer).__name__,
                    field=name,
                    error=str(e),
                )
                reasons.append(ReasonCode.SCORER_ERROR.value)
                return reasons
            strengths[name] = score
            if score.tier < self._policy.minimum_tier:
                reasons.append(ReasonCode.WEAK_PASSWORD.value)
        return reasons

    def reconfigure(
        self,
        fields=_UNSET,
        rule_sets=_UNSET,
        password_fields=_UNSET,
        policy=_UNSET,
        scorer=_UNSET,
    ) -> "ValidationEngine":
        """Build a new engine, replacing only the given parts. This engine is unchanged."""
        return ValidationEngine(
            fields=self._fields if fields is _UNSET else fields,
            rule_sets=self._rule_sets if rule_sets is _UNSET else rule_sets,
            password_fields=self._password_fields if password_fields is _UNSET else password_fields,
            policy=self._policy if policy is _UNSET else policy,
            scorer=self._scorer if scorer is _UNSET else scorer,
        )

    def __repr__(self) -> str:
        return f"<ValidationEngine fields={list(self._fields)} password_fields={sorted(self._password_fields)}>"
