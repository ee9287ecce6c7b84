"""Rule kinds — presence, length, pattern, numeric range, and custom predicate checks.

Parameters are checked when a rule is built; a bad parameter raises
ConfigurationError before any engine can use the rule.
"""

import math
import re
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any, Optional, Union

import structlog

from validation_worker.validators.base import BaseRule
from validation_worker.validators.exceptions import ConfigurationError
from validation_worker.validators.models import CheckKind, Outcome, ReasonCode

logger = structlog.get_logger()

Number = Union[int, float, Decimal]


def is_absent(value: Any) -> bool:
    """True for None, empty or whitespace-only strings, and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class NotEmptyRule(BaseRule):
    """Fails when the value is absent, empty, or whitespace-only."""

    kind = CheckKind.NOT_EMPTY
    default_reason = ReasonCode.REQUIRED.value
    default_short_circuit = True

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        return self._fail() if is_absent(value) else self._pass()


class MinLengthRule(BaseRule):
    """Fails when a string is shorter than `min_length`."""

    kind = CheckKind.MIN_LENGTH
    default_reason = ReasonCode.TOO_SHORT.value

    def __init__(self, min_length: int, **kwargs):
        super().__init__(**kwargs)
        if not isinstance(min_length, int) or isinstance(min_length, bool) or min_length < 0:
            raise ConfigurationError(f"MinLength needs a non-negative integer, got {min_length!r}", field=self.field)
        self.min_length = min_length

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        if not isinstance(value, str):
            return self._type_mismatch()
        return self._fail() if len(value) < self.min_length else self._pass()


class MaxLengthRule(BaseRule):
    """Fails when a string is longer than `max_length`."""

    kind = CheckKind.MAX_LENGTH
    default_reason = ReasonCode.TOO_LONG.value

    def __init__(self, max_length: int, **kwargs):
        super().__init__(**kwargs)
        if not isinstance(max_length, int) or isinstance(max_length, bool) or max_length < 0:
            raise ConfigurationError(f"MaxLength needs a non-negative integer, got {max_length!r}", field=self.field)
        self.max_length = max_length

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        if not isinstance(value, str):
            return self._type_mismatch()
        return self._fail() if len(value) > self.max_length else self._pass()


class PatternRule(BaseRule):
    """Fails when a string does not fully match `pattern` (Python `re` syntax)."""

    kind = CheckKind.PATTERN
    default_reason = ReasonCode.PATTERN_MISMATCH.value

    def __init__(self, pattern: Union[str, re.Pattern], flags: int = 0, **kwargs):
        super().__init__(**kwargs)
        try:
            self.pattern = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
        except (re.error, TypeError) as e:
            raise ConfigurationError(f"Invalid pattern {pattern!r}: {e}", field=self.field) from e

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        if not isinstance(value, str):
            return self._type_mismatch()
        return self._pass() if self.pattern.fullmatch(value) else self._fail()


class RangeRule(BaseRule):
    """Fails when a number lies outside [minimum, maximum]. Either bound may be omitted."""

    kind = CheckKind.RANGE
    default_reason = ReasonCode.OUT_OF_RANGE.value

    def __init__(self, minimum: Optional[Number] = None, maximum: Optional[Number] = None, **kwargs):
        super().__init__(**kwargs)
        for bound in (minimum, maximum):
            if bound is not None and not is_number(bound):
                raise ConfigurationError(f"Range bound must be numeric, got {bound!r}", field=self.field)
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ConfigurationError(f"Range minimum {minimum} exceeds maximum {maximum}", field=self.field)
        self.minimum = minimum
        self.maximum = maximum

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        if not is_number(value):
            return self._type_mismatch()
        if isinstance(value, float) and math.isnan(value):
            return self._fail()
        if self.minimum is not None and value < self.minimum:
            return self._fail()
        if self.maximum is not None and value > self.maximum:
            return self._fail()
        return self._pass()


class CustomPredicateRule(BaseRule):
    """Caller-supplied check. A falsy return fails; an exception fails with PredicateError."""

    kind = CheckKind.CUSTOM_PREDICATE
    default_reason = ReasonCode.PREDICATE_FAILED.value

    def __init__(self, predicate: Callable[..., Any], pass_context: bool = False, **kwargs):
        super().__init__(**kwargs)
        if not callable(predicate):
            raise ConfigurationError(f"CustomPredicate needs a callable, got {predicate!r}", field=self.field)
        self.predicate = predicate
        self.pass_context = pass_context

    @property
    def name(self) -> str:
        return getattr(self.predicate, "__name__", self.kind.value)

    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        try:
            ok = self.predicate(value, context) if self.pass_context else self.predicate(value)
        except Exception as e:
            logger.warning(
                "predicate_failed",
                rule=self.name,
                field=self.field,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Outcome.fail(ReasonCode.PREDICATE_ERROR.value)
        return self._pass() if ok else self._fail()


RULE_TYPES: dict[CheckKind, type[BaseRule]] = {
    CheckKind.NOT_EMPTY: NotEmptyRule,
    CheckKind.MIN_LENGTH: MinLengthRule,
    CheckKind.MAX_LENGTH: MaxLengthRule,
    CheckKind.PATTERN: PatternRule,
    CheckKind.RANGE: RangeRule,
    CheckKind.CUSTOM_PREDICATE: CustomPredicateRule,
}


def build_rule(kind: Union[CheckKind, str], **params) -> BaseRule:
    """Create a rule from its kind name and constructor parameters.

    Raises:
        ConfigurationError: unknown kind, or missing/unexpected parameters
    """
    try:
        rule_type = RULE_TYPES[CheckKind(kind)]
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown rule kind {kind!r}; use one of: {', '.join(k.value for k in CheckKind)}",
            field=params.get("field"),
        ) from e
    try:
        return rule_type(**params)
    except TypeError as e:
        raise ConfigurationError(f"Bad parameters for {rule_type.kind.value}: {e}", field=params.get("field")) from e
