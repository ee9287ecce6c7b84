"""RuleSet — the ordered rules bound to one field."""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from validation_worker.validators.base import BaseRule
from validation_worker.validators.exceptions import ConfigurationError
from validation_worker.validators.models import FieldSpec, ReasonCode
from validation_worker.validators.rules import MaxLengthRule, MinLengthRule, NotEmptyRule, is_absent


class RuleSet:
    """Ordered, immutable sequence of rules for a single field.

    Rules run in declaration order. Every failing rule contributes its reason
    code, except that a failing short-circuit rule ends the field's evaluation.
    """

    __slots__ = ("_field", "_rules", "_required", "_asserts_presence")

    def __init__(self, field: str, rules: Iterable[BaseRule] = (), required: bool = False):
        self._field = field
        self._rules = tuple(rules)
        self._required = required
        self._asserts_presence = any(isinstance(rule, NotEmptyRule) for rule in self._rules)

    @classmethod
    def for_field(cls, spec: FieldSpec, *rules: BaseRule) -> "RuleSet":
        return cls(spec.name, rules, required=spec.required)

    @property
    def field(self) -> str:
        return self._field

    @property
    def rules(self) -> tuple[BaseRule, ...]:
        return self._rules

    @property
    def required(self) -> bool:
        return self._required

    def with_required(self, required: bool) -> "RuleSet":
        if required == self._required:
            return self
        return RuleSet(self._field, self._rules, required=required)

    def check(self) -> None:
        """Raise ConfigurationError for rules that cannot belong to this field."""
        if not isinstance(self._field, str) or not self._field:
            raise ConfigurationError(f"RuleSet field must be a non-empty string, got {self._field!r}")

        min_length: Optional[int] = None
        max_length: Optional[int] = None
        for rule in self._rules:
            if not isinstance(rule, BaseRule):
                raise ConfigurationError(f"Not a rule: {rule!r}", field=self._field)
            if rule.field is not None and rule.field != self._field:
                raise ConfigurationError(
                    f"Rule {rule.name} is bound to field '{rule.field}'", field=self._field
                )
            if isinstance(rule, MinLengthRule):
                min_length = max(rule.min_length, min_length or 0)
            elif isinstance(rule, MaxLengthRule):
                max_length = rule.max_length if max_length is None else min(rule.max_length, max_length)

        if min_length is not None and max_length is not None and min_length > max_length:
            raise ConfigurationError(
                f"MinLength {min_length} exceeds MaxLength {max_length}", field=self._field
            )

    def evaluate_field(self, value: Any, context: Optional[Mapping] = None) -> list[str]:
        """Run the rules against one value.

        Args:
            value: Field value, None when absent from the record
            context: Optional evaluation context handed to every rule

        Returns:
            Ordered reason codes; empty when the field passed
        """
        if self._required and is_absent(value):
            return [ReasonCode.REQUIRED.value]
        # Optional and missing from the record: only a NotEmpty rule has anything to say.
        # A supplied blank value still runs every rule.
        if value is None and not self._asserts_presence:
            return []

        reasons: list[str] = []
        for rule in self._rules:
            outcome = rule.evaluate(value, context)
            if outcome.passed:
                continue
            reasons.append(outcome.reason_code)
            if rule.short_circuit:
                break
        return reasons

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"<RuleSet field={self._field!r} rules={[r.name for r in self._rules]} required={self._required}>"
