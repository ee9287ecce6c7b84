"""Base rule — abstract class implementing the Strategy Pattern.

Each rule is a standalone, independently testable unit.
New rule kinds are added without modifying RuleSet or the engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from validation_worker.validators.models import CheckKind, Outcome, ReasonCode


class BaseRule(ABC):
    """Abstract base for all field rules.

    Contract:
        - evaluate() is pure: same (value, context) → same Outcome
        - evaluate() never raises for bad data; it returns a failing Outcome
        - rule parameters are fixed at construction, so one instance can be
          shared across threads and RuleSets
    """

    kind: CheckKind
    default_reason: str
    default_short_circuit: bool = False

    def __init__(
        self,
        field: Optional[str] = None,
        reason_code: Optional[str] = None,
        short_circuit: Optional[bool] = None,
    ):
        """
        Args:
            field: Field this rule is bound to. Optional; a RuleSet rejects a
                rule bound to a different field.
            reason_code: Code reported on failure. Defaults per rule kind.
            short_circuit: Stop evaluating the field's remaining rules when
                this rule fails. Defaults per rule kind.
        """
        self._field = field
        self._reason_code = reason_code or self.default_reason
        self._short_circuit = self.default_short_circuit if short_circuit is None else short_circuit

    @property
    def field(self) -> Optional[str]:
        return self._field

    @property
    def reason_code(self) -> str:
        return self._reason_code

    @property
    def short_circuit(self) -> bool:
        return self._short_circuit

    @property
    def name(self) -> str:
        """Human-readable name for logging."""
        return self.kind.value

    @abstractmethod
    def evaluate(self, value: Any, context: Optional[Mapping] = None) -> Outcome:
        """Check a single value.

        Args:
            value: Field value, None when the field is absent from the record
            context: Optional read-only evaluation context (the whole record,
                caller data, ...)

        Returns:
            Outcome with passed flag and reason code on failure
        """
        ...

    # ── Helper Methods ──

    def _pass(self) -> Outcome:
        return Outcome.ok()

    def _fail(self, reason_code: Optional[str] = None) -> Outcome:
        return Outcome.fail(reason_code or self._reason_code)

    def _type_mismatch(self) -> Outcome:
        return Outcome.fail(ReasonCode.TYPE_MISMATCH.value)

    def __repr__(self) -> str:
        bound = f" field={self._field!r}" if self._field else ""
        return f"<{type(self).__name__}{bound} reason={self._reason_code!r}>"
