"""Validation models — field types, reason codes, password policy, scoring, and result structure.

All validation is deterministic: same input → same output, no randomness, no I/O.
Configuration models are frozen; a ValidationResult is created fresh per call.
"""

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from validation_worker.validators.exceptions import ConfigurationError
from validation_worker.validators.reference_data import (
    CLASS_ORDER,
    COMMON_PASSWORDS,
    MAX_TIER,
    MIN_TIER,
    TIER_LABELS,
)

if TYPE_CHECKING:
    from validation_worker.config import Settings


class FieldType(str, Enum):
    """Declared type of a record field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    PASSWORD = "password"
    CUSTOM = "custom"


class CheckKind(str, Enum):
    """Kinds of atomic rule checks."""

    NOT_EMPTY = "NotEmpty"
    MIN_LENGTH = "MinLength"
    MAX_LENGTH = "MaxLength"
    PATTERN = "Pattern"
    RANGE = "Range"
    CUSTOM_PREDICATE = "CustomPredicate"


class CharacterClass(str, Enum):
    """Character classes counted by the password scorer."""

    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    DIGIT = "digit"
    SYMBOL = "symbol"


class ReasonCode(str, Enum):
    """Stable reason-code tokens.

    Downstream code maps these to user-facing text; they are never localized here.
    """

    REQUIRED = "Required"
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"
    PATTERN_MISMATCH = "PatternMismatch"
    OUT_OF_RANGE = "OutOfRange"
    TYPE_MISMATCH = "TypeMismatch"
    PREDICATE_FAILED = "PredicateFailed"
    PREDICATE_ERROR = "PredicateError"
    BANNED_VALUE = "BannedValue"
    MISSING_REQUIRED_CLASS = "MissingRequiredClass"
    LOW_ENTROPY = "LowEntropy"
    SCORER_ERROR = "ScorerError"
    WEAK_PASSWORD = "WeakPassword"

    @classmethod
    def missing_class(cls, char_class: "CharacterClass | str") -> str:
        """Build the parameterized code, e.g. 'MissingRequiredClass:digit'."""
        return f"{cls.MISSING_REQUIRED_CLASS.value}:{CharacterClass(char_class).value}"


class Outcome(BaseModel):
    """Result of a single rule evaluation."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason_code: Optional[str] = None

    @classmethod
    def ok(cls) -> "Outcome":
        return _PASSED

    @classmethod
    def fail(cls, reason_code: str) -> "Outcome":
        return cls(passed=False, reason_code=reason_code)


_PASSED = Outcome(passed=True)


class FieldSpec(BaseModel):
    """A declared record field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Field identifier")
    type: FieldType = FieldType.TEXT
    required: bool = False


class PasswordPolicy(BaseModel):
    """Configurable password policy consumed by a strength scorer.

    Structural checks live in check() rather than pydantic validators so that
    a bad policy surfaces as ConfigurationError when an engine is built.
    """

    model_config = ConfigDict(frozen=True)

    min_length: int = 8
    max_length: int = 128
    required_classes: frozenset[CharacterClass] = Field(default_factory=frozenset)
    banned_values: frozenset[str] = Field(default_factory=frozenset)
    minimum_tier: int = 2
    min_entropy_bits: float = Field(default=0.0, description="0 disables the entropy check")

    @property
    def ordered_required_classes(self) -> list[CharacterClass]:
        return [CharacterClass(c) for c in CLASS_ORDER if CharacterClass(c) in self.required_classes]

    def check(self) -> None:
        """Raise ConfigurationError if no password could ever satisfy this policy."""
        if self.min_length < 0:
            raise ConfigurationError(f"Password min_length must be >= 0, got {self.min_length}")
        if self.max_length < max(self.min_length, 1):
            raise ConfigurationError(
                f"Password max_length {self.max_length} is below min_length {self.min_length}"
            )
        if not MIN_TIER <= self.minimum_tier <= MAX_TIER:
            raise ConfigurationError(
                f"Password minimum_tier must be within [{MIN_TIER}, {MAX_TIER}], got {self.minimum_tier}"
            )
        if self.min_entropy_bits < 0:
            raise ConfigurationError(f"Password min_entropy_bits must be >= 0, got {self.min_entropy_bits}")
        if len(self.required_classes) > self.max_length:
            raise ConfigurationError(
                f"{len(self.required_classes)} required character classes cannot fit in "
                f"max_length {self.max_length}"
            )
        # Tier n >= 2 needs n distinct classes, hence at least n characters
        if self.minimum_tier >= 2 and self.max_length < self.minimum_tier:
            raise ConfigurationError(
                f"Password minimum_tier {self.minimum_tier} is unreachable with max_length {self.max_length}"
            )

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "PasswordPolicy":
        """Build the default policy from application settings."""
        if settings is None:
            from validation_worker.config import get_settings

            settings = get_settings()

        banned: set[str] = set()
        if settings.PASSWORD_USE_COMMON_DENYLIST:
            banned.update(COMMON_PASSWORDS)
        if settings.PASSWORD_BANNED_VALUES_FILE:
            banned.update(load_banned_values(settings.PASSWORD_BANNED_VALUES_FILE))

        try:
            policy = cls(
                min_length=settings.PASSWORD_MIN_LENGTH,
                max_length=settings.PASSWORD_MAX_LENGTH,
                required_classes=frozenset(settings.PASSWORD_REQUIRED_CLASSES),
                banned_values=frozenset(banned),
                minimum_tier=settings.PASSWORD_MINIMUM_TIER,
                min_entropy_bits=settings.PASSWORD_MIN_ENTROPY_BITS,
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid password policy settings: {e}") from e
        policy.check()
        return policy


def load_banned_values(path: "str | Path") -> set[str]:
    """Read a newline-delimited denylist. Blank lines and '#' comments are skipped."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read banned values file '{path}': {e}") from e
    return {
        line.rstrip("\r\n")
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    }


class StrengthScore(BaseModel):
    """Graded password strength plus the reasons that lowered it."""

    model_config = ConfigDict(frozen=True)

    tier: int = Field(ge=MIN_TIER, le=MAX_TIER)
    reasons: tuple[str, ...] = ()
    entropy_bits: float = 0.0

    @property
    def label(self) -> str:
        return TIER_LABELS[self.tier]

    def meets(self, policy: PasswordPolicy) -> bool:
        return self.tier >= policy.minimum_tier


class ValidationResult(BaseModel):
    """Complete outcome of one validate() call.

    `failures` only holds failing fields; reasons_for() returns an empty list
    for a field that passed or was never validated.
    """

    model_config = ConfigDict(frozen=True)

    passed: bool
    failures: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    strengths: dict[str, StrengthScore] = Field(default_factory=dict)

    @property
    def strength(self) -> Optional[StrengthScore]:
        """Score of the first password field evaluated, if any."""
        return next(iter(self.strengths.values()), None)

    @property
    def failed_fields(self) -> list[str]:
        return list(self.failures)

    def reasons_for(self, field: str) -> list[str]:
        return list(self.failures.get(field, ()))

    @classmethod
    def build(
        cls,
        failures: dict[str, list[str]],
        strengths: Optional[dict[str, StrengthScore]] = None,
    ) -> "ValidationResult":
        """Build a result; passed is derived, never supplied."""
        kept = {name: tuple(reasons) for name, reasons in failures.items() if reasons}
        return cls(passed=not kept, failures=kept, strengths=dict(strengths or {}))
