"""Capabilities the worker is composed from.

Validation and password-strength scoring are separate protocols; the engine
holds a scorer chosen at construction, so a stricter scorer can be swapped in
without touching the engine.
"""

from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable

from validation_worker.validators.models import PasswordPolicy, StrengthScore, ValidationResult


@runtime_checkable
class PasswordStrengthProtocol(Protocol):
    """Anything that can grade a password against a policy."""

    def score(self, password: str, policy: PasswordPolicy) -> StrengthScore:
        ...


@runtime_checkable
class ValidationProtocol(Protocol):
    """Anything that can validate a record of named fields."""

    def validate(self, record: Mapping[str, Any], context: Optional[Mapping] = None) -> ValidationResult:
        ...
