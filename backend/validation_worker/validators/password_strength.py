"""Password Strength Scorer — tiered strength from length, diversity, denylist, and entropy.

Scoring steps, in order:
    1. Length bounds      → tier 0 (TooShort / TooLong)
    2. Class diversity    → base tier from DIVERSITY_TIERS
    3. Banned values      → tier 0 (BannedValue)
    4. Required classes   → capped below the policy's minimum tier
    5. Entropy estimate   → one tier lower (LowEntropy)

Each step can only lower the tier, so adding violations never raises it.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from validation_worker.validators.models import (
    CharacterClass,
    PasswordPolicy,
    ReasonCode,
    StrengthScore,
)
from validation_worker.validators.reference_data import (
    CLASS_POOL_SIZES,
    DIVERSITY_TIERS,
    MAX_TIER,
    MIN_TIER,
)


def character_classes(password: str) -> frozenset[CharacterClass]:
    """Classes present in the password.

    Cased letters and decimal digits map to their own classes. Everything else,
    including caseless letters such as CJK ideographs, counts as a symbol.
    """
    found = set()
    for char in password:
        if char.islower():
            found.add(CharacterClass.LOWERCASE)
        elif char.isupper():
            found.add(CharacterClass.UPPERCASE)
        elif char.isdigit():
            found.add(CharacterClass.DIGIT)
        else:
            found.add(CharacterClass.SYMBOL)
    return frozenset(found)


class PasswordStrengthScorer:
    """Default PasswordStrengthProtocol implementation.

    Stateless apart from its tables, which are copied at construction;
    safe to share across threads.
    """

    def __init__(
        self,
        diversity_tiers: Optional[Mapping[int, int]] = None,
        pool_sizes: Optional[Mapping[str, int]] = None,
    ):
        self.diversity_tiers = dict(diversity_tiers or DIVERSITY_TIERS)
        self.pool_sizes = dict(pool_sizes or CLASS_POOL_SIZES)

    @property
    def name(self) -> str:
        return "PasswordStrengthScorer"

    def estimate_entropy(self, password: str, classes: Optional[frozenset[CharacterClass]] = None) -> float:
        """Brute-force entropy estimate in bits: length × log2(pool size)."""
        if classes is None:
            classes = character_classes(password)
        pool = sum(self.pool_sizes.get(c.value, 0) for c in classes)
        if not password or pool <= 1:
            return 0.0
        return round(len(password) * math.log2(pool), 2)

    def score(self, password: Any, policy: PasswordPolicy) -> StrengthScore:
        """Grade a password against a policy.

        Args:
            password: Candidate password; non-strings score tier 0 with TypeMismatch
            policy: Policy to grade against (never modified)

        Returns:
            StrengthScore with tier, ordered reasons, and entropy estimate
        """
        if not isinstance(password, str):
            return StrengthScore(tier=MIN_TIER, reasons=(ReasonCode.TYPE_MISMATCH.value,))

        reasons: list[str] = []
        classes = character_classes(password)
        length = len(password)

        # ── 1. Length bounds ──
        if length == 0 or length < policy.min_length:
            tier = MIN_TIER
            reasons.append(ReasonCode.TOO_SHORT.value)
        elif length > policy.max_length:
            tier = MIN_TIER
            reasons.append(ReasonCode.TOO_LONG.value)
        else:
            # ── 2. Diversity ──
            tier = self.diversity_tiers.get(len(classes), MAX_TIER)

        # ── 3. Denylist ──
        if password in policy.banned_values:
            tier = MIN_TIER
            reasons.append(ReasonCode.BANNED_VALUE.value)

        # ── 4. Required classes ──
        missing = [c for c in policy.ordered_required_classes if c not in classes]
        if missing:
            reasons.extend(ReasonCode.missing_class(c) for c in missing)
            tier = min(tier, max(MIN_TIER, policy.minimum_tier - 1))

        # ── 5. Entropy ──
        entropy = self.estimate_entropy(password, classes)
        if policy.min_entropy_bits and entropy < policy.min_entropy_bits:
            reasons.append(ReasonCode.LOW_ENTROPY.value)
            tier -= 1

        return StrengthScore(
            tier=max(MIN_TIER, min(MAX_TIER, tier)),
            reasons=tuple(reasons),
            entropy_bits=entropy,
        )
