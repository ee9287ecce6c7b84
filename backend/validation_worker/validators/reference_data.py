"""Reference data — character classes, tier table, entropy pools, common passwords.

This is the encoded knowledge that makes password scoring deterministic.
Everything here is a default; PasswordPolicy and Settings override what matters.
"""

import string

# ──────────────────────────────────────────────────────────────────────
# CHARACTER CLASSES
# ──────────────────────────────────────────────────────────────────────

# Canonical order used for reason codes, so output never depends on set ordering
CLASS_ORDER: tuple[str, ...] = ("lowercase", "uppercase", "digit", "symbol")

# Pool size per class, used by the entropy estimate
CLASS_POOL_SIZES: dict[str, int] = {
    "lowercase": len(string.ascii_lowercase),  # 26
    "uppercase": len(string.ascii_uppercase),  # 26
    "digit": len(string.digits),               # 10
    "symbol": len(string.punctuation) + 1,     # 32 punctuation + space
}


# ──────────────────────────────────────────────────────────────────────
# STRENGTH TIERS
# ──────────────────────────────────────────────────────────────────────

MIN_TIER = 0
MAX_TIER = 4

# Satisfied class count → base tier
DIVERSITY_TIERS: dict[int, int] = {
    0: 1,
    1: 1,
    2: 2,
    3: 3,
    4: 4,
}

TIER_LABELS: dict[int, str] = {
    0: "unacceptable",
    1: "weak",
    2: "fair",
    3: "good",
    4: "strong",
}


# ──────────────────────────────────────────────────────────────────────
# FIELD PATTERNS (single-value worker checks)
# ──────────────────────────────────────────────────────────────────────

EMAIL_PATTERN = r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?)*\.[A-Za-z]{2,}"
EMAIL_MAX_LENGTH = 254

NAME_PATTERN = r"[^\W\d_]+(?:[ '.\-]+[^\W\d_]+)*\.?"
NAME_MAX_LENGTH = 100

PHONE_PATTERN = r"\+?\(?\d(?:[\s().\-]*\d){6,14}"

MAX_HUMAN_AGE = 150


# ──────────────────────────────────────────────────────────────────────
# COMMON PASSWORDS (exact-match denylist, case-sensitive)
# ──────────────────────────────────────────────────────────────────────

COMMON_PASSWORDS: frozenset[str] = frozenset({
    "123456", "123456789", "12345678", "12345", "1234567", "1234567890",
    "password", "password1", "password123", "Password1", "Password123",
    "qwerty", "qwerty123", "qwertyuiop", "abc123", "abcd1234", "111111",
    "000000", "123123", "1q2w3e4r", "1qaz2wsx", "iloveyou", "admin",
    "admin123", "welcome", "welcome1", "Welcome1", "letmein", "monkey",
    "dragon", "football", "baseball", "sunshine", "princess", "master",
    "shadow", "superman", "trustno1", "passw0rd", "P@ssw0rd", "P@ssword1",
    "changeme", "secret", "zaq12wsx", "starwars", "whatever", "michael",
    "login", "access", "hello123",
})
