"""Tests for the password strength scorer."""

import math

import pytest

from validation_worker.validators import (
    CharacterClass,
    PasswordPolicy,
    PasswordStrengthProtocol,
    PasswordStrengthScorer,
    character_classes,
)


@pytest.fixture
def scorer():
    return PasswordStrengthScorer()


@pytest.fixture
def open_policy():
    """No required classes, small denylist."""
    return PasswordPolicy(min_length=8, max_length=64, banned_values=frozenset({"password1"}), minimum_tier=2)


class TestCharacterClasses:
    def test_detects_all_classes(self):
        assert character_classes("aB3$") == frozenset(CharacterClass)

    def test_space_counts_as_symbol(self):
        assert character_classes("a b") == {CharacterClass.LOWERCASE, CharacterClass.SYMBOL}

    def test_empty(self):
        assert character_classes("") == frozenset()

    def test_caseless_letters_count_as_symbol(self):
        assert character_classes("中文密码") == {CharacterClass.SYMBOL}
        assert character_classes("密码abc1") == {
            CharacterClass.SYMBOL, CharacterClass.LOWERCASE, CharacterClass.DIGIT,
        }

    def test_caseless_password_is_not_zero_class(self, open_policy):
        score = PasswordStrengthScorer().score("中文密码中文密码", open_policy)
        assert score.tier == 1
        assert score.entropy_bits > 0


class TestDiversityTiers:
    @pytest.mark.parametrize(
        "password, tier",
        [
            ("abcdefgh", 1),
            ("12345678x", 2),
            ("abcd1234", 2),
            ("Abcd1234", 3),
            ("Abcd123!", 4),
        ],
    )
    def test_tier_follows_class_count(self, scorer, open_policy, password, tier):
        score = scorer.score(password, open_policy)
        assert score.tier == tier
        assert score.reasons == ()

    def test_is_a_password_strength_protocol(self, scorer):
        assert isinstance(scorer, PasswordStrengthProtocol)


class TestLengthBounds:
    def test_too_short(self, scorer, open_policy):
        score = scorer.score("Ab1!", open_policy)
        assert score.tier == 0
        assert score.reasons == ("TooShort",)

    def test_too_long(self, scorer, open_policy):
        score = scorer.score("Ab1!" * 20, open_policy)
        assert score.tier == 0
        assert score.reasons == ("TooLong",)

    def test_empty_password_is_too_short_even_with_zero_minimum(self, scorer):
        policy = PasswordPolicy(min_length=0, minimum_tier=0)
        score = scorer.score("", policy)
        assert score.tier == 0
        assert score.reasons == ("TooShort",)

    def test_zero_minimum_scores_by_diversity_only(self, scorer):
        policy = PasswordPolicy(min_length=0, minimum_tier=0)
        assert scorer.score("a", policy).tier == 1
        assert scorer.score("a1", policy).tier == 2


class TestPolicyViolations:
    def test_banned_value_forces_tier_zero(self, scorer, policy):
        score = scorer.score("password1", policy)
        assert score.tier == 0
        assert score.reasons == ("BannedValue",)

    def test_banned_match_is_case_sensitive(self, scorer, policy):
        assert scorer.score("Password1", policy).tier == 3

    def test_missing_required_class_caps_below_minimum_tier(self, scorer):
        policy = PasswordPolicy(required_classes=frozenset({"symbol"}), minimum_tier=3)
        score = scorer.score("abcdEFGH12", policy)
        assert score.tier == 2
        assert score.reasons == ("MissingRequiredClass:symbol",)

    def test_missing_classes_reported_in_canonical_order(self, scorer):
        policy = PasswordPolicy(required_classes=frozenset({"symbol", "uppercase"}), minimum_tier=2)
        score = scorer.score("abcd1234", policy)
        assert score.reasons == ("MissingRequiredClass:uppercase", "MissingRequiredClass:symbol")
        assert score.tier == 1

    def test_violations_accumulate_after_length_failure(self, scorer):
        policy = PasswordPolicy(
            required_classes=frozenset({"digit"}),
            banned_values=frozenset({"abc"}),
        )
        score = scorer.score("abc", policy)
        assert score.tier == 0
        assert score.reasons == ("TooShort", "BannedValue", "MissingRequiredClass:digit")

    def test_low_entropy_drops_one_tier(self, scorer):
        policy = PasswordPolicy(min_entropy_bits=40.0, minimum_tier=1)
        score = scorer.score("abcdefgh", policy)
        assert score.entropy_bits == pytest.approx(8 * math.log2(26), abs=0.01)
        assert score.reasons == ("LowEntropy",)
        assert score.tier == 0

    def test_entropy_check_disabled_by_default(self, scorer, open_policy):
        assert "LowEntropy" not in scorer.score("abcdefgh", open_policy).reasons

    def test_non_string_password(self, scorer, open_policy):
        score = scorer.score(12345678, open_policy)
        assert score.tier == 0
        assert score.reasons == ("TypeMismatch",)


class TestScoringProperties:
    def test_scenario_a_two_classes_is_tier_two(self, scorer, policy):
        score = scorer.score("abcd1234", policy)
        assert score.tier == 2
        assert score.reasons == ()
        assert score.meets(policy) is True

    def test_deterministic(self, scorer, policy):
        first = scorer.score("Tr0ub4dor&3", policy)
        for _ in range(20):
            assert scorer.score("Tr0ub4dor&3", policy) == first

    def test_monotonic_as_violations_are_added(self, scorer):
        password = "Abcd123!"
        policies = [
            PasswordPolicy(),
            PasswordPolicy(min_entropy_bits=60.0),
            PasswordPolicy(min_entropy_bits=60.0, required_classes=frozenset({"lowercase"})),
            PasswordPolicy(min_entropy_bits=60.0, banned_values=frozenset({password})),
        ]
        tiers = [scorer.score(password, p).tier for p in policies]
        assert tiers[0] == 4
        assert tiers == sorted(tiers, reverse=True)
        assert tiers[-1] == 0

    def test_policy_and_password_not_mutated(self, scorer, policy):
        before = policy.model_dump()
        scorer.score("password1", policy)
        assert policy.model_dump() == before

    def test_entropy_uses_present_class_pools(self, scorer, open_policy):
        score = scorer.score("Abcd123!", open_policy)
        assert score.entropy_bits == pytest.approx(8 * math.log2(26 + 26 + 10 + 33), abs=0.01)
