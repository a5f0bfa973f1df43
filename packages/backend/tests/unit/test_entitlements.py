import itertools

import pytest

from shared.models.subscription import (
    PlanAction, SubscriptionFact, SubscriptionTier, TierAccent, TierIcon,
)
from shared.services.entitlement_service import (
    FEATURE_DESCRIPTORS,
    all_tier_profiles,
    feature_catalog,
    locked_features,
    plan_options,
    resolve_tier,
    resolve_tier_profile,
)


def display_tuple(profile):
    return (profile.label, profile.price_label, profile.accent, profile.icon)


def test_known_tiers_have_distinct_display():
    expected = {
        "free": ("Free", "Free", TierAccent.NEUTRAL, TierIcon.NONE),
        "basic": ("Basic", "£1/month", TierAccent.NEUTRAL, TierIcon.BASIC),
        "premium": ("Premium", "£2/month", TierAccent.HIGHLIGHT, TierIcon.CROWN),
        "professional": ("Professional", "£5/month", TierAccent.WARNING, TierIcon.CROWN),
    }
    for tier, display in expected.items():
        profile = resolve_tier_profile(SubscriptionFact(tier=tier))
        assert profile.tier == SubscriptionTier(tier)
        assert display_tuple(profile) == display

    assert len(set(expected.values())) == 4


def test_resolution_is_stable():
    first = resolve_tier_profile({"tier": "premium"})
    second = resolve_tier_profile({"tier": "premium"})
    assert first == second
    assert first is not second  # recomputed on every call


@pytest.mark.parametrize(
    "fact",
    [
        None,
        SubscriptionFact(),
        SubscriptionFact(tier=None),
        SubscriptionFact(tier=""),
        SubscriptionFact(tier="gold"),
        SubscriptionFact(tier="PREMIUM"),
        SubscriptionFact(tier=" basic"),
        {"tier": None},
        {"tier": 3},
        {"tier": ["professional"]},
        {},
        "enterprise",
    ],
)
def test_unknown_or_absent_tier_falls_back_to_free(fact):
    free_profile = resolve_tier_profile(SubscriptionFact(tier="free"))
    profile = resolve_tier_profile(fact)

    assert profile.tier is SubscriptionTier.FREE
    assert display_tuple(profile) == display_tuple(free_profile)
    assert profile.feature_catalog == free_profile.feature_catalog


def test_enum_default_variant():
    assert SubscriptionTier("no-such-tier") is SubscriptionTier.FREE
    assert SubscriptionTier(None) is SubscriptionTier.FREE
    assert resolve_tier(SubscriptionTier.PROFESSIONAL) is SubscriptionTier.PROFESSIONAL


def test_tier_ordering():
    assert SubscriptionTier.ordered() == [
        SubscriptionTier.FREE,
        SubscriptionTier.BASIC,
        SubscriptionTier.PREMIUM,
        SubscriptionTier.PROFESSIONAL,
    ]
    # Ordered by rank, not alphabetically
    assert SubscriptionTier.PREMIUM < SubscriptionTier.PROFESSIONAL
    assert SubscriptionTier.FREE < SubscriptionTier.BASIC
    assert not SubscriptionTier.BASIC < SubscriptionTier.FREE
    assert SubscriptionTier.PROFESSIONAL >= SubscriptionTier.PREMIUM


def test_feature_catalog_monotonic_inclusion():
    for lower, higher in itertools.combinations_with_replacement(SubscriptionTier.ordered(), 2):
        lower_features = {feature.description for feature in feature_catalog(lower)}
        higher_features = {feature.description for feature in feature_catalog(higher)}
        assert lower_features <= higher_features, f"{lower} not included in {higher}"


def test_catalog_and_locked_features_partition_descriptors():
    all_descriptions = {feature.description for feature in FEATURE_DESCRIPTORS}
    for tier in SubscriptionTier:
        unlocked = {feature.description for feature in feature_catalog(tier)}
        locked = {feature.description for feature in locked_features(tier)}
        assert unlocked.isdisjoint(locked)
        assert unlocked | locked == all_descriptions

    assert locked_features(SubscriptionTier.PROFESSIONAL) == []
    assert feature_catalog(SubscriptionTier.PROFESSIONAL) == FEATURE_DESCRIPTORS


def test_feature_catalog_grouped_lowest_tier_first():
    profile = resolve_tier_profile({"tier": "premium"})
    grouped = profile.catalog_by_tier()

    assert list(grouped) == [
        SubscriptionTier.FREE,
        SubscriptionTier.BASIC,
        SubscriptionTier.PREMIUM,
    ]
    assert "PDF certificates" in grouped[SubscriptionTier.PREMIUM]
    assert "Basic calculations" in grouped[SubscriptionTier.FREE]
    assert all(
        feature.tier_required <= SubscriptionTier.PREMIUM for feature in profile.feature_catalog
    )


def test_free_tier_locks_paid_features():
    profile = resolve_tier_profile(None)
    locked = {feature.description for feature in profile.locked_features}
    assert "PDF certificates" in locked
    assert "Purge calculations" in locked
    assert "Custom company branding" in locked


@pytest.mark.parametrize(
    "tier, can_upgrade",
    [
        ("free", True),
        ("basic", True),
        ("premium", True),
        ("professional", False),
    ],
)
def test_can_upgrade(tier, can_upgrade):
    profile = resolve_tier_profile({"tier": tier})
    assert profile.can_upgrade is can_upgrade
    assert profile.model_dump(mode="json")["can_upgrade"] is can_upgrade


def test_plan_options_relative_to_current_tier():
    options = plan_options(SubscriptionTier.PREMIUM, "/subscribe")
    by_tier = {option.tier: option for option in options}

    assert [option.tier for option in options] == SubscriptionTier.ordered()
    assert by_tier[SubscriptionTier.PREMIUM].is_current
    assert by_tier[SubscriptionTier.PREMIUM].action is PlanAction.CURRENT
    assert by_tier[SubscriptionTier.PREMIUM].upgrade_path is None

    assert by_tier[SubscriptionTier.PROFESSIONAL].action is PlanAction.UPGRADE
    assert by_tier[SubscriptionTier.PROFESSIONAL].upgrade_path == "/subscribe?tier=professional"

    assert by_tier[SubscriptionTier.BASIC].action is PlanAction.DOWNGRADE
    assert by_tier[SubscriptionTier.BASIC].upgrade_path == "/subscribe?tier=basic"

    # Going back to free is a cancellation, not a checkout
    assert by_tier[SubscriptionTier.FREE].action is PlanAction.DOWNGRADE
    assert by_tier[SubscriptionTier.FREE].upgrade_path is None


def test_plan_options_for_free_account():
    options = plan_options(SubscriptionTier.FREE)
    assert [option.action for option in options] == [
        PlanAction.CURRENT,
        PlanAction.UPGRADE,
        PlanAction.UPGRADE,
        PlanAction.UPGRADE,
    ]
    assert options[1].upgrade_path == "/subscribe?tier=basic"


def test_all_tier_profiles():
    profiles = all_tier_profiles()
    assert [profile.tier for profile in profiles] == SubscriptionTier.ordered()
    assert [profile.can_upgrade for profile in profiles] == [True, True, True, False]
