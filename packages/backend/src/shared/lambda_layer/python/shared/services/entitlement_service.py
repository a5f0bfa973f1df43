"""
Entitlement Service for the gas calculator account screens

Derives the tier identity, display attributes and unlocked features from a
subscription fact. Everything here is pure: no I/O, no caching, no exceptions.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
from aws_lambda_powertools import Logger

from ..constants.subscription_tiers import (
    FREE_LABEL, FREE_PRICE_LABEL, FREE_DESCRIPTION, FREE_FEATURES,
    BASIC_LABEL, BASIC_PRICE_LABEL, BASIC_DESCRIPTION, BASIC_FEATURES,
    PREMIUM_LABEL, PREMIUM_PRICE_LABEL, PREMIUM_DESCRIPTION, PREMIUM_FEATURES,
    PROFESSIONAL_LABEL, PROFESSIONAL_PRICE_LABEL, PROFESSIONAL_DESCRIPTION, PROFESSIONAL_FEATURES,
    DEFAULT_UPGRADE_PATH,
)
from ..models.subscription import (
    FeatureDescriptor, PlanAction, PlanOption, SubscriptionFact, SubscriptionTier,
    TierAccent, TierDisplay, TierIcon, TierProfile,
)

logger = Logger()

TIER_DISPLAY: Dict[SubscriptionTier, TierDisplay] = {
    SubscriptionTier.FREE: TierDisplay(
        label=FREE_LABEL,
        price_label=FREE_PRICE_LABEL,
        accent=TierAccent.NEUTRAL,
        icon=TierIcon.NONE,
        summary=FREE_DESCRIPTION,
    ),
    SubscriptionTier.BASIC: TierDisplay(
        label=BASIC_LABEL,
        price_label=BASIC_PRICE_LABEL,
        accent=TierAccent.NEUTRAL,
        icon=TierIcon.BASIC,
        summary=BASIC_DESCRIPTION,
    ),
    SubscriptionTier.PREMIUM: TierDisplay(
        label=PREMIUM_LABEL,
        price_label=PREMIUM_PRICE_LABEL,
        accent=TierAccent.HIGHLIGHT,
        icon=TierIcon.CROWN,
        summary=PREMIUM_DESCRIPTION,
    ),
    SubscriptionTier.PROFESSIONAL: TierDisplay(
        label=PROFESSIONAL_LABEL,
        price_label=PROFESSIONAL_PRICE_LABEL,
        accent=TierAccent.WARNING,
        icon=TierIcon.CROWN,
        summary=PROFESSIONAL_DESCRIPTION,
    ),
}

# Each feature is declared once, against the lowest tier that unlocks it.
FEATURE_DESCRIPTORS: List[FeatureDescriptor] = [
    FeatureDescriptor(tier_required=tier, description=description)
    for tier, descriptions in (
        (SubscriptionTier.FREE, FREE_FEATURES),
        (SubscriptionTier.BASIC, BASIC_FEATURES),
        (SubscriptionTier.PREMIUM, PREMIUM_FEATURES),
        (SubscriptionTier.PROFESSIONAL, PROFESSIONAL_FEATURES),
    )
    for description in descriptions
]

SubscriptionInput = Union[SubscriptionFact, Mapping[str, Any], str, None]


def resolve_tier(subscription_fact: SubscriptionInput) -> SubscriptionTier:
    """
    Extract the tier from whatever the subscription store handed over.

    Args:
        subscription_fact: A SubscriptionFact, a raw mapping with a 'tier' key,
            a bare tier string, or None when nothing was fetched

    Returns:
        SubscriptionTier: The known tier, FREE for anything else
    """
    if isinstance(subscription_fact, SubscriptionFact):
        raw_tier = subscription_fact.tier
    elif isinstance(subscription_fact, Mapping):
        raw_tier = subscription_fact.get("tier")
    else:
        raw_tier = subscription_fact

    tier = SubscriptionTier(raw_tier)
    if raw_tier is not None and tier is SubscriptionTier.FREE and raw_tier != SubscriptionTier.FREE.value:
        logger.warning(f"Unknown subscription tier {raw_tier!r}, falling back to free")
    return tier


def feature_catalog(tier: SubscriptionTier) -> List[FeatureDescriptor]:
    """Features unlocked at or below the tier, grouped lowest tier first"""
    return sorted(
        (feature for feature in FEATURE_DESCRIPTORS if feature.tier_required <= tier),
        key=lambda feature: feature.tier_required.rank,
    )


def locked_features(tier: SubscriptionTier) -> List[FeatureDescriptor]:
    """Features that need a tier above the given one"""
    return sorted(
        (feature for feature in FEATURE_DESCRIPTORS if feature.tier_required > tier),
        key=lambda feature: feature.tier_required.rank,
    )


def build_tier_profile(tier: SubscriptionTier) -> TierProfile:
    display = TIER_DISPLAY[tier]
    return TierProfile(
        tier=tier,
        **display.model_dump(),
        feature_catalog=feature_catalog(tier),
        locked_features=locked_features(tier),
    )


def resolve_tier_profile(subscription_fact: SubscriptionInput = None) -> TierProfile:
    """
    Resolve the full display profile for the current account.

    This never fails: an absent fact (not authenticated, fetch still pending)
    or an unrecognised tier yields the free profile so that unknown state can
    never unlock paid features.

    Args:
        subscription_fact: Subscription record for the account, if any

    Returns:
        TierProfile: Freshly computed profile for the resolved tier
    """
    return build_tier_profile(resolve_tier(subscription_fact))


def all_tier_profiles() -> List[TierProfile]:
    """Profiles for every tier, least privileged first (pricing grid)"""
    return [build_tier_profile(tier) for tier in SubscriptionTier.ordered()]


def plan_options(
    current: SubscriptionTier,
    upgrade_path: Optional[str] = None,
) -> List[PlanOption]:
    """
    Build the 'Available Plans' cards relative to the current tier.

    Paid tiers above the current one are offered as upgrades and those below
    as downgrades. Free is never offered as a target: going back to free is a
    cancellation, handled by the billing provider.

    Args:
        current: The account's resolved tier
        upgrade_path: Checkout entry point, defaults to DEFAULT_UPGRADE_PATH

    Returns:
        List[PlanOption]: One option per tier, least privileged first
    """
    base_path = upgrade_path or DEFAULT_UPGRADE_PATH
    options = []
    for tier in SubscriptionTier.ordered():
        display = TIER_DISPLAY[tier]
        if tier == current:
            action = PlanAction.CURRENT
        elif tier > current:
            action = PlanAction.UPGRADE
        else:
            action = PlanAction.DOWNGRADE

        offer_checkout = action is not PlanAction.CURRENT and tier is not SubscriptionTier.FREE
        options.append(
            PlanOption(
                tier=tier,
                label=display.label,
                price_label=display.price_label,
                summary=display.summary,
                is_current=action is PlanAction.CURRENT,
                action=action,
                upgrade_path=f"{base_path}?tier={tier.value}" if offer_checkout else None,
            )
        )
    return options
