from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Any, Dict, List, Optional


class SubscriptionTier(str, Enum):
    """Subscription tier enumeration, ordered by feature inclusion.

    FREE is the designated default: any value outside the enumeration
    (None, unknown strings, other types) resolves to it.
    """

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    PROFESSIONAL = "professional"

    @classmethod
    def _missing_(cls, value: object) -> "SubscriptionTier":
        return cls.FREE

    @classmethod
    def ordered(cls) -> List["SubscriptionTier"]:
        """All tiers from least to most privileged."""
        return sorted(cls, key=lambda tier: tier.rank)

    @property
    def rank(self) -> int:
        return _TIER_RANKS[self.value]

    @property
    def is_maximal(self) -> bool:
        return self.rank == max(_TIER_RANKS.values())

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_RANKS = {
    SubscriptionTier.FREE.value: 0,
    SubscriptionTier.BASIC.value: 1,
    SubscriptionTier.PREMIUM.value: 2,
    SubscriptionTier.PROFESSIONAL.value: 3,
}


class TierAccent(str, Enum):
    """Badge colour family used when displaying a tier"""
    NEUTRAL = "neutral"
    HIGHLIGHT = "highlight"
    WARNING = "warning"


class TierIcon(str, Enum):
    """Icon shown next to the tier name"""
    NONE = "none"
    BASIC = "basic"
    CROWN = "crown"


class PlanAction(str, Enum):
    """What the plan grid offers for a tier relative to the current one"""
    CURRENT = "current"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"


class FeatureDescriptor(BaseModel):
    """A single marketed feature and the lowest tier that unlocks it"""
    model_config = ConfigDict(frozen=True)

    tier_required: SubscriptionTier
    description: str


class TierDisplay(BaseModel):
    """Display attributes of a tier; one row of the tier table"""
    model_config = ConfigDict(frozen=True)

    label: str
    price_label: str
    accent: TierAccent
    icon: TierIcon
    summary: str


class TierProfile(BaseModel):
    """Everything the account screens need to render the current tier"""
    model_config = ConfigDict(frozen=True)

    tier: SubscriptionTier
    label: str
    price_label: str
    accent: TierAccent
    icon: TierIcon
    summary: str
    feature_catalog: List[FeatureDescriptor] = Field(
        default_factory=list,
        description="Features unlocked at or below this tier, lowest tier first",
    )
    locked_features: List[FeatureDescriptor] = Field(
        default_factory=list,
        description="Features that require a higher tier",
    )

    @computed_field
    @property
    def can_upgrade(self) -> bool:
        """Professional is the top tier and has nothing higher to offer"""
        return not self.tier.is_maximal

    def catalog_by_tier(self) -> Dict[SubscriptionTier, List[str]]:
        """Group the unlocked feature descriptions by the tier that introduced them."""
        grouped: Dict[SubscriptionTier, List[str]] = {}
        for feature in self.feature_catalog:
            grouped.setdefault(feature.tier_required, []).append(feature.description)
        return grouped


class PlanOption(BaseModel):
    """One card of the 'Available Plans' grid"""
    tier: SubscriptionTier
    label: str
    price_label: str
    summary: str
    is_current: bool
    action: PlanAction
    upgrade_path: Optional[str] = Field(
        default=None,
        description="External checkout target; None when nothing can be started from here",
    )


class SubscriptionFact(BaseModel):
    """Subscription record as supplied by the subscription store"""
    tier: Optional[str] = Field(default=None, description="Raw tier string, may be unknown")


class SessionUser(BaseModel):
    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AuthSession(BaseModel):
    """Authentication fact supplied by the identity provider"""
    is_authenticated: bool = False
    user: Optional[SessionUser] = None
