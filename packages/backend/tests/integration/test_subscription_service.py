from moto import mock_aws

from shared.models.subscription import AuthSession, SessionUser, SubscriptionTier
from shared.services.entitlement_service import resolve_tier_profile
from shared.services.subscription_service import SubscriptionService
from tests.fixtures.ddb import create_subscription_table, put_subscription


@mock_aws
def test_get_subscription_fact():
    """The stored tier string is returned as-is"""

    table = create_subscription_table()
    put_subscription(table, "user-1", "premium")

    fact = SubscriptionService(table.name).get_subscription_fact("user-1")

    assert fact is not None
    assert fact.tier == "premium"
    assert resolve_tier_profile(fact).tier is SubscriptionTier.PREMIUM


@mock_aws
def test_missing_record_resolves_to_free():
    table = create_subscription_table()
    service = SubscriptionService(table.name)

    assert service.get_subscription_fact("nobody") is None
    assert resolve_tier_profile(service.get_subscription_fact("nobody")).tier is SubscriptionTier.FREE


@mock_aws
def test_record_without_tier_and_unknown_tier():
    table = create_subscription_table()
    put_subscription(table, "user-no-tier", None)
    put_subscription(table, "user-legacy", "enterprise")
    service = SubscriptionService(table.name)

    no_tier = service.get_subscription_fact("user-no-tier")
    legacy = service.get_subscription_fact("user-legacy")

    assert no_tier is not None and no_tier.tier is None
    assert legacy is not None and legacy.tier == "enterprise"
    assert resolve_tier_profile(no_tier).tier is SubscriptionTier.FREE
    assert resolve_tier_profile(legacy).tier is SubscriptionTier.FREE


@mock_aws
def test_store_error_degrades_to_absent_fact():
    """A failing store never raises into the resolver path"""

    fact = SubscriptionService("table-that-does-not-exist").get_subscription_fact("user-1")

    assert fact is None
    assert resolve_tier_profile(fact).tier is SubscriptionTier.FREE


@mock_aws
def test_fetch_only_for_authenticated_sessions():
    table = create_subscription_table()
    put_subscription(table, "user-1", "professional")
    service = SubscriptionService(table.name)

    anonymous = AuthSession(is_authenticated=False)
    signed_in = AuthSession(is_authenticated=True, user=SessionUser(user_id="user-1"))

    assert service.fetch_for_session(anonymous) is None
    assert service.fetch_for_session(signed_in).tier == "professional"


@mock_aws
def test_tier_change_is_seen_on_next_query():
    """No caching: re-querying picks up an upgrade written by billing"""

    table = create_subscription_table()
    put_subscription(table, "user-1", "basic")
    service = SubscriptionService(table.name)
    assert resolve_tier_profile(service.get_subscription_fact("user-1")).tier is SubscriptionTier.BASIC

    put_subscription(table, "user-1", "professional")
    profile = resolve_tier_profile(service.get_subscription_fact("user-1"))

    assert profile.tier is SubscriptionTier.PROFESSIONAL
    assert profile.can_upgrade is False
