import os
from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import APIGatewayRestResolver
from aws_lambda_powertools.event_handler.api_gateway import CORSConfig
from aws_lambda_powertools.utilities.typing import LambdaContext
from typing import Any, Dict

from shared.constants.subscription_tiers import (
    CURRENCY, CURRENCY_SYMBOL, BILLING_INTERVAL, DEFAULT_UPGRADE_PATH,
)
from shared.services.aws import get_table_name
from shared.services.entitlement_service import (
    all_tier_profiles, plan_options, resolve_tier_profile,
)
from shared.services.subscription_service import SubscriptionService
from shared.utils.auth import extract_session_from_event

# Initialize the logger
logger = Logger()

# Retrieve environment variables
SUBSCRIPTION_TABLE_NAME = get_table_name("SUBSCRIPTION_TABLE_NAME", "gc-subscriptions-dev")
UPGRADE_PATH = os.environ.get("UPGRADE_PATH", DEFAULT_UPGRADE_PATH)

# Configure CORS
cors_config = CORSConfig(
    allow_origin=os.environ.get("CORS_ALLOW_ORIGIN", "*"),
)

# Initialize the APIGatewayRestResolver
app = APIGatewayRestResolver(cors=cors_config)


def current_session_and_profile():
    """Re-query the subscription store and resolve the caller's tier profile"""
    session = extract_session_from_event(app.current_event.raw_event)
    fact = SubscriptionService(SUBSCRIPTION_TABLE_NAME).fetch_for_session(session)
    return session, resolve_tier_profile(fact)


@app.get("/subscription")
def get_subscription() -> Dict[str, Any]:
    """
    Get the caller's current tier profile.

    Anonymous callers get the free profile with authenticated=false so the
    account screen can prompt for login.
    """
    session, profile = current_session_and_profile()
    if not session.is_authenticated:
        logger.info("Anonymous subscription lookup, serving free profile")

    return {
        "authenticated": session.is_authenticated,
        "user": session.user.model_dump(mode="json") if session.user else None,
        "profile": profile.model_dump(mode="json"),
        "features_by_tier": {
            tier.value: descriptions
            for tier, descriptions in profile.catalog_by_tier().items()
        },
    }


@app.get("/subscription/plans")
def get_plans() -> Dict[str, Any]:
    """
    Get the 'Available Plans' grid relative to the caller's tier
    """
    _, profile = current_session_and_profile()
    return {
        "current_tier": profile.tier.value,
        "can_upgrade": profile.can_upgrade,
        "plans": [option.model_dump(mode="json") for option in plan_options(profile.tier, UPGRADE_PATH)],
        "tiers": [tier_profile.model_dump(mode="json") for tier_profile in all_tier_profiles()],
        "currency": CURRENCY,
        "currency_symbol": CURRENCY_SYMBOL,
        "interval": BILLING_INTERVAL,
    }


def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function handler.
    """
    return app.resolve(event, context)
