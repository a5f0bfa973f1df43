"""
Subscription Service for the gas calculator account screens

Reads the subscription fact for the signed-in account. The store is trusted:
whatever tier it holds is what the entitlement resolver works from.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing import Optional
from aws_lambda_powertools import Logger

from ..models.subscription import AuthSession, SubscriptionFact
from .aws import get_region_name

logger = Logger()


class SubscriptionService:
    """Read access to the subscription store"""

    def __init__(self, table_name: str, dynamodb_client=None):
        """
        Initialize subscription service

        Args:
            table_name: DynamoDB table name for subscriptions
            dynamodb_client: Optional boto3 DynamoDB client
        """
        if dynamodb_client is None:
            region = get_region_name()
            dynamodb_client = (
                boto3.client("dynamodb", region_name=region) if region else boto3.client("dynamodb")
            )
        self.dynamodb = dynamodb_client
        self.table_name = table_name

    def get_subscription_fact(self, user_id: str) -> Optional[SubscriptionFact]:
        """
        Get the subscription fact for a user

        Args:
            user_id: Unique user identifier

        Returns:
            SubscriptionFact, or None if there is no record or the store failed
        """
        try:
            response = self.dynamodb.get_item(
                TableName=self.table_name,
                Key={
                    "PK": {"S": f"USER#{user_id}"},
                    "SK": {"S": "SUBSCRIPTION"},
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error getting subscription for user {user_id}: {str(e)}")
            return None

        item = response.get("Item")
        if not item:
            logger.info(f"No subscription record for user {user_id}")
            return None

        return SubscriptionFact(tier=item.get("subscription_tier", {}).get("S"))

    def fetch_for_session(self, session: AuthSession) -> Optional[SubscriptionFact]:
        """
        Fetch the subscription fact for the session's user.

        The store is only queried for authenticated sessions; anonymous callers
        get None, which resolves to the free profile.
        """
        if not session.is_authenticated or session.user is None:
            return None
        return self.get_subscription_fact(session.user.user_id)
