"""
Feedback persistence for the gas calculator

Single-table DynamoDB layout:

    PK="FEEDBACK", SK="COUNTER"            -> last issued feedback id
    PK="FEEDBACK", SK="ENTRY#<padded id>"  -> one feedback entry

Identifiers come from an atomic counter, so they increase monotonically and
break ties between entries created within the same timestamp.
"""

import datetime
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from decimal import Decimal
from typing import Any, Dict, List, Protocol
from aws_lambda_powertools import Logger

from ..models.feedback import FeedbackEntry, FeedbackStoreUnavailable
from .aws import get_ddb_table

logger = Logger()

FEEDBACK_PARTITION = "FEEDBACK"
COUNTER_SORT_KEY = "COUNTER"
ENTRY_PREFIX = "ENTRY#"
ID_WIDTH = 12


class FeedbackStore(Protocol):
    """Storage collaborator used by the feedback pipeline"""

    def create(self, rating: int, comment: str) -> FeedbackEntry: ...

    def list_all(self) -> List[FeedbackEntry]: ...


def entry_sort_key(feedback_id: int) -> str:
    return f"{ENTRY_PREFIX}{feedback_id:0{ID_WIDTH}d}"


def item_to_entry(item: Dict[str, Any]) -> FeedbackEntry:
    """Convert a DynamoDB item (Decimals included) into a FeedbackEntry"""
    return FeedbackEntry(
        id=int(item["feedback_id"]),
        rating=int(item["rating"]),
        comment=item["comment"],
        created_at=datetime.datetime.fromisoformat(item["created_at"]),
    )


class DynamoFeedbackStore:
    """FeedbackStore backed by a DynamoDB table"""

    def __init__(self, table_name: str):
        self.table_name = table_name

    @property
    def table(self) -> Any:
        return get_ddb_table(self.table_name)

    def _next_id(self) -> int:
        response = self.table.update_item(
            Key={"PK": FEEDBACK_PARTITION, "SK": COUNTER_SORT_KEY},
            UpdateExpression="ADD last_id :one",
            ExpressionAttributeValues={":one": Decimal(1)},
            ReturnValues="UPDATED_NEW",
        )
        return int(response["Attributes"]["last_id"])

    def create(self, rating: int, comment: str) -> FeedbackEntry:
        """
        Store a new feedback entry, issuing its id and creation timestamp.

        Args:
            rating: Validated rating, 1 to 5
            comment: Validated, trimmed comment

        Returns:
            FeedbackEntry: The entry as stored

        Raises:
            FeedbackStoreUnavailable: The table could not be written
        """
        try:
            feedback_id = self._next_id()
            created_at = datetime.datetime.now(datetime.timezone.utc)
            self.table.put_item(
                Item={
                    "PK": FEEDBACK_PARTITION,
                    "SK": entry_sort_key(feedback_id),
                    "feedback_id": Decimal(feedback_id),
                    "rating": Decimal(rating),
                    "comment": comment,
                    "created_at": created_at.isoformat(),
                },
                ConditionExpression="attribute_not_exists(SK)",  # Prevent overwrites
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            logger.error(f"DynamoDB error storing feedback: {error_code} - {error_message}")
            raise FeedbackStoreUnavailable(f"DynamoDB error: {error_code} - {error_message}") from e
        except BotoCoreError as e:
            logger.error(f"AWS connection error storing feedback: {str(e)}")
            raise FeedbackStoreUnavailable(f"AWS connection error: {str(e)}") from e

        logger.info(f"Stored feedback {feedback_id} with rating {rating}")
        return FeedbackEntry(
            id=feedback_id,
            rating=rating,
            comment=comment,
            created_at=created_at,
        )

    def list_all(self) -> List[FeedbackEntry]:
        """
        Read every stored feedback entry.

        Raises:
            FeedbackStoreUnavailable: The table could not be read, or holds a corrupt item
        """
        query_kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("PK").eq(FEEDBACK_PARTITION)
            & Key("SK").begins_with(ENTRY_PREFIX),
            "ScanIndexForward": False,
        }
        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            logger.error(f"DynamoDB error listing feedback: {error_code} - {error_message}")
            raise FeedbackStoreUnavailable(f"DynamoDB error: {error_code} - {error_message}") from e
        except BotoCoreError as e:
            logger.error(f"AWS connection error listing feedback: {str(e)}")
            raise FeedbackStoreUnavailable(f"AWS connection error: {str(e)}") from e

        try:
            return [item_to_entry(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Corrupt feedback item in {self.table_name}: {str(e)}")
            raise FeedbackStoreUnavailable(f"Corrupt feedback item: {str(e)}") from e
