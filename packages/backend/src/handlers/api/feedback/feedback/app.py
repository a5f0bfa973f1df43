import json
import os
from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response, content_types
from aws_lambda_powertools.event_handler.api_gateway import CORSConfig
from aws_lambda_powertools.event_handler.exceptions import BadRequestError, ServiceError
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError
from typing import Any

from shared.models.feedback import (
    FeedbackPersistError,
    FeedbackReadError,
    FeedbackSubmission,
    FeedbackValidationError,
)
from shared.services.aws import get_table_name
from shared.services.feedback_service import FeedbackPipeline
from shared.services.feedback_store import DynamoFeedbackStore

# Initialize the logger
logger = Logger()

# Retrieve environment variables
FEEDBACK_TABLE_NAME = get_table_name("FEEDBACK_TABLE_NAME", "gc-feedback-dev")

# Configure CORS
cors_config = CORSConfig(
    allow_origin=os.environ.get("CORS_ALLOW_ORIGIN", "*"),
)

# Initialize the APIGatewayRestResolver
app = APIGatewayRestResolver(cors=cors_config)


def get_pipeline() -> FeedbackPipeline:
    return FeedbackPipeline(DynamoFeedbackStore(FEEDBACK_TABLE_NAME))


def json_response(status_code: int, payload: dict[str, Any], headers: dict[str, str] | None = None) -> Response:
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(payload),
        headers=headers,
    )


@app.post("/feedback")
def submit_feedback_handler() -> Response:
    """
    Submit a flame rating with a comment.
    Expected body: {"rating": 1-5, "comment": "..."}
    """
    try:
        body = app.current_event.json_body
        submission = FeedbackSubmission(**body)
    except (ValidationError, TypeError, ValueError) as exc:
        logger.error(f"Validation error: {str(exc)}")
        raise BadRequestError(f"Invalid request: {str(exc)}")

    try:
        result = get_pipeline().submit(submission)
    except FeedbackValidationError as exc:
        return json_response(
            400,
            {"field": exc.field, "code": exc.code, "message": exc.message},
        )
    except FeedbackPersistError as exc:
        # Echo the input back so the form keeps what the user typed
        return json_response(
            503,
            {
                "code": "PERSIST_FAILED",
                "message": exc.message,
                "submission": submission.model_dump(mode="json"),
            },
        )

    return json_response(
        201,
        {
            "feedback": result.entry.model_dump(mode="json"),
            "stale": result.read_model_stale,
        },
    )


@app.get("/feedback")
def list_feedback_handler() -> Response:
    """
    List all feedback, newest first, with count and mean rating.
    """
    try:
        aggregate = get_pipeline().list()
    except FeedbackReadError as exc:
        raise ServiceError(503, exc.message)

    return json_response(200, aggregate.model_dump(mode="json"), headers={"Cache-Control": "no-store"})


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Lambda function handler.
    """
    return app.resolve(event, context)
