import os

import pytest

# Set AWS environment variables for testing, before any handler module is imported
os.environ.update(
    {
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "FEEDBACK_TABLE_NAME": "test-feedback-table",
        "SUBSCRIPTION_TABLE_NAME": "test-subscription-table",
        "POWERTOOLS_SERVICE_NAME": "gas-calculator-tests",
    }
)

from shared.services.aws import get_dynamodb_resource  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_dynamodb_resource():
    """Each moto context gets its own boto3 resource."""
    get_dynamodb_resource.cache_clear()
    yield
    get_dynamodb_resource.cache_clear()
