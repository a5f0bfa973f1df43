from typing import Any
import boto3
import os
from boto3.resources.base import ServiceResource
from functools import cache


def get_region_name() -> str | None:
    """
    Get the AWS region name from environment variable.
    Uses AWS_REGION if set, otherwise lets boto3 use its default region resolution.
    """
    return os.getenv("AWS_REGION")


def get_table_name(env_var: str, default: str) -> str:
    """
    Resolve a DynamoDB table name from the function environment.

    Args:
        env_var: Name of the environment variable set by the deployment template
        default: Table name used for local runs and tests

    Returns:
        str: The configured table name, or the default when unset or blank.
    """
    return (os.environ.get(env_var) or "").strip() or default


@cache
def get_dynamodb_resource() -> ServiceResource:
    """
    Get a DynamoDB resource instance.

    Returns:
        boto3.resources.base.ServiceResource: The DynamoDB resource.
    """
    region = get_region_name()
    if region:
        return boto3.resource("dynamodb", region_name=region)
    return boto3.resource("dynamodb")


def get_ddb_table(table_name: str) -> Any:
    return get_dynamodb_resource().Table(table_name)
