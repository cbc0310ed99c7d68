from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.config import Config

from ...settings import settings


@lru_cache(maxsize=1)
def botocore_config() -> Config:
    # Adaptive client-side retries; retry.py adds a narrow app-layer retry on top.
    return Config(
        region_name=settings.aws_region,
        retries={"max_attempts": 10, "mode": "adaptive"},
        connect_timeout=2,
        read_timeout=10,
    )


@lru_cache(maxsize=1)
def dynamodb_resource():
    kwargs = {"config": botocore_config()}
    if settings.ddb_endpoint_url:
        # DynamoDB Local / LocalStack
        kwargs["endpoint_url"] = settings.ddb_endpoint_url
    return boto3.resource("dynamodb", **kwargs)


def table_resource(table_name: str):
    return dynamodb_resource().Table(table_name)
