"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from callsight.core.config import AppSettings
from callsight.persistence.dynamodb_backend import DynamoDBRecordStore
from callsight.persistence.s3_backend import S3ObjectStore


def create_persistence(settings: AppSettings):
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (record_store, object_store).
    """
    record_store = DynamoDBRecordStore(
        table_name=settings.dynamodb.table_name,
        region=settings.aws.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    object_store = S3ObjectStore(
        region=settings.aws.region,
        endpoint_url=settings.s3.endpoint_url,
    )

    return record_store, object_store
