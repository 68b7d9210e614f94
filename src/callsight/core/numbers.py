"""Decimal/float conversion at the DynamoDB boundary."""

from __future__ import annotations

from decimal import Decimal
from typing import Any


def to_plain(value: Any) -> Any:
    """Recursively convert Decimal values to int/float, at any nesting depth."""
    if isinstance(value, Decimal):
        return int(value) if value == int(value) else float(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def to_dynamodb(value: Any) -> Any:
    """Recursively convert floats to Decimal; boto3 rejects float attribute values."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb(v) for v in value]
    return value
