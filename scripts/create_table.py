"""Create the call recordings DynamoDB table.

Usage:
    python scripts/create_table.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

DEFAULT_TABLE_NAME = "conversational-analytics-dev-call-recordings"

KEY_SCHEMA: list[dict[str, str]] = [
    {"AttributeName": "hash", "KeyType": "HASH"},
    {"AttributeName": "epochTimestamp", "KeyType": "RANGE"},
]

ATTRIBUTE_DEFINITIONS: list[dict[str, str]] = [
    {"AttributeName": "hash", "AttributeType": "S"},
    {"AttributeName": "epochTimestamp", "AttributeType": "N"},
]


def create_table(ddb: Any, table_name: str = DEFAULT_TABLE_NAME) -> bool:
    """Create the recordings table. Returns False if it already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])
    if table_name in existing:
        print(f"  Table {table_name} already exists, skipping")
        return False

    client.create_table(
        TableName=table_name,
        KeySchema=KEY_SCHEMA,
        AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)
    print(f"  Created table {table_name}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the Callsight recordings table")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-name", default=DEFAULT_TABLE_NAME, help="Table name")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating table...")
    create_table(ddb, table_name=args.table_name)

    print("Done!")


if __name__ == "__main__":
    main()
