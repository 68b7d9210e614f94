"""DynamoDB backend implementing IRecordStore."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from callsight.core.exceptions import UpstreamError
from callsight.core.numbers import to_dynamodb, to_plain
from callsight.models.record import HASH_ATTR, CallRecord, RecordPage

# Same-millisecond collisions step the sort key forward at most this many times.
MAX_PUT_ATTEMPTS = 10


class DynamoDBRecordStore:
    """Production IRecordStore backed by a single DynamoDB table.

    Key schema: ``hash`` (S, partition) + ``epochTimestamp`` (N, sort).
    Writes are conditional appends; an existing item is never replaced.
    """

    def __init__(self, table_name: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_name = table_name
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(table_name)

    def _page(self, resp: dict[str, Any]) -> RecordPage:
        lek = resp.get("LastEvaluatedKey")
        return RecordPage(
            items=[to_plain(item) for item in resp.get("Items", [])],
            last_evaluated_key=to_plain(lek) if lek else None,
        )

    def put_record(self, record: CallRecord) -> CallRecord:
        """Append ``record``; returns it with the sort key actually written."""
        for _ in range(MAX_PUT_ATTEMPTS):
            try:
                self._table.put_item(
                    Item=to_dynamodb(record.to_item()),
                    ConditionExpression="attribute_not_exists(#hash)",
                    ExpressionAttributeNames={"#hash": HASH_ATTR},
                )
                return record
            except ClientError as exc:
                if exc.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
                    raise UpstreamError(
                        f"DynamoDB put failed for hash={record.hash!r} in {self._table_name!r}: {exc}"
                    ) from exc
                record = record.model_copy(update={"epoch_timestamp": record.epoch_timestamp + 1})
            except BotoCoreError as exc:
                raise UpstreamError(
                    f"DynamoDB put failed for hash={record.hash!r} in {self._table_name!r}: {exc}"
                ) from exc
        raise UpstreamError(
            f"DynamoDB put for hash={record.hash!r} collided {MAX_PUT_ATTEMPTS} times in {self._table_name!r}"
        )

    def query_by_hash(
        self,
        hash_key: str,
        limit: int,
        start_key: dict[str, Any] | None = None,
        newest_first: bool = True,
    ) -> RecordPage:
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": "#hash = :hash",
            "ExpressionAttributeNames": {"#hash": HASH_ATTR},
            "ExpressionAttributeValues": {":hash": hash_key},
            "ScanIndexForward": not newest_first,
            "Limit": limit,
        }
        if start_key:
            kwargs["ExclusiveStartKey"] = start_key
        try:
            return self._page(self._table.query(**kwargs))
        except (ClientError, BotoCoreError) as exc:
            raise UpstreamError(f"DynamoDB query failed for hash={hash_key!r}: {exc}") from exc

    def scan_records(self, limit: int, start_key: dict[str, Any] | None = None) -> RecordPage:
        kwargs: dict[str, Any] = {"Limit": limit}
        if start_key:
            kwargs["ExclusiveStartKey"] = start_key
        try:
            return self._page(self._table.scan(**kwargs))
        except (ClientError, BotoCoreError) as exc:
            raise UpstreamError(f"DynamoDB scan failed on {self._table_name!r}: {exc}") from exc
