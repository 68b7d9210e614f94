"""S3 object storage backend implementing IObjectStore."""

from __future__ import annotations

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from callsight.core.exceptions import UpstreamError


class S3ObjectStore:
    """Production IObjectStore backed by S3.

    Not bound to one bucket: completion events name the bucket they came from.
    """

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def read(self, bucket: str, key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
            return resp["Body"].read()
        except (ClientError, BotoCoreError) as exc:
            raise UpstreamError(f"S3 read failed for s3://{bucket}/{key}: {exc}") from exc
