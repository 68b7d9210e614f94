"""Bedrock Data Automation job engine.

Submits asynchronous audio analysis jobs; results land under the requested
output prefix and are picked up by the persistence stage via S3 events.
"""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from callsight.core.exceptions import UpstreamError
from callsight.models.jobs import JobInvocation


class BedrockDataAutomationEngine:
    """Production IJobEngine backed by bedrock-data-automation-runtime."""

    def __init__(self, project_arn: str, profile_arn: str, stage: str = "LIVE",
                 region: str = "us-east-1", endpoint_url: str | None = None,
                 client: Any = None) -> None:
        self._project_arn = project_arn
        self._profile_arn = profile_arn
        self._stage = stage
        if client is None:
            kwargs: dict = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("bedrock-data-automation-runtime", **kwargs)
        self._client = client

    def invoke(self, input_uri: str, output_uri: str, client_token: str) -> JobInvocation:
        try:
            resp = self._client.invoke_data_automation_async(
                clientToken=client_token,
                inputConfiguration={"s3Uri": input_uri},
                outputConfiguration={"s3Uri": output_uri},
                dataAutomationConfiguration={
                    "dataAutomationProjectArn": self._project_arn,
                    "stage": self._stage,
                },
                dataAutomationProfileArn=self._profile_arn,
            )
        except (ClientError, BotoCoreError) as exc:
            raise UpstreamError(f"Bedrock Data Automation invoke failed for {input_uri!r}: {exc}") from exc
        return JobInvocation(invocation_arn=resp.get("invocationArn", ""), client_token=client_token)
