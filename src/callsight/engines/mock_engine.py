"""Mock job engine for local development and testing.

Records submissions and returns synthetic invocation ARNs. No AWS calls.
"""

from __future__ import annotations

from callsight.core.exceptions import UpstreamError
from callsight.models.jobs import JobInvocation


class MockJobEngine:
    """IJobEngine implementation that records every submission."""

    def __init__(self, arn_prefix: str = "arn:aws:bedrock:us-east-1:000000000000:data-automation-invocation/") -> None:
        self._arn_prefix = arn_prefix
        self._fail_with: str | None = None
        self.submissions: list[dict[str, str]] = []

    def fail_next(self, message: str = "ThrottlingException") -> None:
        """Make the next invoke() raise UpstreamError."""
        self._fail_with = message

    def invoke(self, input_uri: str, output_uri: str, client_token: str) -> JobInvocation:
        if self._fail_with is not None:
            message, self._fail_with = self._fail_with, None
            raise UpstreamError(f"Bedrock Data Automation invoke failed for {input_uri!r}: {message}")
        self.submissions.append(
            {"input_uri": input_uri, "output_uri": output_uri, "client_token": client_token}
        )
        return JobInvocation(
            invocation_arn=f"{self._arn_prefix}{len(self.submissions):04d}",
            client_token=client_token,
        )
