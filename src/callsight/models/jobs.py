"""Job engine submission models."""

from __future__ import annotations

from pydantic import BaseModel


class JobInvocation(BaseModel):
    """Engine response to an asynchronous job submission."""

    invocation_arn: str
    client_token: str


class JobSubmission(BaseModel):
    """What the invocation stage submitted for one notification."""

    call_id: str
    input_uri: str
    output_uri: str
    client_token: str
    invocation_arn: str
