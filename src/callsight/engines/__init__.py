"""Job engine backends behind the IJobEngine protocol."""

from __future__ import annotations

from callsight.core.config import AppSettings
from callsight.engines.bedrock_engine import BedrockDataAutomationEngine


def create_job_engine(settings: AppSettings) -> BedrockDataAutomationEngine:
    """Create the production job engine from application settings."""
    return BedrockDataAutomationEngine(
        project_arn=settings.bedrock.project_arn,
        profile_arn=settings.bedrock.profile_arn,
        stage=settings.bedrock.blueprint_stage,
        region=settings.aws.region,
        endpoint_url=settings.bedrock.endpoint_url,
    )
