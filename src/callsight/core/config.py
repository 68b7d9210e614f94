"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from callsight.core.exceptions import ConfigurationError


class AWSConfig(BaseSettings):
    """Shared AWS client configuration."""

    model_config = {"env_prefix": "AWS_"}

    region: str = "us-east-1"


class BedrockConfig(BaseSettings):
    """Bedrock Data Automation job engine configuration."""

    model_config = {"env_prefix": "BEDROCK_"}

    project_arn: str = ""
    blueprint_stage: Literal["LIVE", "DEVELOPMENT"] = "LIVE"
    profile_arn: str = ""
    endpoint_url: str | None = None


class S3Config(BaseSettings):
    """Input audio and result blob locations."""

    model_config = {"env_prefix": "S3_"}

    input_bucket: str = ""
    output_bucket: str = ""
    output_prefix: str = "transcription-outputs"
    result_suffix: str = "result.json"
    endpoint_url: str | None = None  # LocalStack override


class DynamoDBConfig(BaseSettings):
    """DynamoDB recordings table configuration."""

    model_config = {"env_prefix": "DYNAMODB_"}

    table_name: str = "conversational-analytics-dev-call-recordings"
    endpoint_url: str | None = None  # LocalStack override


class PaginationConfig(BaseSettings):
    """Retrieval page sizing."""

    model_config = {"env_prefix": "PAGINATION_"}

    default_page_size: int = 20
    max_page_size: int = 100

    @model_validator(mode="after")
    def _check_bounds(self) -> "PaginationConfig":
        if self.default_page_size <= 0 or self.max_page_size <= 0:
            raise ValueError("page sizes must be positive")
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})"
            )
        return self


# Environment variable -> (group, field) for settings that have no usable default.
REQUIRED_SETTINGS: dict[str, tuple[str, str]] = {
    "BEDROCK_PROJECT_ARN": ("bedrock", "project_arn"),
    "BEDROCK_PROFILE_ARN": ("bedrock", "profile_arn"),
    "S3_INPUT_BUCKET": ("s3", "input_bucket"),
    "S3_OUTPUT_BUCKET": ("s3", "output_bucket"),
    "DYNAMODB_TABLE_NAME": ("dynamodb", "table_name"),
}

TRANSCRIPTION_REQUIRED = ("BEDROCK_PROJECT_ARN", "BEDROCK_PROFILE_ARN", "S3_OUTPUT_BUCKET")
PERSISTENCE_REQUIRED = ("S3_INPUT_BUCKET", "DYNAMODB_TABLE_NAME")
RETRIEVAL_REQUIRED = ("DYNAMODB_TABLE_NAME",)


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "CALLSIGHT_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    aws: AWSConfig = Field(default_factory=AWSConfig)
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)
    s3: S3Config = Field(default_factory=S3Config)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    def validate_required(self, names: Iterable[str] = tuple(REQUIRED_SETTINGS)) -> "AppSettings":
        """Raise ConfigurationError listing every required setting that is empty."""
        missing = []
        for name in names:
            group, field = REQUIRED_SETTINGS[name]
            if not getattr(getattr(self, group), field):
                missing.append(name)
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return self


def load_settings(required: Iterable[str] = tuple(REQUIRED_SETTINGS)) -> AppSettings:
    """Build settings from the environment and validate them once at cold start."""
    try:
        settings = AppSettings()
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    return settings.validate_required(required)
