"""Shared unit test fixtures: explicit settings and in-memory ports."""

from __future__ import annotations

import pytest

from callsight.core.config import AppSettings, BedrockConfig, DynamoDBConfig, PaginationConfig, S3Config
from tests.fakes import MemoryObjectStore, MemoryRecordStore, MockJobEngine
from tests.fakes.events import StepClock

PROJECT_ARN = "arn:aws:bedrock:us-east-1:123456789012:data-automation-project/abc123def456"
PROFILE_ARN = "arn:aws:bedrock:us-east-1:123456789012:data-automation-profile/us.data-automation-v1"
TABLE_NAME = "call-recordings-test"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        bedrock=BedrockConfig(project_arn=PROJECT_ARN, profile_arn=PROFILE_ARN),
        s3=S3Config(input_bucket="in", output_bucket="out", output_prefix="prefix"),
        dynamodb=DynamoDBConfig(table_name=TABLE_NAME),
        pagination=PaginationConfig(default_page_size=20, max_page_size=100),
    )


@pytest.fixture
def record_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def object_store() -> MemoryObjectStore:
    return MemoryObjectStore()


@pytest.fixture
def engine() -> MockJobEngine:
    return MockJobEngine()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
