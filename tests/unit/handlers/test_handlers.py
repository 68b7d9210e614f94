"""Tests for the Lambda entry points: event adaptation and cold-start wiring."""

from __future__ import annotations

import json
from unittest.mock import patch

import boto3
import pytest
import structlog
from moto import mock_aws

from callsight.core.exceptions import ConfigurationError
from callsight.core.hashing import correlation_key
from callsight.handlers import persistence as persistence_handler
from callsight.handlers import retrieval as retrieval_handler
from callsight.handlers import transcription as transcription_handler
from callsight.handlers.retrieval import handle_event, request_from_event, to_proxy_response
from callsight.models.record import CallRecord
from callsight.persistence.dynamodb_backend import DynamoDBRecordStore
from callsight.stages.retrieval import CORS_HEADERS, RetrievalResponse, RetrievalService
from tests.fakes import MockJobEngine
from tests.fakes.events import s3_event, sns_wrap, sqs_event

TABLE = "call-recordings-handler-test"
REGION = "us-east-1"


@pytest.fixture(autouse=True)
def fresh_handlers():
    for cached in (transcription_handler._stage, persistence_handler._stage, retrieval_handler._service):
        cached.cache_clear()
    yield
    for cached in (transcription_handler._stage, persistence_handler._stage, retrieval_handler._service):
        cached.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def env(monkeypatch):
    for name in ("BEDROCK_PROJECT_ARN", "BEDROCK_PROFILE_ARN", "S3_INPUT_BUCKET", "S3_OUTPUT_BUCKET",
                 "S3_OUTPUT_PREFIX", "DYNAMODB_TABLE_NAME", "DYNAMODB_ENDPOINT_URL", "S3_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    return monkeypatch


@pytest.fixture
def aws(env):
    with mock_aws():
        boto3.client("dynamodb", region_name=REGION).create_table(
            TableName=TABLE,
            KeySchema=[
                {"AttributeName": "hash", "KeyType": "HASH"},
                {"AttributeName": "epochTimestamp", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "hash", "AttributeType": "S"},
                {"AttributeName": "epochTimestamp", "AttributeType": "N"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        boto3.client("s3", region_name=REGION).create_bucket(Bucket="out")
        yield


def _api_event(path=None, query=None) -> dict:
    return {"httpMethod": "GET", "pathParameters": path, "queryStringParameters": query}


class TestRequestFromEvent:
    def test_path_hash(self):
        req = request_from_event(_api_event(path={"hash": "abc"}))
        assert req.hash == "abc"
        assert req.call_id is None

    def test_query_parameters(self):
        req = request_from_event(_api_event(query={"callId": "call-42", "pageSize": "5", "nextToken": "t"}))
        assert (req.call_id, req.page_size, req.next_token) == ("call-42", "5", "t")

    def test_path_hash_wins_over_query_hash(self):
        req = request_from_event(_api_event(path={"hash": "p"}, query={"hash": "q"}))
        assert req.hash == "p"

    def test_null_parameter_maps(self):
        req = request_from_event(_api_event())
        assert req.hash is None and req.page_size is None


class TestProxyResponse:
    def test_body_serialized_with_cors(self):
        proxy = to_proxy_response(RetrievalResponse(404, {"error": "No records found"}))
        assert proxy["statusCode"] == 404
        assert proxy["headers"] == CORS_HEADERS
        assert json.loads(proxy["body"]) == {"error": "No records found"}

    def test_nested_numbers_from_dynamodb_serialize(self, settings, aws):
        store = DynamoDBRecordStore(table_name=TABLE, region=REGION)
        store.put_record(CallRecord(
            hash="h",
            epoch_timestamp=1717243200000,
            call_id="call-42",
            s3_input_uri="s3://in/call-42",
            topics=[{"name": "billing", "spans": [[0.5, 12]]}],
            created_at="2024-06-01T12:00:00.000Z",
            updated_at="2024-06-01T12:00:00.000Z",
        ))
        service = RetrievalService(settings=settings, record_store=store)

        proxy = handle_event(service, _api_event(path={"hash": "h"}))

        assert proxy["statusCode"] == 200
        assert proxy["headers"] == CORS_HEADERS
        [item] = json.loads(proxy["body"])["items"]
        assert item["topics"] == [{"name": "billing", "spans": [[0.5, 12]]}]

    def test_handle_event_with_injected_service(self, settings, record_store):
        service = RetrievalService(settings=settings, record_store=record_store)
        proxy = handle_event(service, _api_event(query={"callId": "missing"}))
        assert proxy["statusCode"] == 404
        assert json.loads(proxy["body"])["searchedHash"] == correlation_key("missing")


class TestTranscriptionHandler:
    def test_missing_configuration_fails_cold_start(self, env):
        with pytest.raises(ConfigurationError, match="BEDROCK_PROJECT_ARN"):
            transcription_handler.handler(sqs_event(), None)

    def test_submits_jobs(self, env):
        env.setenv("BEDROCK_PROJECT_ARN", "arn:aws:bedrock:us-east-1:123456789012:data-automation-project/p")
        env.setenv("BEDROCK_PROFILE_ARN", "arn:aws:bedrock:us-east-1:123456789012:data-automation-profile/p")
        env.setenv("S3_OUTPUT_BUCKET", "out")
        engine = MockJobEngine()
        with patch.object(transcription_handler, "create_job_engine", return_value=engine):
            transcription_handler.handler(sqs_event(sns_wrap({
                "callId": "call-42", "audioS3Uri": "s3://in/call-42/audio.wav",
            })), None)
        assert engine.submissions[0]["output_uri"] == "s3://out/transcription-outputs/call-42/"


class TestPersistenceHandler:
    def test_missing_configuration_fails_cold_start(self, env):
        env.setenv("DYNAMODB_TABLE_NAME", TABLE)
        with pytest.raises(ConfigurationError, match="S3_INPUT_BUCKET"):
            persistence_handler.handler(sqs_event(), None)

    def test_writes_record(self, env, aws):
        env.setenv("S3_INPUT_BUCKET", "in")
        env.setenv("DYNAMODB_TABLE_NAME", TABLE)
        boto3.client("s3", region_name=REGION).put_object(
            Bucket="out", Key="transcription-outputs/call-42/result.json",
            Body=json.dumps({"call_summary": "Refund request"}).encode(),
        )
        persistence_handler.handler(
            sqs_event(sns_wrap(s3_event("out", "transcription-outputs/call-42/result.json"))), None
        )
        items = boto3.resource("dynamodb", region_name=REGION).Table(TABLE).scan()["Items"]
        assert len(items) == 1
        assert items[0]["hash"] == correlation_key("call-42")
        assert items[0]["call_summary"] == "Refund request"


class TestRetrievalHandler:
    def test_missing_table_name_fails_cold_start(self, env):
        env.setenv("DYNAMODB_TABLE_NAME", "")
        with pytest.raises(ConfigurationError, match="DYNAMODB_TABLE_NAME"):
            retrieval_handler.handler(_api_event(), None)

    def test_returns_records(self, env, aws):
        env.setenv("DYNAMODB_TABLE_NAME", TABLE)
        boto3.resource("dynamodb", region_name=REGION).Table(TABLE).put_item(Item=CallRecord(
            hash=correlation_key("call-42"),
            epoch_timestamp=1717243200000,
            call_id="call-42",
            s3_input_uri="s3://in/call-42",
            created_at="2024-06-01T12:00:00.000Z",
            updated_at="2024-06-01T12:00:00.000Z",
        ).to_item())

        proxy = retrieval_handler.handler(_api_event(query={"callId": "call-42"}), None)

        assert proxy["statusCode"] == 200
        body = json.loads(proxy["body"])
        assert body["count"] == 1
        assert body["items"][0]["epochTimestamp"] == 1717243200000

    def test_service_built_once(self, env, aws):
        env.setenv("DYNAMODB_TABLE_NAME", TABLE)
        retrieval_handler.handler(_api_event(), None)
        retrieval_handler.handler(_api_event(), None)
        assert retrieval_handler._service.cache_info().misses == 1
