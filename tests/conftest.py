"""
Pytest configuration and shared fixtures.

Environment variables are set at import time so Powertools and boto3 pick them
up before any handler module is imported by a test module.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import boto3
import pytest
from moto import mock_aws

from serverless_tasks.handlers.utils.errors import (
    AccountExistsError,
    ExternalServiceError,
    InvalidCredentialsError,
)

os.environ.update({
    "AWS_DEFAULT_REGION": "eu-west-1",
    "AWS_REGION": "eu-west-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SECURITY_TOKEN": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "POWERTOOLS_SERVICE_NAME": "test-serverless-tasks",
    "POWERTOOLS_METRICS_NAMESPACE": "TestServerlessTasks",
    "POWERTOOLS_TRACE_DISABLED": "true",
    "LOG_LEVEL": "DEBUG",
})

REGION = "eu-west-1"


@pytest.fixture
def lambda_context():
    """Lambda context carrying the attributes Powertools reads."""

    @dataclass
    class LambdaContext:
        function_name: str = "test-function"
        function_version: str = "$LATEST"
        memory_limit_in_mb: int = 128
        invoked_function_arn: str = "arn:aws:lambda:eu-west-1:123456789012:function:test-function"
        aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"
        log_group_name: str = "/aws/lambda/test-function"
        log_stream_name: str = "2024/01/01/[$LATEST]test123"

        def get_remaining_time_in_millis(self) -> int:
            return 30000

    return LambdaContext()


# In-memory capability fakes
class InMemoryDocumentStore:
    """DocumentStore keeping items in insertion order."""

    def __init__(self, table_name: str = "test-table"):
        self.table_name = table_name
        self.items: Dict[Any, Dict[str, Any]] = {}
        self.fail_with: Optional[Exception] = None
        self.get_calls = 0
        self.put_calls = 0
        self.scan_calls = 0

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.get_calls += 1
        self._maybe_fail()
        return self.items.get(key['id'])

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self.put_calls += 1
        self._maybe_fail()
        self.items[item['id']] = dict(item)
        return item

    def scan_all(self) -> List[Dict[str, Any]]:
        self.scan_calls += 1
        self._maybe_fail()
        return list(self.items.values())

    @property
    def access_count(self) -> int:
        return self.get_calls + self.put_calls + self.scan_calls


class InMemoryObjectStore:
    def __init__(self, bucket_name: str = "test-bucket"):
        self.bucket_name = bucket_name
        self.objects: Dict[str, Dict[str, str]] = {}
        self.fail_with: Optional[Exception] = None

    def put_object(self, key: str, body: str, content_type: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.objects[key] = {"body": body, "content_type": content_type}


class FakeIdentityProvider:
    """IdentityProvider holding accounts in a dict."""

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.fail_with: Optional[Exception] = None

    def create_user(self, username: str, attributes: Dict[str, str], temporary_password: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if username in self.users:
            raise AccountExistsError(username=username)
        self.users[username] = {"attributes": attributes, "password": temporary_password, "permanent": False}

    def set_permanent_password(self, username: str, password: str) -> None:
        self.users[username].update(password=password, permanent=True)

    def authenticate(self, username: str, password: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        user = self.users.get(username)
        if user is None:
            raise InvalidCredentialsError(reason="UserNotFoundException")
        if user["password"] != password:
            raise InvalidCredentialsError(reason="NotAuthorizedException")
        return f"id-token-for-{username}"


@pytest.fixture
def tables_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore("Tables")


@pytest.fixture
def reservations_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore("Reservations")


@pytest.fixture
def events_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore("Events")


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore("uuid-storage")


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def store_failure() -> ExternalServiceError:
    return ExternalServiceError(
        message="DynamoDB PutItem failed: ProvisionedThroughputExceededException",
        service_name="DynamoDB",
        error_code="DYNAMODB_ProvisionedThroughputExceededException",
    )


# Event builders
@pytest.fixture
def rest_api_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST (v1) proxy events."""

    def build(
        method: str,
        resource: str,
        body: Any = None,
        path_parameters: Optional[Dict[str, str]] = None,
        username: Optional[str] = "test-user",
    ) -> Dict[str, Any]:
        path = resource
        for name, value in (path_parameters or {}).items():
            path = path.replace("{" + name + "}", value)

        request_context: Dict[str, Any] = {
            "requestId": "c6af9ac6-7b61-11e6-9a41-93e8deadbeef",
            "stage": "api",
            "resourcePath": resource,
            "httpMethod": method,
        }
        if username is not None:
            request_context["authorizer"] = {"claims": {"cognito:username": username}}

        return {
            "resource": resource,
            "path": path,
            "httpMethod": method,
            "headers": {"Content-Type": "application/json"},
            "pathParameters": path_parameters,
            "queryStringParameters": None,
            "requestContext": request_context,
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "isBase64Encoded": False,
        }

    return build


@pytest.fixture
def http_api_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway HTTP API (v2) events."""

    def build(method: str, raw_path: str) -> Dict[str, Any]:
        return {
            "version": "2.0",
            "routeKey": "$default",
            "rawPath": raw_path,
            "rawQueryString": "",
            "headers": {"accept": "application/json"},
            "requestContext": {
                "requestId": "JKJaXmPLvHcESHA=",
                "http": {"method": method, "path": raw_path, "protocol": "HTTP/1.1", "sourceIp": "127.0.0.1"},
                "stage": "$default",
            },
            "isBase64Encoded": False,
        }

    return build


# moto-backed AWS fixtures
@pytest.fixture
def aws():
    with mock_aws():
        yield


def _create_table(dynamodb, name: str):
    return dynamodb.create_table(
        TableName=name,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )


@pytest.fixture
def dynamodb_resource(aws):
    dynamodb = boto3.resource("dynamodb", region_name=REGION)
    for name in ("Tables", "Reservations", "Events", "Weather"):
        _create_table(dynamodb, name)
    return dynamodb


@pytest.fixture
def s3_bucket(aws) -> str:
    s3 = boto3.client("s3", region_name=REGION)
    s3.create_bucket(Bucket="uuid-storage", CreateBucketConfiguration={"LocationConstraint": REGION})
    return "uuid-storage"


@pytest.fixture
def user_pool(aws) -> Dict[str, str]:
    cognito = boto3.client("cognito-idp", region_name=REGION)
    pool_id = cognito.create_user_pool(PoolName="test-pool")["UserPool"]["Id"]
    client_id = cognito.create_user_pool_client(
        UserPoolId=pool_id,
        ClientName="test-client",
        ExplicitAuthFlows=["ALLOW_ADMIN_USER_PASSWORD_AUTH", "ALLOW_REFRESH_TOKEN_AUTH"],
    )["UserPoolClient"]["ClientId"]
    return {"pool_id": pool_id, "client_id": client_id}


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
