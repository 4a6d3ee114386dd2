import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from aws_facade.config.settings import Settings, get_settings
from aws_facade.main import create_app
from tests.consts import TEST_BUCKET_NAME, TEST_QUEUE_NAME, TEST_REGION, TEST_TOPIC_NAME


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account."""
    for var in ("AWS_ENDPOINT_URL", "AWS_PROFILE", "DEPLOYMENT_MODE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mocked_aws(aws_credentials):
    """In-process S3, SQS and SNS for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def settings(aws_credentials) -> Settings:
    # aws-prod keeps boto3 on the default endpoints, which moto intercepts
    return Settings(deployment_mode="aws-prod", sqs_receive_wait_seconds=0)


@pytest.fixture
def app(settings):
    app = create_app(settings=settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(mocked_aws, app) -> TestClient:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def sqs_client(mocked_aws):
    return boto3.client("sqs", region_name=TEST_REGION)


@pytest.fixture
def sns_client(mocked_aws):
    return boto3.client("sns", region_name=TEST_REGION)


@pytest.fixture
def test_bucket(s3_client) -> str:
    s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
    return TEST_BUCKET_NAME


@pytest.fixture
def test_queue(sqs_client) -> str:
    sqs_client.create_queue(QueueName=TEST_QUEUE_NAME)
    return TEST_QUEUE_NAME


@pytest.fixture
def test_topic(sns_client) -> str:
    return sns_client.create_topic(Name=TEST_TOPIC_NAME)["TopicArn"]
