"""FastAPI dependencies that hand route handlers their AWS clients and uploads.

Tests swap these out through ``app.dependency_overrides``.
"""
from typing import AsyncIterator, Optional

from fastapi import Request
from mypy_boto3_s3 import S3Client
from mypy_boto3_sns import SNSClient
from mypy_boto3_sqs import SQSClient
from starlette.datastructures import UploadFile

from aws_facade.aws.clients import AWSClientManager
from aws_facade.config.settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_manager(request: Request) -> AWSClientManager:
    return request.app.state.aws_clients


def get_s3_client(request: Request) -> S3Client:
    return get_client_manager(request).s3


def get_sqs_client(request: Request) -> SQSClient:
    return get_client_manager(request).sqs


def get_sns_client(request: Request) -> SNSClient:
    return get_client_manager(request).sns


async def get_uploaded_file(request: Request) -> AsyncIterator[Optional[UploadFile]]:
    """First file part of a multipart body, whatever form field it was sent under."""
    if not request.headers.get("content-type", "").startswith("multipart/form-data"):
        yield None
        return
    form = await request.form()
    try:
        yield next(
            (value for _, value in form.multi_items() if isinstance(value, UploadFile)),
            None,
        )
    finally:
        await form.close()
