"""Bucket-level S3 operations: listing, validation, idempotent create and delete."""

import logging
import string
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_s3 import S3Client

from aws_facade.aws.utils import is_conflict, is_not_found
from aws_facade.errors import BucketNotEmptyError, BucketNotFoundError
from aws_facade.schemas import CreateOutcome

logger = logging.getLogger(__name__)

MIN_BUCKET_NAME_LENGTH = 3
MAX_BUCKET_NAME_LENGTH = 63
_BUCKET_NAME_FIRST_CHARS = set(string.ascii_lowercase + string.digits)
_BUCKET_NAME_CHARS = _BUCKET_NAME_FIRST_CHARS | {".", "-"}


def is_valid_bucket_name(bucket_name: Optional[str]) -> bool:
    """
    Pre-check a bucket name before asking S3 to create it.

    S3 enforces the authoritative rule set; this only rejects names that are
    obviously invalid: wrong length, a first character that is not a lowercase
    letter or digit, or characters outside ``[a-z0-9.-]``.
    """
    if not bucket_name or bucket_name.isspace():
        return False
    if not MIN_BUCKET_NAME_LENGTH <= len(bucket_name) <= MAX_BUCKET_NAME_LENGTH:
        return False
    if bucket_name[0] not in _BUCKET_NAME_FIRST_CHARS:
        return False
    return all(char in _BUCKET_NAME_CHARS for char in bucket_name)


def list_s3_buckets(s3_client: Optional[S3Client] = None) -> List[Dict]:
    """Return ``{"bucket_name", "creation_date"}`` for every bucket."""
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_buckets()
    return [
        {"bucket_name": bucket["Name"], "creation_date": bucket.get("CreationDate")}
        for bucket in response.get("Buckets", [])
    ]


def create_s3_bucket(bucket_name: str, s3_client: Optional[S3Client] = None) -> None:
    """Create a bucket in the client's region."""
    s3_client = s3_client or boto3.client("s3")
    region = s3_client.meta.region_name
    # us-east-1 rejects an explicit LocationConstraint
    if region in (None, "us-east-1"):
        s3_client.create_bucket(Bucket=bucket_name)
    else:
        s3_client.create_bucket(
            Bucket=bucket_name,
            CreateBucketConfiguration={"LocationConstraint": region},
        )


def ensure_bucket_exists(bucket_name: str, s3_client: Optional[S3Client] = None) -> CreateOutcome:
    """
    Create the bucket, treating a 409 conflict as success.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    :return: ``CreateOutcome.CREATED`` or ``CreateOutcome.ALREADY_EXISTS``.
    """
    try:
        create_s3_bucket(bucket_name, s3_client=s3_client)
    except ClientError as e:
        if is_conflict(e):
            logger.debug(f"Bucket already exists: {bucket_name}")
            return CreateOutcome.ALREADY_EXISTS
        raise
    logger.info(f"Created S3 bucket: {bucket_name}")
    return CreateOutcome.CREATED


def bucket_is_empty(bucket_name: str, s3_client: Optional[S3Client] = None) -> bool:
    """Check for at least one object without listing the whole bucket."""
    s3_client = s3_client or boto3.client("s3")
    try:
        response = s3_client.list_objects_v2(Bucket=bucket_name, MaxKeys=1)
    except ClientError as e:
        if is_not_found(e):
            raise BucketNotFoundError(bucket_name) from e
        raise
    return response.get("KeyCount", len(response.get("Contents", []))) == 0


def delete_s3_bucket(bucket_name: str, s3_client: Optional[S3Client] = None) -> None:
    """Delete an empty bucket; refuses (400) when objects remain."""
    s3_client = s3_client or boto3.client("s3")
    if not bucket_is_empty(bucket_name, s3_client=s3_client):
        raise BucketNotEmptyError(bucket_name)
    try:
        s3_client.delete_bucket(Bucket=bucket_name)
    except ClientError as e:
        if is_not_found(e):
            raise BucketNotFoundError(bucket_name) from e
        raise
    logger.info(f"Deleted S3 bucket: {bucket_name}")
