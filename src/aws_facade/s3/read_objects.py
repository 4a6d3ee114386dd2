"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import Dict, List, Optional

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_s3 import S3Client

from aws_facade.aws.utils import get_error_code, is_not_found
from aws_facade.errors import BucketNotFoundError, ObjectNotFoundError


def object_exists_in_s3(bucket_name: str, object_key: str, s3_client: Optional[S3Client] = None) -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: True if the object exists, False otherwise.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as e:
        if is_not_found(e):
            return False
        raise


def list_s3_objects(
    bucket_name: str,
    prefix: str = "",
    s3_client: Optional[S3Client] = None,
) -> List[Dict]:
    """
    List every object in a bucket, following continuation tokens.

    :param bucket_name: Name of the S3 bucket.
    :param prefix: Only return keys starting with this prefix.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: ``{"key", "size", "last_modified", "etag"}`` per object.
    """
    s3_client = s3_client or boto3.client("s3")
    paginator = s3_client.get_paginator("list_objects_v2")
    files = []
    try:
        for page in paginator.paginate(Bucket=bucket_name, Prefix=prefix):
            for obj in page.get("Contents", []):
                files.append(
                    {
                        "key": obj["Key"],
                        "size": obj["Size"],
                        "last_modified": obj["LastModified"],
                        "etag": obj.get("ETag"),
                    }
                )
    except ClientError as e:
        if is_not_found(e):
            raise BucketNotFoundError(bucket_name) from e
        raise
    return files


def fetch_s3_object(bucket_name: str, object_key: str, s3_client: Optional[S3Client] = None) -> Dict:
    """
    Fetch an object; the caller streams ``response["Body"]``.

    :raises BucketNotFoundError: the bucket does not exist.
    :raises ObjectNotFoundError: the key does not exist.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        return s3_client.get_object(Bucket=bucket_name, Key=object_key)
    except ClientError as e:
        if get_error_code(e) == "NoSuchBucket":
            raise BucketNotFoundError(bucket_name) from e
        if is_not_found(e):
            raise ObjectNotFoundError(bucket_name, object_key) from e
        raise


def fetch_s3_object_metadata(bucket_name: str, object_key: str, s3_client: Optional[S3Client] = None) -> Dict:
    """Return an object's headers without downloading its body."""
    s3_client = s3_client or boto3.client("s3")
    try:
        response = s3_client.head_object(Bucket=bucket_name, Key=object_key)
    except ClientError as e:
        # HEAD responses have no body, so a missing bucket and a missing key both read as 404
        if is_not_found(e):
            raise ObjectNotFoundError(bucket_name, object_key) from e
        raise
    return {
        "content_length": response.get("ContentLength", 0),
        "content_type": response.get("ContentType"),
        "last_modified": response.get("LastModified"),
        "etag": response.get("ETag"),
    }
