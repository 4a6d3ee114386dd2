"""Functions for deleting objects from an S3 bucket--the "D" in CRUD."""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_s3 import S3Client

from aws_facade.aws.utils import is_not_found
from aws_facade.errors import BucketNotFoundError
from aws_facade.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

# DeleteObjects accepts at most this many keys per request
MAX_DELETE_BATCH_SIZE = 1000


@dataclass
class DeleteAllResult:
    """Outcome of emptying a bucket. Partial success is a valid outcome."""
    deleted_count: int = 0
    errors: List[str] = field(default_factory=list)
    already_empty: bool = False


def delete_s3_object(bucket_name: str, object_key: str, s3_client: Optional[S3Client] = None) -> None:
    """
    Delete an object from an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: The key of the object to delete.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.delete_object(Bucket=bucket_name, Key=object_key)
    except ClientError as e:
        if is_not_found(e):
            raise BucketNotFoundError(bucket_name) from e
        raise


def _chunked(keys: List[str], size: int) -> Iterator[List[str]]:
    for start in range(0, len(keys), size):
        yield keys[start:start + size]


@log_execution_time
def delete_all_s3_objects(
    bucket_name: str,
    s3_client: Optional[S3Client] = None,
    max_keys: Optional[int] = None,
) -> DeleteAllResult:
    """
    Delete every object in a bucket.

    Lists the bucket page by page (continuation-token driven), deletes each
    page with ``delete_objects`` in batches of at most 1000 keys, and
    accumulates the deleted count and ``"key: message"`` failures across all
    pages. An empty first page returns immediately without any delete call.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    :param max_keys: Optional listing page size; S3 decides when omitted.
    :raises BucketNotFoundError: the bucket does not exist.
    """
    s3_client = s3_client or boto3.client("s3")
    result = DeleteAllResult()
    continuation_token = None
    first_page = True

    while True:
        list_kwargs = {"Bucket": bucket_name}
        if continuation_token:
            list_kwargs["ContinuationToken"] = continuation_token
        if max_keys:
            list_kwargs["MaxKeys"] = max_keys

        try:
            response = s3_client.list_objects_v2(**list_kwargs)
        except ClientError as e:
            if is_not_found(e):
                raise BucketNotFoundError(bucket_name) from e
            raise

        keys = [obj["Key"] for obj in response.get("Contents", [])]
        if first_page and not keys:
            logger.info(f"Bucket '{bucket_name}' is already empty")
            result.already_empty = True
            return result
        first_page = False

        for batch in _chunked(keys, MAX_DELETE_BATCH_SIZE):
            try:
                delete_response = s3_client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": key} for key in batch]},
                )
            except ClientError as e:
                if is_not_found(e):
                    raise BucketNotFoundError(bucket_name) from e
                raise
            result.deleted_count += len(delete_response.get("Deleted", []))
            for error in delete_response.get("Errors", []):
                result.errors.append(f"{error.get('Key')}: {error.get('Message')}")

        continuation_token = response.get("NextContinuationToken")
        if not continuation_token:
            break

    logger.info(
        f"Deleted {result.deleted_count} objects from '{bucket_name}' "
        f"with {len(result.errors)} errors"
    )
    return result
