"""Helpers for classifying botocore errors."""
from typing import Iterable

from botocore.exceptions import ClientError

NOT_FOUND_CODES = {
    "404",
    "NoSuchBucket",
    "NoSuchKey",
    "NotFound",
    "NotFoundException",
}

# SQS answers with query-protocol or JSON-protocol codes depending on the
# server (LocalStack, moto, AWS) and the botocore version.
QUEUE_DOES_NOT_EXIST_CODES = {
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
}

QUEUE_NAME_EXISTS_CODES = {
    "QueueAlreadyExists",
    "QueueNameExists",
    "AWS.SimpleQueueService.QueueNameExists",
}

PURGE_IN_PROGRESS_CODES = {
    "AWS.SimpleQueueService.PurgeQueueInProgress",
    "PurgeQueueInProgress",
}

RECEIPT_HANDLE_INVALID_CODES = {
    "ReceiptHandleIsInvalid",
}


def get_error_code(error: ClientError) -> str:
    """Return the service error code, e.g. ``NoSuchBucket``."""
    return error.response.get("Error", {}).get("Code", "")


def get_http_status_code(error: ClientError) -> int:
    """Return the HTTP status the service answered with (0 when unknown)."""
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)


def error_code_in(error: ClientError, codes: Iterable[str]) -> bool:
    return get_error_code(error) in set(codes)


def is_not_found(error: ClientError) -> bool:
    return get_http_status_code(error) == 404 or error_code_in(error, NOT_FOUND_CODES)


def is_conflict(error: ClientError) -> bool:
    return get_http_status_code(error) == 409


def is_queue_missing(error: ClientError) -> bool:
    return error_code_in(error, QUEUE_DOES_NOT_EXIST_CODES)
