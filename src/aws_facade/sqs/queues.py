"""Queue CRUD and message lifecycle on SQS, addressed by queue name."""

import logging
from typing import Dict, List, Optional, Tuple

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_sqs import SQSClient

from aws_facade.aws.utils import (
    PURGE_IN_PROGRESS_CODES,
    QUEUE_NAME_EXISTS_CODES,
    RECEIPT_HANDLE_INVALID_CODES,
    error_code_in,
    is_queue_missing,
)
from aws_facade.errors import (
    InvalidReceiptHandleError,
    PurgeInProgressError,
    QueueNotFoundError,
)
from aws_facade.schemas import MAX_RECEIVE_MESSAGES, CreateOutcome

logger = logging.getLogger(__name__)


def clamp_max_messages(max_messages: int) -> int:
    """SQS returns between 1 and 10 messages per receive call."""
    return max(1, min(max_messages, MAX_RECEIVE_MESSAGES))


def list_queue_urls(sqs_client: Optional[SQSClient] = None) -> List[str]:
    sqs_client = sqs_client or boto3.client("sqs")
    response = sqs_client.list_queues()
    return response.get("QueueUrls", [])


def get_queue_url(queue_name: str, sqs_client: Optional[SQSClient] = None) -> str:
    """
    Resolve a queue name to its URL.

    :raises QueueNotFoundError: no queue with that name exists.
    """
    sqs_client = sqs_client or boto3.client("sqs")
    try:
        return sqs_client.get_queue_url(QueueName=queue_name)["QueueUrl"]
    except ClientError as e:
        if is_queue_missing(e):
            raise QueueNotFoundError(queue_name) from e
        raise


def get_queue_arn(queue_name: str, sqs_client: Optional[SQSClient] = None) -> Optional[str]:
    """Look up the ARN SNS needs to deliver to a queue."""
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    response = sqs_client.get_queue_attributes(
        QueueUrl=queue_url,
        AttributeNames=["QueueArn"],
    )
    return response.get("Attributes", {}).get("QueueArn")


def create_queue(queue_name: str, sqs_client: Optional[SQSClient] = None) -> Tuple[str, CreateOutcome]:
    """
    Create a queue, treating a name conflict as success.

    :return: The queue URL and whether it was created or already there.
    """
    sqs_client = sqs_client or boto3.client("sqs")
    try:
        response = sqs_client.create_queue(QueueName=queue_name)
    except ClientError as e:
        if error_code_in(e, QUEUE_NAME_EXISTS_CODES):
            logger.debug(f"SQS queue already exists: {queue_name}")
            return get_queue_url(queue_name, sqs_client=sqs_client), CreateOutcome.ALREADY_EXISTS
        raise
    logger.info(f"Created SQS queue: {queue_name} ({response['QueueUrl']})")
    return response["QueueUrl"], CreateOutcome.CREATED


def delete_queue(queue_name: str, sqs_client: Optional[SQSClient] = None) -> None:
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    try:
        sqs_client.delete_queue(QueueUrl=queue_url)
    except ClientError as e:
        if is_queue_missing(e):
            raise QueueNotFoundError(queue_name) from e
        raise
    logger.info(f"Deleted SQS queue: {queue_name}")


def send_message(queue_name: str, message_body: str, sqs_client: Optional[SQSClient] = None) -> str:
    """Send a message and return its ``MessageId``."""
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    response = sqs_client.send_message(
        QueueUrl=queue_url,
        MessageBody=message_body,
    )
    logger.info(f"Message {response.get('MessageId')} sent to queue {queue_name}")
    return response["MessageId"]


def receive_messages(
    queue_name: str,
    max_messages: int = MAX_RECEIVE_MESSAGES,
    wait_time_seconds: int = 5,
    sqs_client: Optional[SQSClient] = None,
) -> List[Dict]:
    """
    Receive up to ``max_messages`` (clamped to 10) messages.

    Received messages stay in the queue until deleted with their receipt
    handle; SQS hides them for the queue's visibility timeout meanwhile.
    """
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    response = sqs_client.receive_message(
        QueueUrl=queue_url,
        MaxNumberOfMessages=clamp_max_messages(max_messages),
        WaitTimeSeconds=wait_time_seconds,
        AttributeNames=["All"],
        MessageAttributeNames=["All"],
    )
    return [
        {
            "message_id": message["MessageId"],
            "body": message["Body"],
            "receipt_handle": message["ReceiptHandle"],
            "attributes": message.get("Attributes", {}),
        }
        for message in response.get("Messages", [])
    ]


def delete_message(queue_name: str, receipt_handle: str, sqs_client: Optional[SQSClient] = None) -> None:
    """Acknowledge one delivery using its receipt handle."""
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    try:
        sqs_client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)
    except ClientError as e:
        if error_code_in(e, RECEIPT_HANDLE_INVALID_CODES):
            raise InvalidReceiptHandleError() from e
        if is_queue_missing(e):
            raise QueueNotFoundError(queue_name) from e
        raise


def purge_queue(queue_name: str, sqs_client: Optional[SQSClient] = None) -> None:
    """Drop every message; SQS allows one purge per queue every 60 seconds."""
    sqs_client = sqs_client or boto3.client("sqs")
    queue_url = get_queue_url(queue_name, sqs_client=sqs_client)
    try:
        sqs_client.purge_queue(QueueUrl=queue_url)
    except ClientError as e:
        if error_code_in(e, PURGE_IN_PROGRESS_CODES):
            raise PurgeInProgressError(queue_name) from e
        if is_queue_missing(e):
            raise QueueNotFoundError(queue_name) from e
        raise
    logger.info(f"Purged SQS queue: {queue_name}")
