"""SNS subscriptions, including the SNS -> SQS fan-out wiring."""

import logging
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_sns import SNSClient
from mypy_boto3_sqs import SQSClient

from aws_facade.aws.utils import is_not_found
from aws_facade.errors import AwsFacadeError, SubscriptionNotFoundError
from aws_facade.sns.topics import get_topic_arn
from aws_facade.sqs.queues import get_queue_arn

logger = logging.getLogger(__name__)

# SNS reports this instead of an ARN until an endpoint confirms
PENDING_CONFIRMATION = "PendingConfirmation"


def list_subscriptions(topic_name: str, sns_client: Optional[SNSClient] = None) -> List[Dict]:
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    paginator = sns_client.get_paginator("list_subscriptions_by_topic")
    return [
        {
            "subscription_arn": subscription["SubscriptionArn"],
            "protocol": subscription["Protocol"],
            "endpoint": subscription["Endpoint"],
            "topic_arn": subscription["TopicArn"],
        }
        for page in paginator.paginate(TopicArn=topic_arn)
        for subscription in page.get("Subscriptions", [])
    ]


def subscribe_email(topic_name: str, email_address: str, sns_client: Optional[SNSClient] = None) -> Dict:
    """Subscribe an email endpoint; real AWS sends a confirmation mail first."""
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    response = sns_client.subscribe(
        TopicArn=topic_arn,
        Protocol="email",
        Endpoint=email_address,
        ReturnSubscriptionArn=True,
    )
    logger.info(f"Subscribed {email_address} to {topic_arn}")
    return {"subscription_arn": response["SubscriptionArn"], "topic_arn": topic_arn}


def subscribe_sqs(
    topic_name: str,
    queue_name: str,
    sns_client: Optional[SNSClient] = None,
    sqs_client: Optional[SQSClient] = None,
) -> Dict:
    """
    Deliver everything published to the topic into an SQS queue.

    :raises TopicNotFoundError: the topic does not exist.
    :raises QueueNotFoundError: the queue does not exist.
    """
    sns_client = sns_client or boto3.client("sns")
    sqs_client = sqs_client or boto3.client("sqs")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    queue_arn = get_queue_arn(queue_name, sqs_client=sqs_client)
    if not queue_arn:
        raise AwsFacadeError("Failed to get queue ARN from SQS")

    response = sns_client.subscribe(
        TopicArn=topic_arn,
        Protocol="sqs",
        Endpoint=queue_arn,
        ReturnSubscriptionArn=True,
    )
    logger.info(f"Subscribed queue {queue_arn} to {topic_arn}")
    return {
        "subscription_arn": response["SubscriptionArn"],
        "topic_arn": topic_arn,
        "queue_arn": queue_arn,
    }


def unsubscribe(subscription_arn: str, sns_client: Optional[SNSClient] = None) -> None:
    sns_client = sns_client or boto3.client("sns")
    try:
        sns_client.unsubscribe(SubscriptionArn=subscription_arn)
    except ClientError as e:
        if is_not_found(e):
            raise SubscriptionNotFoundError(subscription_arn) from e
        raise
    logger.info(f"Removed subscription {subscription_arn}")
