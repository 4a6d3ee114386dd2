"""SNS topic management, addressed by topic name.

The SNS API is ARN-addressed, so every name-based operation first resolves
the name by scanning the listed topics for an exact match on the ARN's last
segment (``arn:aws:sns:<region>:<account>:<topic-name>``). That scan is
O(number of topics) per request.
"""

import logging
from typing import Dict, List, Optional

import boto3
from mypy_boto3_sns import SNSClient

from aws_facade.errors import TopicNotFoundError

logger = logging.getLogger(__name__)


def topic_name_from_arn(topic_arn: str) -> str:
    return topic_arn.split(":")[-1]


def list_topic_arns(sns_client: Optional[SNSClient] = None) -> List[str]:
    """List every topic ARN, following ``NextToken`` pages."""
    sns_client = sns_client or boto3.client("sns")
    paginator = sns_client.get_paginator("list_topics")
    return [
        topic["TopicArn"]
        for page in paginator.paginate()
        for topic in page.get("Topics", [])
    ]


def list_topics(sns_client: Optional[SNSClient] = None) -> List[Dict]:
    return [
        {"topic_arn": topic_arn, "topic_name": topic_name_from_arn(topic_arn)}
        for topic_arn in list_topic_arns(sns_client=sns_client)
    ]


def find_topic_arn(topic_name: str, sns_client: Optional[SNSClient] = None) -> Optional[str]:
    """Return the ARN whose trailing segment equals ``topic_name``, or None."""
    for topic_arn in list_topic_arns(sns_client=sns_client):
        if topic_name_from_arn(topic_arn) == topic_name:
            return topic_arn
    return None


def get_topic_arn(topic_name: str, sns_client: Optional[SNSClient] = None) -> str:
    """Like ``find_topic_arn`` but raises ``TopicNotFoundError`` when absent."""
    topic_arn = find_topic_arn(topic_name, sns_client=sns_client)
    if topic_arn is None:
        raise TopicNotFoundError(topic_name)
    return topic_arn


def ensure_topic_exists(topic_name: str, sns_client: Optional[SNSClient] = None) -> str:
    """
    Create the topic if missing and return its ARN.

    ``CreateTopic`` is idempotent per name, so an existing topic simply has
    its ARN returned.
    """
    sns_client = sns_client or boto3.client("sns")
    response = sns_client.create_topic(Name=topic_name)
    logger.info(f"Ensured SNS topic: {topic_name} ({response['TopicArn']})")
    return response["TopicArn"]


def delete_topic(topic_name: str, sns_client: Optional[SNSClient] = None) -> str:
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    sns_client.delete_topic(TopicArn=topic_arn)
    logger.info(f"Deleted SNS topic: {topic_arn}")
    return topic_arn


def get_topic_attributes(topic_name: str, sns_client: Optional[SNSClient] = None) -> Dict:
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    response = sns_client.get_topic_attributes(TopicArn=topic_arn)
    return {
        "topic_arn": topic_arn,
        "topic_name": topic_name,
        "attributes": response.get("Attributes", {}),
    }
