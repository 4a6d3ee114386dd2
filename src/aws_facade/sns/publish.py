"""Publishing to SNS topics; SNS fans each message out to every subscriber."""

import logging
from typing import Dict, List, Optional

import boto3
from mypy_boto3_sns import SNSClient

from aws_facade.sns.topics import get_topic_arn

logger = logging.getLogger(__name__)


def publish_message(
    topic_name: str,
    message: str,
    subject: Optional[str] = None,
    sns_client: Optional[SNSClient] = None,
) -> Dict:
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)
    publish_kwargs = {"TopicArn": topic_arn, "Message": message}
    if subject:
        publish_kwargs["Subject"] = subject
    response = sns_client.publish(**publish_kwargs)
    logger.info(f"Published message {response['MessageId']} to {topic_arn}")
    return {"message_id": response["MessageId"], "topic_arn": topic_arn}


def publish_batch(
    topic_name: str,
    entries: List[Dict],
    sns_client: Optional[SNSClient] = None,
) -> Dict:
    """
    Publish up to 10 messages in one request.

    Each entry is ``{"message": ..., "subject": ...}``; its index in the list
    becomes the batch entry id so results can be matched back.
    """
    sns_client = sns_client or boto3.client("sns")
    topic_arn = get_topic_arn(topic_name, sns_client=sns_client)

    batch_entries = []
    for index, entry in enumerate(entries):
        batch_entry = {"Id": str(index), "Message": entry["message"]}
        if entry.get("subject"):
            batch_entry["Subject"] = entry["subject"]
        batch_entries.append(batch_entry)

    response = sns_client.publish_batch(
        TopicArn=topic_arn,
        PublishBatchRequestEntries=batch_entries,
    )
    successful = [
        {"id": item["Id"], "message_id": item["MessageId"]}
        for item in response.get("Successful", [])
    ]
    failed = [
        {"id": item["Id"], "message": item.get("Message"), "code": item.get("Code")}
        for item in response.get("Failed", [])
    ]
    logger.info(f"Published batch to {topic_arn}: {len(successful)} ok, {len(failed)} failed")
    return {"topic_arn": topic_arn, "successful": successful, "failed": failed}
