from botocore.exceptions import BotoCoreError, ClientError
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Response,
    status
)
from mypy_boto3_sns import SNSClient
from mypy_boto3_sqs import SQSClient

from aws_facade.dependencies import get_sns_client, get_sqs_client
from aws_facade.schemas import (
    MAX_PUBLISH_BATCH_SIZE,
    CreateTopicRequest,
    CreateTopicResponse,
    HealthResponse,
    ListSubscriptionsResponse,
    ListTopicsResponse,
    MessageResponse,
    PublishBatchRequest,
    PublishBatchResponse,
    PublishMessageRequest,
    PublishResponse,
    SubscribeEmailRequest,
    SubscribeResponse,
    SubscribeSqsRequest,
    TopicAttributesResponse,
)
from aws_facade.sns.publish import publish_batch, publish_message
from aws_facade.sns.subscriptions import (
    PENDING_CONFIRMATION,
    list_subscriptions as list_topic_subscriptions,
    subscribe_email as subscribe_email_endpoint,
    subscribe_sqs as subscribe_sqs_queue,
    unsubscribe as remove_subscription,
)
from aws_facade.sns.topics import (
    delete_topic as delete_sns_topic,
    ensure_topic_exists,
    get_topic_attributes as fetch_topic_attributes,
    list_topics as list_sns_topics,
)

router = APIRouter()

AWS_ERRORS = (ClientError, BotoCoreError)


@router.get("/topics/health", response_model=HealthResponse)
def sns_health_check(sns_client: SNSClient = Depends(get_sns_client)):
    """Check connectivity to SNS/LocalStack."""
    try:
        sns_client.list_topics()
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"SNS connection failed: {str(e)}"
        )
    return HealthResponse(status="Healthy", service="SNS", message="Connected to SNS/LocalStack")


############################
# --- Topic management --- #
############################

@router.get("/topics", response_model=ListTopicsResponse)
def list_topics(sns_client: SNSClient = Depends(get_sns_client)):
    try:
        topics = list_sns_topics(sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing topics: {str(e)}"
        )
    if not topics:
        return ListTopicsResponse(topics=[], message="No topics found")
    return ListTopicsResponse(topics=topics)


@router.post("/topics", response_model=CreateTopicResponse, status_code=status.HTTP_201_CREATED)
def create_topic(
    body: CreateTopicRequest,
    response: Response,
    sns_client: SNSClient = Depends(get_sns_client),
):
    """Create a topic (pub/sub broadcast channel). Creating an existing name returns its ARN."""
    topic_name = (body.topic_name or "").strip()
    if not topic_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="topic_name is required"
        )

    try:
        topic_arn = ensure_topic_exists(topic_name, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating topic: {str(e)}"
        )
    response.headers["Location"] = f"/topics/{topic_name}"
    return CreateTopicResponse(
        message=f"Topic '{topic_name}' created successfully",
        topic_arn=topic_arn,
        topic_name=topic_name,
    )


@router.delete("/topics/{topic_name}", response_model=MessageResponse)
def delete_topic(
    topic_name: str = Path(..., description="The topic to delete"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    try:
        delete_sns_topic(topic_name, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting topic: {str(e)}"
        )
    return MessageResponse(message=f"Topic '{topic_name}' deleted successfully")


@router.get("/topics/{topic_name}/attributes", response_model=TopicAttributesResponse)
def get_topic_attributes(
    topic_name: str = Path(..., description="The topic to describe"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    try:
        attributes = fetch_topic_attributes(topic_name, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error getting topic attributes: {str(e)}"
        )
    return TopicAttributesResponse(**attributes)


###################################
# --- Subscription management --- #
###################################

@router.get("/topics/{topic_name}/subscriptions", response_model=ListSubscriptionsResponse)
def list_subscriptions(
    topic_name: str = Path(..., description="The topic whose subscriptions to list"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    try:
        subscriptions = list_topic_subscriptions(topic_name, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing subscriptions: {str(e)}"
        )
    if not subscriptions:
        return ListSubscriptionsResponse(topic_name=topic_name, subscriptions=[], message="No subscriptions found")
    return ListSubscriptionsResponse(topic_name=topic_name, subscriptions=subscriptions)


@router.post("/topics/{topic_name}/subscriptions/email", response_model=SubscribeResponse)
def subscribe_email(
    body: SubscribeEmailRequest,
    topic_name: str = Path(..., description="The topic to subscribe to"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    email_address = (body.email_address or "").strip()
    if not email_address:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="email_address is required"
        )

    try:
        subscription = subscribe_email_endpoint(topic_name, email_address, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error subscribing email: {str(e)}"
        )
    return SubscribeResponse(
        message=f"Email subscription created. Check '{email_address}' for confirmation email.",
        subscription_arn=subscription["subscription_arn"],
        topic_arn=subscription["topic_arn"],
        note="With LocalStack, email confirmations won't actually be sent. Subscription is auto-confirmed.",
    )


@router.post("/topics/{topic_name}/subscriptions/sqs", response_model=SubscribeResponse)
def subscribe_sqs(
    body: SubscribeSqsRequest,
    topic_name: str = Path(..., description="The topic to subscribe to"),
    sns_client: SNSClient = Depends(get_sns_client),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    """Subscribe an SQS queue to the topic (fan-out pattern)."""
    queue_name = (body.queue_name or "").strip()
    if not queue_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="queue_name is required"
        )

    try:
        subscription = subscribe_sqs_queue(
            topic_name,
            queue_name,
            sns_client=sns_client,
            sqs_client=sqs_client,
        )
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error subscribing SQS queue: {str(e)}"
        )
    return SubscribeResponse(
        message=f"SQS queue '{queue_name}' subscribed to topic '{topic_name}'",
        subscription_arn=subscription["subscription_arn"],
        topic_arn=subscription["topic_arn"],
        queue_arn=subscription["queue_arn"],
        note="Messages published to this topic will now be sent to this SQS queue (fan-out pattern)",
    )


@router.delete("/subscriptions/{subscription_arn}", response_model=MessageResponse)
def unsubscribe(
    subscription_arn: str = Path(..., description="The ARN of the subscription to remove"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    if subscription_arn == PENDING_CONFIRMATION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot unsubscribe from pending subscriptions"
        )

    try:
        remove_subscription(subscription_arn, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error unsubscribing: {str(e)}"
        )
    return MessageResponse(message="Subscription removed successfully")


######################
# --- Publishing --- #
######################

@router.post("/topics/{topic_name}/publish", response_model=PublishResponse)
def publish(
    body: PublishMessageRequest,
    topic_name: str = Path(..., description="The topic to publish to"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    """Publish a message to every subscriber of the topic."""
    if not (body.message or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="message is required"
        )

    try:
        result = publish_message(topic_name, body.message, subject=body.subject, sns_client=sns_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error publishing message: {str(e)}"
        )
    return PublishResponse(
        message="Message published to all subscribers",
        message_id=result["message_id"],
        topic_arn=result["topic_arn"],
        note="All subscribed endpoints (email, SQS, etc.) will receive this message",
    )


@router.post("/topics/{topic_name}/publish-batch", response_model=PublishBatchResponse)
def publish_messages_batch(
    body: PublishBatchRequest,
    topic_name: str = Path(..., description="The topic to publish to"),
    sns_client: SNSClient = Depends(get_sns_client),
):
    """Publish between 1 and 10 messages in a single request."""
    if not body.messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="messages is required and cannot be empty"
        )
    if len(body.messages) > MAX_PUBLISH_BATCH_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {MAX_PUBLISH_BATCH_SIZE} messages per batch"
        )
    if any(not (entry.message or "").strip() for entry in body.messages):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Every batch entry needs a message"
        )

    try:
        result = publish_batch(
            topic_name,
            [entry.model_dump() for entry in body.messages],
            sns_client=sns_client,
        )
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error publishing batch messages: {str(e)}"
        )
    return PublishBatchResponse(
        message=f"Published {len(result['successful'])} messages successfully",
        success_count=len(result["successful"]),
        failure_count=len(result["failed"]),
        successful=result["successful"],
        failed=result["failed"],
    )
