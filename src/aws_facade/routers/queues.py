from botocore.exceptions import BotoCoreError, ClientError
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Query,
    Response,
    status
)
from mypy_boto3_sqs import SQSClient

from aws_facade.config.settings import Settings
from aws_facade.dependencies import get_app_settings, get_sqs_client
from aws_facade.schemas import (
    MAX_RECEIVE_MESSAGES,
    CreateOutcome,
    CreateQueueRequest,
    CreateQueueResponse,
    HealthResponse,
    ListQueuesResponse,
    MessageResponse,
    ReceiveMessagesResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from aws_facade.sqs.queues import (
    create_queue as create_sqs_queue,
    delete_message as delete_sqs_message,
    delete_queue as delete_sqs_queue,
    list_queue_urls,
    purge_queue as purge_sqs_queue,
    receive_messages as receive_sqs_messages,
    send_message as send_sqs_message,
)

router = APIRouter()

AWS_ERRORS = (ClientError, BotoCoreError)


@router.get("/queues/health", response_model=HealthResponse)
def sqs_health_check(sqs_client: SQSClient = Depends(get_sqs_client)):
    """Check connectivity to SQS/LocalStack."""
    try:
        sqs_client.list_queues()
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"SQS connection failed: {str(e)}"
        )
    return HealthResponse(status="Healthy", service="SQS", message="Connected to SQS/LocalStack")


@router.get("/queues", response_model=ListQueuesResponse)
def list_queues(sqs_client: SQSClient = Depends(get_sqs_client)):
    """List all SQS queue URLs."""
    try:
        queue_urls = list_queue_urls(sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing queues: {str(e)}"
        )
    if not queue_urls:
        return ListQueuesResponse(queues=[], message="No queues found")
    return ListQueuesResponse(queues=queue_urls)


@router.post(
    "/queues",
    response_model=CreateQueueResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_200_OK: {"model": CreateQueueResponse, "description": "Queue already exists"},
        status.HTTP_201_CREATED: {"model": CreateQueueResponse},
    },
)
def create_queue(
    body: CreateQueueRequest,
    response: Response,
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    """Create a queue; a name conflict answers 200 with the existing queue URL."""
    queue_name = (body.queue_name or "").strip()
    if not queue_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="queue_name is required"
        )

    try:
        queue_url, outcome = create_sqs_queue(queue_name, sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating queue: {str(e)}"
        )

    if outcome == CreateOutcome.ALREADY_EXISTS:
        response.status_code = status.HTTP_200_OK
        message = f"Queue '{queue_name}' already exists"
    else:
        response.headers["Location"] = f"/queues/{queue_name}"
        message = f"Queue '{queue_name}' created successfully"
    return CreateQueueResponse(message=message, queue_url=queue_url, outcome=outcome)


@router.delete("/queues/{queue_name}", response_model=MessageResponse)
def delete_queue(
    queue_name: str = Path(..., description="The queue to delete"),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    try:
        delete_sqs_queue(queue_name, sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting queue: {str(e)}"
        )
    return MessageResponse(message=f"Queue '{queue_name}' deleted successfully")


@router.post("/queues/{queue_name}/messages", response_model=SendMessageResponse)
def send_message(
    body: SendMessageRequest,
    queue_name: str = Path(..., description="The queue to send to"),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    if not (body.message_body or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="message_body is required"
        )

    try:
        message_id = send_sqs_message(queue_name, body.message_body, sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error sending message: {str(e)}"
        )
    return SendMessageResponse(
        message="Message sent successfully",
        message_id=message_id,
        queue_name=queue_name,
    )


@router.get("/queues/{queue_name}/messages", response_model=ReceiveMessagesResponse)
def receive_messages(
    queue_name: str = Path(..., description="The queue to receive from"),
    max_messages: int = Query(
        MAX_RECEIVE_MESSAGES,
        ge=1,
        description="Values above 10 are clamped to 10",
    ),
    settings: Settings = Depends(get_app_settings),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    """
    Receive messages from a queue.

    Messages are not removed; delete each one with its `receipt_handle` once
    processed, or it becomes visible again after the visibility timeout.
    """
    try:
        messages = receive_sqs_messages(
            queue_name,
            max_messages=max_messages,
            wait_time_seconds=settings.sqs_receive_wait_seconds,
            sqs_client=sqs_client,
        )
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error receiving messages: {str(e)}"
        )

    if not messages:
        return ReceiveMessagesResponse(count=0, messages=[], message="No messages available")
    return ReceiveMessagesResponse(count=len(messages), messages=messages)


@router.delete("/queues/{queue_name}/messages/{receipt_handle:path}", response_model=MessageResponse)
def delete_message(
    queue_name: str = Path(..., description="The queue holding the message"),
    receipt_handle: str = Path(..., description="Receipt handle from a receive call (URL-encoded)"),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    try:
        delete_sqs_message(queue_name, receipt_handle, sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting message: {str(e)}"
        )
    return MessageResponse(message="Message deleted successfully")


@router.delete("/queues/{queue_name}/messages", response_model=MessageResponse)
def purge_queue(
    queue_name: str = Path(..., description="The queue to purge"),
    sqs_client: SQSClient = Depends(get_sqs_client),
):
    """Purge all messages from a queue. SQS allows one purge per 60 seconds."""
    try:
        purge_sqs_queue(queue_name, sqs_client=sqs_client)
    except AWS_ERRORS as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error purging queue: {str(e)}"
        )
    return MessageResponse(message=f"All messages purged from queue '{queue_name}'")
