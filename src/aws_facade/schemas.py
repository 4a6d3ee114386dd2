####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_RECEIVE_MESSAGES = 10
MAX_PUBLISH_BATCH_SIZE = 10


class CreateOutcome(str, Enum):
    """Result of an idempotent create."""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class MessageResponse(BaseModel):
    """Generic acknowledgement."""
    message: str


class HealthResponse(BaseModel):
    """Response model for the per-service health checks."""
    status: str = Field(json_schema_extra={"example": "Healthy"})
    service: str = Field(json_schema_extra={"example": "S3"})
    message: str = Field(json_schema_extra={"example": "Connected to S3/LocalStack"})


#########
# --- S3 #
#########

class CreateBucketRequest(BaseModel):
    """Request body for `POST /buckets`."""
    bucket_name: Optional[str] = Field(
        None,
        description="Name of the bucket to create.",
        json_schema_extra={"example": "my-bucket"},
    )


class CreateBucketResponse(BaseModel):
    """Response model for `POST /buckets`."""
    message: str
    bucket_name: str
    outcome: CreateOutcome


class BucketSummary(BaseModel):
    bucket_name: str
    creation_date: Optional[datetime] = None


class ListBucketsResponse(BaseModel):
    """Response model for `GET /buckets`."""
    buckets: List[BucketSummary]
    message: Optional[str] = None


class UploadTextRequest(BaseModel):
    """Request body for `POST /buckets/:bucket_name/files/upload-text`."""
    file_name: Optional[str] = Field(None, json_schema_extra={"example": "notes/hello.txt"})
    content: Optional[str] = Field(None, json_schema_extra={"example": "Hello, world!"})


class UploadFileResponse(BaseModel):
    """Response model for the upload endpoints."""
    message: str
    bucket_name: str
    file_name: str
    size: Optional[int] = Field(None, description="The size of the uploaded file in bytes.")
    etag: Optional[str] = None


class FileSummary(BaseModel):
    """Metadata of an object as returned by a listing."""
    key: str = Field(
        description="The key of the object.",
        json_schema_extra={"example": "reports/2024/summary.txt"},
    )
    size: int = Field(description="The size of the object in bytes.")
    last_modified: datetime = Field(description="The last modified date of the object.")
    etag: Optional[str] = None


class ListFilesResponse(BaseModel):
    """Response model for `GET /buckets/:bucket_name/files`."""
    bucket_name: str
    files: List[FileSummary]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "bucket_name": "my-bucket",
                "files": [
                    {
                        "key": "reports/2024/summary.txt",
                        "size": 512,
                        "last_modified": "2024-01-01T00:00:00Z",
                        "etag": "\"9a0364b9e99bb480dd25e1f0284c8555\"",
                    }
                ],
            }
        }
    )


class FileMetadataResponse(BaseModel):
    """Response model for `GET /buckets/:bucket_name/files/:file_name/metadata`."""
    bucket_name: str
    file_name: str
    content_length: int
    content_type: Optional[str] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


class DeleteAllFilesResponse(BaseModel):
    """Response model for `DELETE /buckets/:bucket_name/files`."""
    message: str
    deleted_count: int
    errors: List[str] = Field(default_factory=list)


##########
# --- SQS #
##########

class CreateQueueRequest(BaseModel):
    """Request body for `POST /queues`."""
    queue_name: Optional[str] = Field(None, json_schema_extra={"example": "orders"})


class CreateQueueResponse(BaseModel):
    message: str
    queue_url: str
    outcome: CreateOutcome


class ListQueuesResponse(BaseModel):
    queues: List[str]
    message: Optional[str] = None


class SendMessageRequest(BaseModel):
    """Request body for `POST /queues/:queue_name/messages`."""
    message_body: Optional[str] = Field(None, json_schema_extra={"example": "{\"order_id\": 42}"})


class SendMessageResponse(BaseModel):
    message: str
    message_id: str
    queue_name: str


class ReceivedMessage(BaseModel):
    message_id: str
    body: str
    receipt_handle: str
    attributes: Dict[str, str] = Field(default_factory=dict)


class ReceiveMessagesResponse(BaseModel):
    """Response model for `GET /queues/:queue_name/messages`."""
    count: int
    messages: List[ReceivedMessage]
    message: Optional[str] = None


##########
# --- SNS #
##########

class CreateTopicRequest(BaseModel):
    """Request body for `POST /topics`."""
    topic_name: Optional[str] = Field(None, json_schema_extra={"example": "order-events"})


class CreateTopicResponse(BaseModel):
    message: str
    topic_arn: str
    topic_name: str


class TopicSummary(BaseModel):
    topic_arn: str
    topic_name: str


class ListTopicsResponse(BaseModel):
    topics: List[TopicSummary]
    message: Optional[str] = None


class TopicAttributesResponse(BaseModel):
    topic_arn: str
    topic_name: str
    attributes: Dict[str, str]


class SubscriptionSummary(BaseModel):
    subscription_arn: str
    protocol: str
    endpoint: str
    topic_arn: str


class ListSubscriptionsResponse(BaseModel):
    topic_name: str
    subscriptions: List[SubscriptionSummary]
    message: Optional[str] = None


class SubscribeEmailRequest(BaseModel):
    email_address: Optional[str] = Field(None, json_schema_extra={"example": "ops@example.com"})


class SubscribeSqsRequest(BaseModel):
    queue_name: Optional[str] = Field(None, json_schema_extra={"example": "orders"})


class SubscribeResponse(BaseModel):
    message: str
    subscription_arn: str
    topic_arn: Optional[str] = None
    queue_arn: Optional[str] = None
    note: Optional[str] = None


class PublishMessageRequest(BaseModel):
    """Request body for `POST /topics/:topic_name/publish`."""
    message: Optional[str] = Field(None, json_schema_extra={"example": "Order 42 shipped"})
    subject: Optional[str] = Field(None, json_schema_extra={"example": "Shipping update"})


class PublishResponse(BaseModel):
    message: str
    message_id: str
    topic_arn: str
    note: Optional[str] = None


class PublishBatchRequest(BaseModel):
    """Request body for `POST /topics/:topic_name/publish-batch`."""
    messages: List[PublishMessageRequest] = Field(default_factory=list)


class PublishBatchSuccess(BaseModel):
    id: str
    message_id: str


class PublishBatchFailure(BaseModel):
    id: str
    message: Optional[str] = None
    code: Optional[str] = None


class PublishBatchResponse(BaseModel):
    message: str
    success_count: int
    failure_count: int
    successful: List[PublishBatchSuccess]
    failed: List[PublishBatchFailure]
