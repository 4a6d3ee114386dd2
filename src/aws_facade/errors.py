"""Domain exceptions and the FastAPI handlers that turn them into responses."""

import logging

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AwsFacadeError(Exception):
    """Base exception for conditions with a known HTTP mapping."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ResourceNotFoundError(AwsFacadeError):
    """A bucket, object, queue, topic or subscription does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class BucketNotFoundError(ResourceNotFoundError):
    def __init__(self, bucket_name: str) -> None:
        self.bucket_name = bucket_name
        super().__init__(f"Bucket '{bucket_name}' does not exist")


class ObjectNotFoundError(ResourceNotFoundError):
    def __init__(self, bucket_name: str, object_key: str) -> None:
        self.bucket_name = bucket_name
        self.object_key = object_key
        super().__init__(f"File '{object_key}' not found in bucket '{bucket_name}'")


class QueueNotFoundError(ResourceNotFoundError):
    def __init__(self, queue_name: str) -> None:
        self.queue_name = queue_name
        super().__init__(f"Queue '{queue_name}' does not exist")


class TopicNotFoundError(ResourceNotFoundError):
    def __init__(self, topic_name: str) -> None:
        self.topic_name = topic_name
        super().__init__(f"Topic '{topic_name}' does not exist")


class SubscriptionNotFoundError(ResourceNotFoundError):
    def __init__(self, subscription_arn: str) -> None:
        self.subscription_arn = subscription_arn
        super().__init__("Subscription not found")


class BucketNotEmptyError(AwsFacadeError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, bucket_name: str) -> None:
        self.bucket_name = bucket_name
        super().__init__(f"Bucket '{bucket_name}' is not empty. Delete all files first.")


class InvalidReceiptHandleError(AwsFacadeError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self) -> None:
        super().__init__("Invalid receipt handle")


class PurgeInProgressError(AwsFacadeError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, queue_name: str) -> None:
        self.queue_name = queue_name
        super().__init__("Purge already in progress. Wait 60 seconds before purging again.")


async def handle_aws_facade_errors(request: Request, exc: AwsFacadeError) -> JSONResponse:
    """Render a domain exception with the status code it carries."""
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Handle validation errors raised while building models inside a route."""
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "input": error.get("input"),
                }
                for error in errors
            ]
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
