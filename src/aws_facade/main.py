from textwrap import dedent
import logging

import pydantic
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from aws_facade.aws.clients import AWSClientManager
from aws_facade.config.settings import Settings
from aws_facade.errors import (
    AwsFacadeError,
    handle_aws_facade_errors,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
)
from aws_facade.routers.buckets import router as buckets_router
from aws_facade.routers.health import router as health_router
from aws_facade.routers.queues import router as queues_router
from aws_facade.routers.topics import router as topics_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls are no-ops."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AWS Facade API",
        summary="S3, SQS and SNS over plain HTTP, against LocalStack or AWS",
        version="v1",  # a fancier version would read the semver from pkg metadata
        description=dedent(
            """\
        | Service | Endpoints | Notes |
        | --- | --- | --- |
        | S3 | `/buckets`, `/buckets/{bucket_name}/files` | bucket and object CRUD |
        | SQS | `/queues`, `/queues/{queue_name}/messages` | queue CRUD and message lifecycle |
        | SNS | `/topics`, `/topics/{topic_name}/subscriptions`, `/topics/{topic_name}/publish` | pub/sub and SQS fan-out |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.aws_clients = AWSClientManager(settings)
    logger.info(f"Created app in {settings.deployment_mode} mode")

    app.include_router(buckets_router, tags=["S3"])
    app.include_router(queues_router, tags=["SQS"])
    app.include_router(topics_router, tags=["SNS"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=AwsFacadeError,
        handler=handle_aws_facade_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
