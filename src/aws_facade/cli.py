# cli.py
import logging
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from aws_facade.aws.clients import AWSClientManager
from aws_facade.config.settings import get_settings
from aws_facade.main import configure_logging
from aws_facade.s3.buckets import ensure_bucket_exists, is_valid_bucket_name
from aws_facade.sns.topics import ensure_topic_exists
from aws_facade.sqs.queues import create_queue

logger = logging.getLogger(__name__)


@click.group()
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Load environment variables from this .env file before reading settings")
def cli(env_file: Optional[str]):
    """CLI commands for the AWS facade API"""
    if env_file:
        load_dotenv(env_file, override=True)
        get_settings.cache_clear()
    configure_logging(get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url or 'default AWS endpoints'}")
    click.echo(f"  AWS Profile: {settings.aws_profile or '-'}")
    click.echo(f"  SQS Receive Wait: {settings.sqs_receive_wait_seconds}s")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
def serve(host: str, port: int, reload: bool):
    """Run the API with uvicorn"""
    import uvicorn

    uvicorn.run("aws_facade.main:create_app", factory=True, host=host, port=port, reload=reload)


@cli.command()
@click.option("--bucket", "buckets", multiple=True, help="Bucket to create if missing (repeatable)")
@click.option("--queue", "queues", multiple=True, help="Queue to create if missing (repeatable)")
@click.option("--topic", "topics", multiple=True, help="Topic to create if missing (repeatable)")
def bootstrap(buckets: Tuple[str, ...], queues: Tuple[str, ...], topics: Tuple[str, ...]):
    """Make sure the given buckets, queues and topics exist"""
    aws_clients = AWSClientManager(get_settings())

    for bucket_name in buckets:
        if not is_valid_bucket_name(bucket_name):
            raise click.BadParameter(f"Invalid bucket name: {bucket_name}", param_hint="--bucket")
        outcome = ensure_bucket_exists(bucket_name, s3_client=aws_clients.s3)
        click.echo(f"bucket {bucket_name}: {outcome.value}")

    for queue_name in queues:
        queue_url, outcome = create_queue(queue_name, sqs_client=aws_clients.sqs)
        click.echo(f"queue {queue_name}: {outcome.value} ({queue_url})")

    for topic_name in topics:
        topic_arn = ensure_topic_exists(topic_name, sns_client=aws_clients.sns)
        click.echo(f"topic {topic_name}: {topic_arn}")


if __name__ == "__main__":
    cli()
