"""AWS client management for the facade."""
import logging
import threading
from typing import Any, Dict

import boto3

from aws_facade.config.settings import Settings

logger = logging.getLogger(__name__)


class AWSClientManager:
    """Builds and caches one boto3 client per AWS service.

    Whether clients point at an emulator or at real AWS endpoints is decided
    once, from the settings the manager was created with. Route handlers run
    in a threadpool, so clients come from the manager's own session and are
    created under a lock; boto3 sessions are not safe to share while creating
    clients.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.region = settings.aws_region
        self.endpoint_url = settings.aws_endpoint_url
        self.mode = settings.deployment_mode
        self._clients: Dict[str, Any] = {}
        self._lock = threading.Lock()

        # Named profiles (SSO) only make sense against real AWS
        if settings.aws_profile and self.mode == "aws-prod":
            self.session = boto3.session.Session(profile_name=settings.aws_profile)
        else:
            self.session = boto3.session.Session()

        logger.info("Initializing AWSClientManager")
        logger.info(f"  Mode: {self.mode}")
        logger.info(f"  Region: {self.region}")
        logger.info(f"  Endpoint: {self.endpoint_url or 'default AWS endpoints'}")

    def _client_kwargs(self) -> Dict[str, Any]:
        client_kwargs: Dict[str, Any] = {
            "region_name": self.region
        }
        if self.settings.aws_profile and self.mode == "aws-prod":
            return client_kwargs

        if self.settings.aws_access_key_id:
            client_kwargs["aws_access_key_id"] = self.settings.aws_access_key_id
        if self.settings.aws_secret_access_key:
            client_kwargs["aws_secret_access_key"] = self.settings.aws_secret_access_key
        # temporary keys are only valid together with their token
        if self.settings.aws_session_token:
            client_kwargs["aws_session_token"] = self.settings.aws_session_token

        if self.endpoint_url and self.settings.uses_local_endpoint:
            client_kwargs["endpoint_url"] = self.endpoint_url
        return client_kwargs

    def get_client(self, service_name: str) -> Any:
        """Get or create an AWS service client."""
        client = self._clients.get(service_name)
        if client is not None:
            return client

        with self._lock:
            if service_name in self._clients:
                return self._clients[service_name]
            try:
                client = self.session.client(service_name, **self._client_kwargs())
            except Exception as e:
                logger.error(f"Error creating {service_name} client: {str(e)}")
                raise
            self._clients[service_name] = client

        logger.debug(f"Created {service_name} client")
        return client

    @property
    def s3(self):
        return self.get_client("s3")

    @property
    def sqs(self):
        return self.get_client("sqs")

    @property
    def sns(self):
        return self.get_client("sns")
