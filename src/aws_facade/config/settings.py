# src/aws_facade/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
LOCAL_DEPLOYMENT_MODES = ["local-dev", "aws-mock"]

LOCALSTACK_ENDPOINT_URL = "http://localhost:4566"
MOTO_SERVER_ENDPOINT_URL = "http://localhost:5000"


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from aws_facade.config.settings import get_settings
        settings = get_settings()
        endpoint = settings.aws_endpoint_url
    """

    # Application Settings
    app_name: str = Field(
        default="aws-facade-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev (LocalStack), aws-mock (moto server) or aws-prod"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_session_token: Optional[str] = Field(
        default=None,
        alias="AWS_SESSION_TOKEN",
        description="Token that comes with temporary (STS/SSO) credentials"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Override for every service endpoint (LocalStack edge port, moto server, ...)"
    )

    aws_profile: Optional[str] = Field(
        default=None,
        alias="AWS_PROFILE",
        description="Named profile used for aws-prod sessions (SSO)"
    )

    # SQS Configuration
    sqs_receive_wait_seconds: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Long-poll wait used when receiving messages"
    )

    # HTTP Configuration
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def uses_local_endpoint(self) -> bool:
        """True when clients should talk to an emulator instead of AWS."""
        return self.deployment_mode in LOCAL_DEPLOYMENT_MODES

    @field_validator("deployment_mode", mode="before")
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Map friendly names onto the three supported modes."""
        if v:
            mode_mapping = {
                "localstack": "local-dev",
                "local": "local-dev",
                "moto": "aws-mock",
                "cloud": "aws-prod",
                "aws": "aws-prod",
            }
            v = str(v).strip().lower()
            return mode_mapping.get(v, v)
        return v

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v):
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @model_validator(mode="after")
    def set_local_endpoint_and_credentials(self) -> Self:
        """Auto-set endpoint URL and dummy credentials for emulator modes."""
        if self.deployment_mode == "local-dev":
            self.aws_endpoint_url = self.aws_endpoint_url or LOCALSTACK_ENDPOINT_URL
            dummy_credential = "test"
        elif self.deployment_mode == "aws-mock":
            self.aws_endpoint_url = self.aws_endpoint_url or MOTO_SERVER_ENDPOINT_URL
            dummy_credential = "mock"
        else:
            return self

        self.aws_access_key_id = self.aws_access_key_id or dummy_credential
        self.aws_secret_access_key = self.aws_secret_access_key or dummy_credential
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
