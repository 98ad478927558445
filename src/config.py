"""Application settings loaded from the environment.

Uses pydantic-settings for validation; values come from SQS_LAMBDA_* variables
or a local .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the bridge (app name, AWS region, endpoints, retries)."""

    model_config = SettingsConfigDict(env_prefix="SQS_LAMBDA_", env_file=".env", extra="ignore")

    app_name: str = Field(default="SQS to Lambda Bridge")
    aws_region: str | None = Field(default=None, description="Region for the SQS and Lambda clients")
    sqs_endpoint_url: str | None = Field(default=None, description="Override for the SQS endpoint")
    lambda_endpoint_url: str | None = Field(default=None, description="Override for the Lambda endpoint")
    max_attempts: int = Field(default=3, ge=1, description="botocore retry attempts per call")
    log_level: str = Field(default="INFO")


def get_settings() -> Settings:
    """Return the loaded settings instance."""
    return Settings()
