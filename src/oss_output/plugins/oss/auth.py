# src/oss_output/plugins/oss/auth.py
"""OSS authentication and client construction.

OSS exposes an S3-compatible API, so the storage client is a boto3 S3
client pointed at the OSS endpoint. OSS only accepts virtual-hosted-style
requests, so path-style addressing is disabled.

Credentials should be passed via environment variables (${OSS_ACCESS_KEY_SECRET}
in the settings file), not hardcoded in configuration files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, SecretStr, model_validator

from oss_output.contracts.errors import ConfigurationError

if TYPE_CHECKING:
    from botocore.client import BaseClient


class OssAuthConfig(BaseModel):
    """Endpoint and access key pair for one OSS account.

    All three values are required; a missing one is a configuration error
    raised before any task is opened.
    """

    model_config = {"extra": "forbid", "frozen": True}

    endpoint: str
    access_key_id: str
    access_key_secret: SecretStr
    region: str | None = None

    @model_validator(mode="after")
    def validate_credentials(self) -> Self:
        """Reject blank endpoint or credentials."""
        missing = []
        if not self.endpoint.strip():
            missing.append("endpoint")
        if not self.access_key_id.strip():
            missing.append("access_key_id")
        if not self.access_key_secret.get_secret_value().strip():
            missing.append("access_key_secret")
        if missing:
            raise ConfigurationError(f"OSS output requires endpoint and credentials. Missing: {', '.join(missing)}")
        return self

    def create_client(self) -> BaseClient:
        """Create an S3-compatible client for the configured OSS endpoint."""
        import boto3
        from botocore.config import Config

        return boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.access_key_secret.get_secret_value(),
            region_name=self.region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "virtual"},
                # Single attempt; retry policy belongs to the caller
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
        )
