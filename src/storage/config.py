"""Blob store configuration with environment variable loading.

Pydantic-based configuration for the S3 bucket holding cited documents.
Credentials are read from the environment; missing values are reported as
a whole so the operator can fix them in one pass.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from src.storage.errors import StorageConfigurationError

# Load environment variables from .env file
load_dotenv()

# Environment variable names for the required settings, in report order
REQUIRED_SETTINGS = {
    "access_key_id": "AWS_ACCESS_KEY_ID",
    "secret_access_key": "AWS_SECRET_ACCESS_KEY",
    "region": "AWS_REGION",
    "bucket_name": "AWS_BUCKET_NAME",
}


class StorageConfig(BaseModel):
    """Configuration for the S3 document bucket.

    Attributes:
        region: AWS region of the bucket.
        access_key_id: AWS access key id.
        secret_access_key: AWS secret access key.
        bucket_name: Bucket holding the cited documents.
        key_prefix: Folder prepended to every requested filename.
        endpoint_url: Custom S3 endpoint (MinIO, localstack), None for AWS.
        presign_expiry_seconds: Lifetime of presigned download URLs.
    """

    region: str | None = Field(default_factory=lambda: os.getenv("AWS_REGION") or None)
    access_key_id: str | None = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID") or None
    )
    secret_access_key: str | None = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY") or None
    )
    bucket_name: str | None = Field(
        default_factory=lambda: os.getenv("AWS_BUCKET_NAME") or None
    )
    key_prefix: str = Field(
        default_factory=lambda: os.getenv("STORAGE_KEY_PREFIX", "halkla"),
        description="Folder inside the bucket that holds cited documents",
    )
    endpoint_url: str | None = Field(
        default_factory=lambda: os.getenv("S3_ENDPOINT_URL") or None,
    )
    presign_expiry_seconds: int = Field(
        default=300,
        ge=1,
        le=604800,
        description="Presigned URL lifetime (S3 caps this at 7 days)",
    )

    def missing_settings(self) -> list[str]:
        """Return the environment names of required settings that are unset."""
        return [
            env_name
            for field_name, env_name in REQUIRED_SETTINGS.items()
            if not (getattr(self, field_name) or "").strip()
        ]

    def require_complete(self) -> None:
        """Raise StorageConfigurationError if any required setting is unset."""
        missing = self.missing_settings()
        if missing:
            raise StorageConfigurationError(missing)

    def object_key(self, filename: str) -> str:
        """Resolve a requested filename to its key in the bucket."""
        prefix = self.key_prefix.strip("/")
        return f"{prefix}/{filename}" if prefix else filename


def get_storage_config() -> StorageConfig:
    """Create storage configuration from environment."""
    return StorageConfig()
