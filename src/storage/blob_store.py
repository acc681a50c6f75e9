"""S3 access for cited documents.

Two operations are needed by the download API: read a whole object, and
sign a short-lived GET URL for it. Both resolve a requested filename to
``<key_prefix>/<filename>`` in the configured bucket.
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from pydantic import BaseModel, Field

from src.storage.config import StorageConfig, get_storage_config
from src.storage.errors import BlobStoreError, EmptyPayloadError, ObjectNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/pdf"

# S3 error codes that mean "nothing to read at this key"
_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}
# Credential problems are reported as missing objects to the caller
_ACCESS_CODES = {"AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"}


class StoredObject(BaseModel):
    """A document read from the bucket.

    Attributes:
        filename: Requested filename.
        key: Full object key in the bucket.
        content: Object bytes.
        content_type: MIME type reported by S3.
    """

    filename: str
    key: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


class BlobStore:
    """Read-only facade over the S3 document bucket."""

    def __init__(self, config: StorageConfig, client=None) -> None:
        """Initialize the store.

        Args:
            config: Complete storage configuration.
            client: Optional pre-built boto3 S3 client (used by tests).
        """
        self._config = config
        self._client = client or self._create_client()

    def _create_client(self):
        # SigV4 signing is required for presigned URLs in newer regions
        return boto3.client(
            "s3",
            region_name=self._config.region,
            aws_access_key_id=self._config.access_key_id,
            aws_secret_access_key=self._config.secret_access_key,
            endpoint_url=self._config.endpoint_url,
            config=Config(signature_version="s3v4", retries={"max_attempts": 3}),
        )

    @property
    def bucket(self) -> str:
        return self._config.bucket_name or ""

    def read_object(self, filename: str) -> StoredObject:
        """Read a whole object from the bucket.

        Args:
            filename: Requested filename (citation name).

        Returns:
            StoredObject with content and content type.

        Raises:
            ObjectNotFoundError: Key, bucket, or credentials are missing.
            EmptyPayloadError: The object has zero bytes.
            BlobStoreError: Any other S3 failure.
        """
        key = self._config.object_key(filename)
        logger.info(f"Reading s3://{self.bucket}/{key}")

        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
            content = response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES or code in _ACCESS_CODES:
                logger.warning(
                    f"Object not available: s3://{self.bucket}/{key} ({code})",
                    extra={"event": "download.not_found", "citation": filename},
                )
                raise ObjectNotFoundError(f"Document not found: {filename}") from e
            raise BlobStoreError(f"S3 error: {code} - {e}") from e
        except NoCredentialsError as e:
            raise ObjectNotFoundError(f"No credentials available to read {filename}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"S3 client error: {e}") from e

        if not content:
            logger.warning(
                f"Object is empty: s3://{self.bucket}/{key}",
                extra={"event": "download.empty", "citation": filename},
            )
            raise EmptyPayloadError(f"Document is empty: {filename}")

        return StoredObject(
            filename=filename,
            key=key,
            content=content,
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
        )

    def presigned_url(self, filename: str, expires_in: int | None = None) -> str:
        """Sign a GET URL for an object without reading it.

        Args:
            filename: Requested filename (citation name).
            expires_in: Lifetime in seconds, defaults to the configured expiry.

        Returns:
            Presigned URL string.

        Raises:
            BlobStoreError: If signing fails.
        """
        key = self._config.object_key(filename)
        expires_in = expires_in or self._config.presign_expiry_seconds

        try:
            url = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError(f"Could not sign download URL: {e}") from e

        logger.info(f"Signed download URL for s3://{self.bucket}/{key} ({expires_in}s)")
        return url


# Module-level singleton instance
_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Get or create the global blob store.

    Configuration is validated on every call until a store has been built,
    so a fixed environment takes effect without a restart.

    Returns:
        The BlobStore instance.

    Raises:
        StorageConfigurationError: If required settings are absent.
    """
    global _blob_store
    if _blob_store is None:
        config = get_storage_config()
        missing = config.missing_settings()
        if missing:
            logger.error(
                f"Storage configuration incomplete: {', '.join(missing)}",
                extra={"event": "download.config_missing"},
            )
        config.require_complete()
        _blob_store = BlobStore(config)
    return _blob_store
