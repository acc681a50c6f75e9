"""Storage access for cited documents.

Responsibilities:
    - S3 bucket configuration from the environment
    - Reading whole objects and signing short-lived download URLs
    - Holding decoded attachments behind revocable local URLs

The download API is the only consumer of the bucket; the chat client only
ever talks to the local resource store.
"""

from src.storage.blob_store import BlobStore, StoredObject, get_blob_store
from src.storage.config import StorageConfig, get_storage_config
from src.storage.errors import (
    BlobStoreError,
    EmptyPayloadError,
    ObjectNotFoundError,
    StorageConfigurationError,
    StorageError,
)
from src.storage.local_resources import LocalResourceStore, get_resource_store

__all__ = [
    "BlobStore",
    "BlobStoreError",
    "EmptyPayloadError",
    "LocalResourceStore",
    "ObjectNotFoundError",
    "StorageConfig",
    "StorageConfigurationError",
    "StorageError",
    "StoredObject",
    "get_blob_store",
    "get_resource_store",
    "get_storage_config",
]
