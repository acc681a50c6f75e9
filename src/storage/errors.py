"""Blob store error hierarchy.

Every error maps to a JSON ``{"error": ...}`` body in the download API.
"""


class StorageError(Exception):
    """Base class for blob store failures."""

    pass


class StorageConfigurationError(StorageError):
    """Raised when required blob store settings are absent."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Storage configuration incomplete: {', '.join(missing)}")


class ObjectNotFoundError(StorageError):
    """Raised when the requested object (or its bucket) does not exist."""

    pass


class EmptyPayloadError(StorageError):
    """Raised when the stored object has zero bytes."""

    pass


class BlobStoreError(StorageError):
    """Raised for any other S3 client or service failure."""

    pass
