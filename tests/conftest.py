"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - storage_config: Complete StorageConfig with dummy credentials
    - s3_client / s3_stub: boto3 client with botocore Stubber attached
    - blob_store: BlobStore over the stubbed client
    - app: FastAPI app with storage dependencies overridden
    - app_client: HTTPX client against the app
    - resource_store: Fresh in-memory attachment store
    - chat_config: Client config with zero retry delays
    - session: ChatSession over the fresh resource store
"""

import io
from collections.abc import AsyncGenerator, Iterator

import boto3
import pytest
from botocore.config import Config
from botocore.response import StreamingBody
from botocore.stub import Stubber
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.chat.config import ChatClientConfig
from src.chat.session import ChatSession
from src.storage.blob_store import BlobStore, get_blob_store
from src.storage.config import StorageConfig
from src.storage.local_resources import LocalResourceStore, get_resource_store

TEST_BUCKET = "test-bucket"
TEST_PREFIX = "halkla"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


def s3_object_response(content: bytes, content_type: str = "application/pdf") -> dict:
    """Build a get_object response for the Stubber."""
    return {
        "Body": StreamingBody(io.BytesIO(content), len(content)),
        "ContentLength": len(content),
        "ContentType": content_type,
    }


@pytest.fixture
def storage_config() -> StorageConfig:
    """Return complete storage configuration with dummy credentials."""
    return StorageConfig(
        region="eu-north-1",
        access_key_id="AKIATESTTESTTEST",
        secret_access_key="test-secret-key",
        bucket_name=TEST_BUCKET,
        key_prefix=TEST_PREFIX,
        endpoint_url=None,
    )


@pytest.fixture
def s3_client(storage_config: StorageConfig):
    """Create a real boto3 S3 client that never touches the network."""
    return boto3.client(
        "s3",
        region_name=storage_config.region,
        aws_access_key_id=storage_config.access_key_id,
        aws_secret_access_key=storage_config.secret_access_key,
        config=Config(signature_version="s3v4"),
    )


@pytest.fixture
def s3_stub(s3_client) -> Iterator[Stubber]:
    """Activate a Stubber on the S3 client.

    Yields:
        Stubber for queuing get_object responses and errors.
    """
    with Stubber(s3_client) as stubber:
        yield stubber


@pytest.fixture
def blob_store(storage_config: StorageConfig, s3_client, s3_stub: Stubber) -> BlobStore:
    """Return a BlobStore over the stubbed client."""
    return BlobStore(storage_config, client=s3_client)


@pytest.fixture
def resource_store() -> LocalResourceStore:
    """Return an empty attachment store."""
    return LocalResourceStore()


@pytest.fixture
def app(blob_store: BlobStore, resource_store: LocalResourceStore) -> FastAPI:
    """Create the API with stubbed storage and a fresh resource store."""
    application = create_app()
    application.dependency_overrides[get_blob_store] = lambda: blob_store
    application.dependency_overrides[get_resource_store] = lambda: resource_store
    return application


@pytest.fixture
async def app_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for the API.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def chat_config() -> ChatClientConfig:
    """Return client config pointing at test hosts with no retry delays."""
    return ChatClientConfig(
        chat_endpoint="http://chat.test/analiz",
        api_base_url="http://test",
        request_timeout=5.0,
        retry_base_delay=0.0,
        max_retries=2,
        busy_retry_delay=0.0,
    )


@pytest.fixture
def session(resource_store: LocalResourceStore) -> ChatSession:
    """Return a fresh chat session."""
    return ChatSession(resources=resource_store)
