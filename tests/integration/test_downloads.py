"""Integration tests for the download, attachment, and profile endpoints.

Requests go through the full FastAPI stack with S3 replaced by a botocore
Stubber, so the tests cover validation, error mapping, and the response
shapes the chat page relies on.
"""

from unittest.mock import MagicMock, patch

import pytest_check as check
from botocore.stub import Stubber
from fastapi import FastAPI
from httpx import AsyncClient

import src.storage.blob_store as blob_store_module
from src.parsing.data_url import decode_data_url
from src.storage.blob_store import BlobStore, get_blob_store
from src.storage.config import StorageConfig
from src.storage.local_resources import LocalResourceStore
from tests.conftest import PDF_BYTES, TEST_BUCKET, s3_object_response


class TestDownloadEndpoint:
    """Tests for POST /api/download."""

    async def test_returns_document_as_data_url(
        self, app_client: AsyncClient, s3_stub: Stubber
    ) -> None:
        """Stored object comes back base64-encoded with its metadata."""
        s3_stub.add_response(
            "get_object",
            s3_object_response(PDF_BYTES),
            {"Bucket": TEST_BUCKET, "Key": "halkla/doc1.pdf"},
        )

        response = await app_client.post("/api/download", json={"filename": "doc1.pdf"})

        assert response.status_code == 200
        data = response.json()
        check.is_true(data["data"].startswith("data:application/pdf;base64,"))
        check.equal(decode_data_url(data["data"])[1], PDF_BYTES)
        check.equal(data["size"], len(PDF_BYTES))
        check.equal(data["contentType"], "application/pdf")
        check.equal(data["filename"], "doc1.pdf")
        check.is_true(data["success"])

    async def test_missing_object_returns_500_without_retry(
        self, app_client: AsyncClient, s3_stub: Stubber
    ) -> None:
        """A missing key is reported once, with a single S3 call."""
        s3_stub.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)

        response = await app_client.post("/api/download", json={"filename": "nope.pdf"})

        check.equal(response.status_code, 500)
        check.is_in("nope.pdf", response.json()["error"])
        check.equal(response.headers["access-control-allow-origin"], "*")
        s3_stub.assert_no_pending_responses()

    async def test_empty_object_returns_500(
        self, app_client: AsyncClient, s3_stub: Stubber
    ) -> None:
        """Zero-byte objects are an error, not an empty document."""
        s3_stub.add_response("get_object", s3_object_response(b""))

        response = await app_client.post("/api/download", json={"filename": "empty.pdf"})

        check.equal(response.status_code, 500)
        check.is_in("empty", response.json()["error"])

    async def test_missing_filename_returns_400(self, app_client: AsyncClient) -> None:
        """Body without filename is rejected before S3 is touched."""
        for body in [{}, {"filename": ""}, {"filename": "   "}]:
            response = await app_client.post("/api/download", json=body)

            check.equal(response.status_code, 400)
            check.equal(response.json(), {"error": "Filename is required"})

    async def test_non_json_body_returns_400(self, app_client: AsyncClient) -> None:
        """Unparseable body gets a generic 400."""
        response = await app_client.post(
            "/api/download",
            content=b"filename=doc1.pdf",
            headers={"Content-Type": "application/json"},
        )

        check.equal(response.status_code, 400)
        check.is_in("error", response.json())

    async def test_get_is_not_allowed(self, app_client: AsyncClient) -> None:
        """Only POST and OPTIONS are routed."""
        response = await app_client.get("/api/download")

        assert response.status_code == 405

    async def test_preflight_returns_cors_headers(self, app_client: AsyncClient) -> None:
        """OPTIONS answers with an empty body and permissive CORS headers."""
        response = await app_client.options("/api/download")

        check.equal(response.status_code, 200)
        check.equal(response.json(), {})
        check.equal(response.headers["access-control-allow-origin"], "*")
        check.is_in("POST", response.headers["access-control-allow-methods"])

    async def test_incomplete_configuration_names_missing_settings(
        self, app: FastAPI, app_client: AsyncClient
    ) -> None:
        """Without credentials the error lists every missing setting."""
        app.dependency_overrides.pop(get_blob_store)
        blob_store_module._blob_store = None

        with patch.dict("os.environ", {"AWS_REGION": "eu-north-1"}, clear=True):
            response = await app_client.post("/api/download", json={"filename": "doc1.pdf"})

        check.equal(response.status_code, 500)
        error = response.json()["error"]
        check.is_in("AWS_ACCESS_KEY_ID", error)
        check.is_in("AWS_SECRET_ACCESS_KEY", error)
        check.is_in("AWS_BUCKET_NAME", error)
        check.is_not_in("AWS_REGION", error)


class TestDownloadRedirectEndpoint:
    """Tests for POST /api/download-redirect."""

    async def test_returns_presigned_url_without_payload(
        self, app_client: AsyncClient
    ) -> None:
        """Only a signed URL is returned, no document bytes."""
        response = await app_client.post(
            "/api/download-redirect", json={"filename": "doc1.pdf"}
        )

        assert response.status_code == 200
        data = response.json()
        check.equal(set(data), {"url", "success"})
        check.is_true(data["url"].startswith("https://"))
        check.is_in("halkla/doc1.pdf", data["url"])
        check.is_in("X-Amz-Expires=300", data["url"])

    async def test_each_request_gets_a_fresh_url(
        self, app: FastAPI, app_client: AsyncClient, storage_config: StorageConfig
    ) -> None:
        """Two requests for the same file sign twice."""
        client = MagicMock()
        client.generate_presigned_url.side_effect = ["https://s3/a?sig=1", "https://s3/a?sig=2"]
        app.dependency_overrides[get_blob_store] = lambda: BlobStore(storage_config, client=client)

        first = await app_client.post("/api/download-redirect", json={"filename": "a.pdf"})
        second = await app_client.post("/api/download-redirect", json={"filename": "a.pdf"})

        check.not_equal(first.json()["url"], second.json()["url"])
        check.equal(client.generate_presigned_url.call_count, 2)

    async def test_missing_filename_returns_400(self, app_client: AsyncClient) -> None:
        response = await app_client.post("/api/download-redirect", json={})

        check.equal(response.status_code, 400)
        check.equal(response.json(), {"error": "Filename is required"})

    async def test_preflight(self, app_client: AsyncClient) -> None:
        response = await app_client.options("/api/download-redirect")

        check.equal(response.status_code, 200)
        check.equal(response.headers["access-control-allow-origin"], "*")


class TestAttachmentsEndpoint:
    """Tests for GET /attachments/{token}."""

    async def test_serves_registered_bytes(
        self, app_client: AsyncClient, resource_store: LocalResourceStore
    ) -> None:
        """Registered attachment is served inline with its type."""
        token = resource_store.register(PDF_BYTES, "application/pdf")

        response = await app_client.get(resource_store.url_for(token))

        check.equal(response.status_code, 200)
        check.equal(response.content, PDF_BYTES)
        check.equal(response.headers["content-type"], "application/pdf")
        check.equal(response.headers["content-disposition"], "inline")

    async def test_revoked_token_returns_404(
        self, app_client: AsyncClient, resource_store: LocalResourceStore
    ) -> None:
        """Released attachments are gone."""
        token = resource_store.register(PDF_BYTES, "application/pdf")
        resource_store.revoke(token)

        response = await app_client.get(resource_store.url_for(token))

        check.equal(response.status_code, 404)
        check.is_in("error", response.json())


class TestMiscEndpoints:
    """Tests for health and profile endpoints."""

    async def test_health(self, app_client: AsyncClient) -> None:
        response = await app_client.get("/health")

        assert response.json() == {"status": "healthy", "service": "cited-chat"}

    async def test_guest_profile(self, app_client: AsyncClient) -> None:
        """Guest identity with an SVG initial avatar."""
        response = await app_client.get("/api/user")

        assert response.status_code == 200
        data = response.json()
        check.equal(data["name"], "Guest User")
        check.equal(data["email"], "guest@example.com")
        check.is_true(data["image"].startswith("data:image/svg+xml,"))
        check.is_in("%3Csvg", data["image"])
