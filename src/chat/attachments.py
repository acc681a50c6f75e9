"""Retrieval of cited PDFs for bot messages.

For each citation the fetcher asks the download API for the document as a
data URL, retrying with a linearly growing delay. If every attempt fails it
falls back to a presigned direct-download link appended to the message, and
if that fails too the message gets a plain-text notice instead.

Only one fetch runs at a time per session; requests arriving while another
document is loading are deferred and re-attempted after a fixed delay.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from src.chat.config import ChatClientConfig, get_chat_client_config
from src.chat.session import ChatSession
from src.models.chat import AttachmentResult
from src.parsing.data_url import DataURLError, decode_data_url, is_data_url
from src.storage.local_resources import LocalResourceStore, get_resource_store

logger = logging.getLogger(__name__)

DOWNLOAD_PATH = "/api/download"
DOWNLOAD_REDIRECT_PATH = "/api/download-redirect"


class RetrievalError(Exception):
    """Raised when a download response cannot be used."""

    pass


class MalformedResponseError(RetrievalError):
    """Raised when a response body is not the expected JSON or data URL."""

    pass


class AttachmentFetcher:
    """Fetches cited documents and binds them to bot messages."""

    def __init__(
        self,
        session: ChatSession,
        config: ChatClientConfig | None = None,
        resources: LocalResourceStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: Session whose state guards and receives the fetches.
            config: Client configuration, loaded from environment if omitted.
            resources: Store for decoded documents, process-wide by default.
            transport: Optional httpx transport (tests, in-process ASGI).
            sleep: Coroutine used for retry back-off.
        """
        self._session = session
        self._config = config or get_chat_client_config()
        self._resources = resources if resources is not None else get_resource_store()
        self._transport = transport
        self._sleep = sleep

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        )

    async def fetch(
        self, name: str, message_id: int, *, retry: bool = False
    ) -> AttachmentResult | None:
        """Fetch a cited document and attach it to a message.

        Args:
            name: Citation name of the document.
            message_id: Id of the bot message that cited it.
            retry: True for an explicit user retry, which bypasses the
                already-processed check.

        Returns:
            The attached result, or None if the fetch was skipped, deferred,
            or ended in the fallback path.
        """
        session = self._session
        if session.closed:
            return None

        in_flight = session.fetch_in_flight
        if in_flight is not None and (in_flight != name or retry):
            logger.info(
                f"Fetch for {name!r} deferred, {in_flight!r} is still loading",
                extra={"event": "attachment.deferred", "citation": name},
            )
            session.schedule(
                self._config.busy_retry_delay,
                lambda: self.fetch(name, message_id, retry=retry),
            )
            return None

        if name in session.processed and not retry:
            logger.debug(f"Citation {name!r} already processed this turn")
            return None

        session.processed.add(name)
        session.fetch_in_flight = name
        try:
            async with self._client() as client:
                loaded = await self._fetch_with_retries(client, name)
                if loaded is None:
                    # Retries also stop early when the page goes away
                    if not session.closed:
                        await self._fall_back(client, name, message_id)
                    return None
        finally:
            session.fetch_in_flight = None

        result, content = loaded
        token = self._resources.register(content, result.content_type)
        session.track_resource(token)
        result.resource_token = token
        result.local_url = self._resources.url_for(token)

        message = session.get_message(message_id)
        if message is not None and name in message.failed_citations:
            message.failed_citations.remove(name)

        if not session.attach(message_id, result):
            logger.info(f"Message {message_id} is gone, dropping {name!r}")
            return None

        logger.info(
            f"Loaded {name!r} ({result.size} bytes)",
            extra={"event": "attachment.loaded", "citation": name},
        )
        return result

    async def _fetch_with_retries(
        self, client: httpx.AsyncClient, name: str
    ) -> tuple[AttachmentResult, bytes] | None:
        attempts = self._config.max_retries + 1
        for attempt in range(1, attempts + 1):
            if self._session.closed:
                return None
            logger.info(
                f"Requesting {name!r} (attempt {attempt}/{attempts})",
                extra={"event": "attachment.attempt", "citation": name, "attempt": attempt},
            )
            try:
                return await self._request_document(client, name)
            except (httpx.HTTPError, RetrievalError) as e:
                kind = type(e).__name__
                if attempt == attempts:
                    logger.warning(
                        f"Giving up on {name!r} after {attempts} attempts: {kind}: {e}",
                        extra={"event": "attachment.failed", "citation": name, "attempt": attempt},
                    )
                    break
                delay = self._config.retry_base_delay * attempt
                logger.warning(
                    f"Attempt {attempt} for {name!r} failed ({kind}: {e}), retrying in {delay:.1f}s",
                    extra={"event": "attachment.retry", "citation": name, "attempt": attempt},
                )
                await self._sleep(delay)
        return None

    async def _request_document(
        self, client: httpx.AsyncClient, name: str
    ) -> tuple[AttachmentResult, bytes]:
        response = await client.post(DOWNLOAD_PATH, json={"filename": name})
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response is not JSON: {e}") from e
        if not isinstance(body, dict):
            raise MalformedResponseError("Response JSON is not an object")

        data = body.get("data")
        if not is_data_url(data):
            raise MalformedResponseError("Response has no valid data URL payload")

        try:
            decoded_type, content = decode_data_url(data)
        except DataURLError as e:
            raise MalformedResponseError(str(e)) from e

        result = AttachmentResult(
            name=name,
            data_url=data,
            size=len(content),
            content_type=body.get("contentType") or decoded_type,
        )
        return result, content

    async def _fall_back(self, client: httpx.AsyncClient, name: str, message_id: int) -> None:
        logger.info(
            f"Falling back to a direct download link for {name!r}",
            extra={"event": "attachment.fallback", "citation": name},
        )
        try:
            response = await client.post(DOWNLOAD_REDIRECT_PATH, json={"filename": name})
            response.raise_for_status()
            body = response.json()
            url = body.get("url") if isinstance(body, dict) else None
            if not isinstance(url, str) or not url.startswith(("http://", "https://")):
                raise MalformedResponseError("Response has no download URL")
        except (httpx.HTTPError, ValueError, RetrievalError) as e:
            logger.error(
                f"Direct download link for {name!r} failed: {type(e).__name__}: {e}",
                extra={"event": "attachment.failed", "citation": name},
            )
            self._append_failure(name, message_id)
            return

        self._append_text(message_id, f"\n\n📄 [{name}]({url})")

    def _append_failure(self, name: str, message_id: int) -> None:
        message = self._session.get_message(message_id)
        if message is None:
            return
        if name not in message.failed_citations:
            message.failed_citations.append(name)
        self._append_text(message_id, f'\n\nCould not load the cited document "{name}".')

    def _append_text(self, message_id: int, text: str) -> None:
        message = self._session.get_message(message_id)
        if message is None:
            return
        message.text += text
        self._session.notify()
