"""Streaming chat client.

Sends a prompt to the remote chat backend and consumes its ``data:`` event
stream, growing the bot message as chunks arrive. Citations are collected
while streaming and their documents fetched one by one once the stream ends.
"""

import logging

import httpx
from pydantic import ValidationError

from src.chat.attachments import AttachmentFetcher
from src.chat.config import ChatClientConfig, get_chat_client_config
from src.chat.session import ChatSession
from src.models.chat import ChatMessage, MessageRole
from src.models.schemas import StreamEvent
from src.parsing.citations import extract_citations
from src.parsing.events import EventStreamDecoder

logger = logging.getLogger(__name__)

THREAD_HEADER = "X-Thread-Id"


class ChatStreamConsumer:
    """Runs one request/response cycle per prompt against the chat backend."""

    def __init__(
        self,
        session: ChatSession,
        fetcher: AttachmentFetcher,
        config: ChatClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._fetcher = fetcher
        self._config = config or get_chat_client_config()
        self._transport = transport

    async def send(self, prompt: str) -> ChatMessage | None:
        """Send a prompt and stream the reply into the session.

        Args:
            prompt: The user's message.

        Returns:
            The bot message for this turn, or None if nothing was received.
        """
        session = self._session
        session.begin_turn(prompt)
        try:
            bot_message, citations = await self._stream_reply(prompt)
            if bot_message is not None:
                await self._fetch_citations(citations, bot_message.id)
            return bot_message
        except httpx.HTTPError as e:
            logger.error(
                f"Chat request failed, starting a new thread next time: {type(e).__name__}: {e}",
                extra={"event": "stream.failed"},
            )
            session.thread_id = None
            return session.last_bot_message()
        finally:
            session.end_turn()

    async def _stream_reply(self, prompt: str) -> tuple[ChatMessage | None, list[str]]:
        session = self._session
        headers = {"Accept": "text/event-stream"}
        if session.thread_id:
            headers[THREAD_HEADER] = session.thread_id

        decoder = EventStreamDecoder()
        text = ""
        bot_message: ChatMessage | None = None
        citations: list[str] = []

        async with httpx.AsyncClient(
            timeout=self._config.request_timeout, transport=self._transport
        ) as client:
            async with client.stream(
                "POST",
                self._config.chat_endpoint,
                json={"prompt": prompt, "threadId": session.thread_id},
                headers=headers,
            ) as response:
                response.raise_for_status()

                if thread_id := response.headers.get(THREAD_HEADER):
                    session.thread_id = thread_id

                async for chunk in response.aiter_bytes():
                    for record in decoder.feed(chunk):
                        bot_message = self._apply(record, bot_message, citations)
                    if session.closed:
                        logger.info("Session closed, abandoning stream")
                        return bot_message, []

                for record in decoder.flush():
                    bot_message = self._apply(record, bot_message, citations)

        return bot_message, citations

    def _apply(
        self,
        record: dict,
        bot_message: ChatMessage | None,
        citations: list[str],
    ) -> ChatMessage | None:
        try:
            event = StreamEvent.model_validate(record)
        except ValidationError as e:
            logger.warning(
                f"Skipping stream record with invalid fields: {e.error_count()} errors",
                extra={"event": "stream.record_skipped"},
            )
            return bot_message
        if not event.content:
            return bot_message

        if bot_message is None:
            bot_message = self._session.add_message(MessageRole.BOT, event.content)
        else:
            bot_message.text += event.content

        for name in extract_citations(bot_message.text):
            if name not in citations:
                logger.debug(f"Discovered citation {name!r}")
                citations.append(name)

        self._session.notify()
        return bot_message

    async def _fetch_citations(self, citations: list[str], message_id: int) -> None:
        # Sequential on purpose: one download at a time, failures stay isolated
        for name in citations:
            if self._session.closed:
                return
            if name in self._session.processed:
                continue
            try:
                await self._fetcher.fetch(name, message_id)
            except Exception:
                logger.exception(f"Unexpected error while fetching {name!r}")
