"""Per-page chat session state.

One ChatSession exists per open chat page. It owns everything that must be
reset together: the message list, the backend thread handle, the set of
citations already fetched this turn, the single in-flight fetch, the
deferred-retry timers, and the local URLs created for attachments.
"""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.models.chat import AttachmentResult, ChatMessage, MessageRole
from src.storage.local_resources import LocalResourceStore, get_resource_store

logger = logging.getLogger(__name__)


class ChatSession:
    """Manages chat state for a user session."""

    def __init__(self, resources: LocalResourceStore | None = None) -> None:
        self.messages: list[ChatMessage] = []
        self.thread_id: str | None = None
        self.processed: set[str] = set()
        self.fetch_in_flight: str | None = None
        self.is_streaming: bool = False
        self.closed: bool = False
        self.on_change: Callable[[], None] | None = None
        self._resources = resources if resources is not None else get_resource_store()
        self._ids = itertools.count(1)
        self._tasks: set[asyncio.Task] = set()
        self._tokens: set[str] = set()

    # Messages

    def add_message(self, role: MessageRole, text: str) -> ChatMessage:
        message = ChatMessage(id=next(self._ids), role=role, text=text)
        self.messages.append(message)
        return message

    def get_message(self, message_id: int) -> ChatMessage | None:
        for message in reversed(self.messages):
            if message.id == message_id:
                return message
        return None

    def last_bot_message(self) -> ChatMessage | None:
        if self.messages and self.messages[-1].is_bot:
            return self.messages[-1]
        return None

    def begin_turn(self, prompt: str) -> ChatMessage:
        """Record the user's prompt and start a new request/response turn.

        Clears the processed-citation set so documents cited again in this
        turn are fetched again.
        """
        self.processed.clear()
        self.is_streaming = True
        message = self.add_message(MessageRole.USER, prompt)
        self.notify()
        return message

    def end_turn(self) -> None:
        self.is_streaming = False
        self.notify()

    def notify(self) -> None:
        """Tell the UI that messages or loading state changed."""
        if self.on_change is not None and not self.closed:
            self.on_change()

    # Attachments

    def attach(self, message_id: int, result: AttachmentResult) -> bool:
        """Bind an attachment to the message that cited it.

        Returns False (and releases the attachment) when that message no
        longer exists, e.g. after the chat was reset mid-fetch.
        """
        message = self.get_message(message_id)
        if message is None or self.closed:
            self.release(result)
            return False
        message.attachments.append(result)
        self.notify()
        return True

    def track_resource(self, token: str) -> None:
        self._tokens.add(token)

    def release(self, result: AttachmentResult) -> None:
        if result.resource_token:
            self._resources.revoke(result.resource_token)
            self._tokens.discard(result.resource_token)

    def release_resources(self) -> int:
        """Revoke every local URL created for this session."""
        released = sum(1 for token in list(self._tokens) if self._resources.revoke(token))
        self._tokens.clear()
        return released

    # Deferred work

    def schedule(self, delay: float, factory: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        """Run ``factory()`` after ``delay`` seconds as a tracked task.

        Tracked tasks are cancelled by ``reset()`` and ``teardown()``.
        """

        async def _run() -> None:
            await asyncio.sleep(delay)
            await factory()

        task = asyncio.create_task(_run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending_tasks(self) -> list[asyncio.Task]:
        return [task for task in self._tasks if not task.done()]

    async def wait_pending(self) -> None:
        """Wait until no deferred work remains, including work it schedules."""
        while pending := self.pending_tasks:
            await asyncio.gather(*pending, return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    # Lifecycle

    def reset(self) -> None:
        """Start a fresh conversation (new chat button)."""
        self.cancel_pending()
        released = self.release_resources()
        self.messages.clear()
        self.thread_id = None
        self.processed.clear()
        self.fetch_in_flight = None
        self.is_streaming = False
        # Message ids keep counting so late fetches cannot bind to new messages
        logger.info(f"Chat session reset ({released} attachments released)")
        self.notify()

    def teardown(self) -> None:
        """Stop all work and release resources when the page goes away."""
        self.closed = True
        self.cancel_pending()
        released = self.release_resources()
        logger.info(f"Chat session closed ({released} attachments released)")
