"""In-memory store for decoded attachments served back to the browser.

Fetched PDFs arrive as base64 data URLs. Rendering a multi-megabyte data URL
in an iframe on every refresh is slow, so the decoded bytes are kept here and
served from a short ``/attachments/<token>`` URL instead. Tokens must be
revoked by their owner once the message is no longer displayed.
"""

import logging
import secrets
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ATTACHMENT_URL_PREFIX = "/attachments"


@dataclass(frozen=True)
class LocalResource:
    content: bytes
    content_type: str


class LocalResourceStore:
    """Token-addressed bytes with explicit revocation."""

    def __init__(self, url_prefix: str = ATTACHMENT_URL_PREFIX) -> None:
        self._url_prefix = url_prefix.rstrip("/")
        self._resources: dict[str, LocalResource] = {}

    def register(self, content: bytes, content_type: str) -> str:
        """Store bytes and return the token that addresses them."""
        token = secrets.token_urlsafe(16)
        self._resources[token] = LocalResource(content=content, content_type=content_type)
        return token

    def url_for(self, token: str) -> str:
        return f"{self._url_prefix}/{token}"

    def get(self, token: str) -> LocalResource | None:
        return self._resources.get(token)

    def revoke(self, token: str) -> bool:
        """Release a resource. Returns False if it was already gone."""
        released = self._resources.pop(token, None) is not None
        if released:
            logger.debug(f"Revoked local resource {token[:6]}...")
        return released

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, token: object) -> bool:
        return token in self._resources


# Module-level singleton instance
_resource_store: LocalResourceStore | None = None


def get_resource_store() -> LocalResourceStore:
    """Get or create the process-wide resource store."""
    global _resource_store
    if _resource_store is None:
        _resource_store = LocalResourceStore()
    return _resource_store
