"""Pydantic models for chat state and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Individual message in the conversation
    - AttachmentResult: Cited PDF fetched for a bot message
    - DownloadRequest / DownloadResponse: Data URL download endpoint
    - DownloadRedirectResponse: Presigned URL endpoint
    - StreamEvent: Record from the chat backend stream
"""

from src.models.chat import AttachmentResult, ChatMessage, MessageRole
from src.models.schemas import (
    DownloadRedirectResponse,
    DownloadRequest,
    DownloadResponse,
    ErrorResponse,
    StreamEvent,
    UserProfile,
)

__all__ = [
    "AttachmentResult",
    "ChatMessage",
    "DownloadRedirectResponse",
    "DownloadRequest",
    "DownloadResponse",
    "ErrorResponse",
    "MessageRole",
    "StreamEvent",
    "UserProfile",
]
