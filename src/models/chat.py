"""Chat session domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Who authored a chat message."""

    USER = "user"
    BOT = "bot"


class AttachmentResult(BaseModel):
    """A cited PDF fetched for display next to a bot message.

    Attributes:
        name: Citation name the document was requested by.
        data_url: Original ``data:<mime>;base64,`` payload, kept as a
            fallback rendering source.
        size: Size of the decoded document in bytes.
        content_type: Declared MIME type.
        local_url: Revocable URL served by this app for the decoded bytes.
        resource_token: Handle used to revoke ``local_url``.
    """

    name: str
    data_url: str
    size: int = Field(ge=0)
    content_type: str
    local_url: str | None = None
    resource_token: str | None = None

    @property
    def display_url(self) -> str:
        """URL to render, preferring the local handle over the data URL."""
        return self.local_url or self.data_url


class ChatMessage(BaseModel):
    """A single message in the conversation.

    Bot message text grows while the response streams in.

    Attributes:
        id: Session-unique id, increasing in creation order.
        role: Message author.
        text: Message content (markdown for bot messages).
        created_at: Creation timestamp.
        attachments: Documents fetched for citations in this message.
        failed_citations: Citation names that could not be retrieved.
    """

    id: int = Field(ge=1)
    role: MessageRole
    text: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    attachments: list[AttachmentResult] = Field(default_factory=list)
    failed_citations: list[str] = Field(default_factory=list)

    @property
    def is_bot(self) -> bool:
        return self.role is MessageRole.BOT
