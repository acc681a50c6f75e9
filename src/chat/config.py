"""Chat client configuration with environment variable loading.

Pydantic-based configuration for talking to the remote chat backend and to
this app's own download API.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class ChatClientConfig(BaseModel):
    """Configuration for the streaming chat client and attachment fetcher.

    Attributes:
        chat_endpoint: URL of the remote streaming chat backend.
        api_base_url: Base URL of this app's download API.
        request_timeout: Timeout in seconds for backend and API calls.
        retry_base_delay: Base interval between attachment retries (1x, 2x, ...).
        max_retries: Extra attempts on the download endpoint before falling back.
        busy_retry_delay: Delay before re-attempting a fetch deferred by the
            single-fetch guard.
    """

    chat_endpoint: str = Field(
        default_factory=lambda: os.getenv("CHAT_BACKEND_URL", "http://localhost:8001/chat"),
        description="Streaming chat backend endpoint",
    )
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the download API",
    )
    request_timeout: float = Field(default=120.0, gt=0)
    retry_base_delay: float = Field(
        default_factory=lambda: float(os.getenv("ATTACHMENT_RETRY_DELAY", "1.0")),
        ge=0.0,
        description="Base delay in seconds between attachment retries",
    )
    max_retries: int = Field(default=2, ge=0, le=5)
    busy_retry_delay: float = Field(default=1.0, ge=0.0)

    @field_validator("chat_endpoint", "api_base_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate that the URL is an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Expected an http(s) URL, got {v!r}")
        return v.rstrip("/")


def get_chat_client_config() -> ChatClientConfig:
    """Create chat client configuration from environment.

    Returns:
        Configured ChatClientConfig instance.

    Raises:
        ValueError: If a configured URL is not http(s).
    """
    return ChatClientConfig()
