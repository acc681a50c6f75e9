"""Chat client logic for the streaming backend.

Handles one conversation per open page: sending prompts, consuming the
streamed reply, and retrieving the PDFs the reply cites.

Responsibilities:
    - Session state (messages, thread handle, processed citations, timers)
    - Streaming request/response cycle against the chat backend
    - Cited document retrieval with retry and direct-link fallback
    - Preset question suggestions for the input box

Maintains clean separation from the NiceGUI presentation layer.
"""

from src.chat.attachments import AttachmentFetcher, MalformedResponseError, RetrievalError
from src.chat.config import ChatClientConfig, get_chat_client_config
from src.chat.presets import PRESET_QUESTIONS, PresetQuestion, suggest_questions
from src.chat.session import ChatSession
from src.chat.stream import ChatStreamConsumer

__all__ = [
    "PRESET_QUESTIONS",
    "AttachmentFetcher",
    "ChatClientConfig",
    "ChatSession",
    "ChatStreamConsumer",
    "MalformedResponseError",
    "PresetQuestion",
    "RetrievalError",
    "get_chat_client_config",
    "suggest_questions",
]
