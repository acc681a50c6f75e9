"""Text and payload parsing for the chat client and download API.

Responsibilities:
    - Citation marker extraction from streamed assistant text
    - Incremental decoding of the chat backend's ``data:`` event stream
    - Base64 data URL encoding and validation for PDF payloads

Pure functions and small stateful decoders with no network access.
"""

from src.parsing.citations import extract_citations, extract_last_citation
from src.parsing.data_url import DataURLError, decode_data_url, encode_data_url, is_data_url
from src.parsing.events import EventStreamDecoder

__all__ = [
    "DataURLError",
    "EventStreamDecoder",
    "decode_data_url",
    "encode_data_url",
    "extract_citations",
    "extract_last_citation",
    "is_data_url",
]
