"""Cited Chat - streaming chat front-end with cited PDF retrieval.

Combines FastAPI for the download API, httpx for streaming the chat
backend, NiceGUI for the chat interface, boto3 for the S3 document bucket,
and Pydantic for data validation.

Components:
    - api: Download endpoints and attachment serving
    - chat: Session state, stream consumer, attachment fetcher
    - parsing: Citation extraction, event stream and data URL decoding
    - storage: S3 access and local attachment resources
    - ui: Web interface for chat interactions
    - models: Chat state and request/response schemas
"""

__version__ = "0.1.0"
