"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Citation extraction, data URLs, event stream decoding
    - storage/: Configuration and S3 blob store error mapping
    - chat/: Session state, attachment retries and fallback, presets

Uses stubs for S3 and mock transports for HTTP. Leverages pytest-check for
multiple assertions per test.
"""
