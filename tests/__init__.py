"""Test package for Cited Chat.

Structure:
    - unit/: Citation parsing, codecs, config, storage, and chat client logic
    - integration/: API endpoints and full chat turns over in-process transports

S3 is replaced by botocore's Stubber and remote HTTP services by httpx
mock transports, so no network access or credentials are needed.
Leverages pytest with pytest-check for soft assertions.
"""
