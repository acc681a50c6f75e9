"""Base64 data URL encoding and decoding.

The download endpoint ships PDF bytes to the browser as
``data:<mime>;base64,<payload>``; the chat client validates and decodes the
same format before rendering.
"""

import base64
import binascii

DATA_URL_SCHEME = "data:"
BASE64_MARKER = ";base64,"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DataURLError(ValueError):
    """Raised when a value is not a well-formed base64 data URL."""

    pass


def encode_data_url(content: bytes, content_type: str) -> str:
    """Encode raw bytes as a base64 data URL."""
    payload = base64.b64encode(content).decode("ascii")
    return f"{DATA_URL_SCHEME}{content_type}{BASE64_MARKER}{payload}"


def is_data_url(value: object) -> bool:
    """Check the ``data:<mime>;base64,`` prefix without decoding the payload."""
    if not isinstance(value, str) or not value.startswith(DATA_URL_SCHEME):
        return False
    header, marker, _ = value.partition(BASE64_MARKER)
    return bool(marker) and "," not in header


def decode_data_url(value: str) -> tuple[str, bytes]:
    """Decode a base64 data URL.

    Args:
        value: The data URL string.

    Returns:
        Tuple of (content type, decoded bytes).

    Raises:
        DataURLError: If the prefix is wrong or the payload is not valid base64.
    """
    if not is_data_url(value):
        raise DataURLError("Invalid data URL: expected data:<mime>;base64,<payload>")

    header, _, payload = value.partition(BASE64_MARKER)
    content_type = header[len(DATA_URL_SCHEME):] or DEFAULT_CONTENT_TYPE

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataURLError(f"Invalid data URL payload: {e}") from e

    return content_type, content
