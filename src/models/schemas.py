from pydantic import BaseModel, ConfigDict, Field, field_validator


class DownloadRequest(BaseModel):
    """Request payload for both download endpoints.

    Attributes:
        filename: Citation name of the stored document.
    """

    filename: str = Field(..., min_length=1)

    @field_validator("filename", mode="before")
    @classmethod
    def strip_filename(cls, v: str) -> str:
        """Strip whitespace from filename before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class DownloadResponse(BaseModel):
    """Document bytes re-encoded as a data URL.

    Attributes:
        data: ``data:<mime>;base64,<payload>`` string.
        size: Size of the stored object in bytes.
        content_type: MIME type reported by the blob store.
        filename: Requested filename, echoed back.
        success: Always true for this model.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: str
    size: int = Field(ge=1)
    content_type: str = Field(alias="contentType")
    filename: str
    success: bool = True


class DownloadRedirectResponse(BaseModel):
    """Short-lived presigned URL for direct download.

    Attributes:
        url: Presigned GET URL for the stored object.
        success: Always true for this model.
    """

    url: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error body returned by the download endpoints."""

    error: str


class StreamEvent(BaseModel):
    """A ``data:`` record from the chat backend stream.

    Attributes:
        content: Text to append to the bot message, if any.
    """

    model_config = ConfigDict(extra="allow")

    content: str | None = None


class UserProfile(BaseModel):
    """Profile shown for the (guest) user in the chat UI."""

    name: str
    email: str
    image: str
