"""Uploaded reference file model.

Files are held in memory as data URLs (``data:<mime>;base64,<payload>``)
for the duration of a session and never persisted.
"""

import base64
import binascii
import mimetypes
import re
from typing import Optional
from pydantic import BaseModel, Field

from smartquote.config.errors import FileDecodeError

# Fallback when neither the reader nor the extension gives a type
DEFAULT_MIME_TYPE = "application/json"

IMAGE_NAME_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

# Types offered by the file picker
ACCEPTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".json")


def infer_mime_type(name: str, mime_type: Optional[str] = None) -> str:
    """Return the given MIME type, or one inferred from the file extension."""
    if mime_type:
        return mime_type
    if name.lower().endswith(".json"):
        return "application/json"
    guessed, _ = mimetypes.guess_type(name)
    return guessed or DEFAULT_MIME_TYPE


def to_data_url(content: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URL."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class UploadedFile(BaseModel):
    """A user-selected reference file (image or JSON flow diagram)."""

    name: str = Field(description="Original file name")
    mime_type: str = Field(
        default="",
        alias="type",
        description="MIME type (inferred from extension when missing)"
    )
    data: str = Field(description="Data URL with base64-encoded content")

    class Config:
        populate_by_name = True

    @classmethod
    def from_bytes(cls, name: str, content: bytes, mime_type: Optional[str] = None) -> "UploadedFile":
        """Build an UploadedFile from raw file content."""
        resolved = infer_mime_type(name, mime_type)
        return cls(name=name, mime_type=resolved, data=to_data_url(content, resolved))

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/") or bool(IMAGE_NAME_PATTERN.search(self.name))

    @property
    def is_json(self) -> bool:
        return "json" in self.mime_type or self.name.endswith(".json")

    @property
    def base64_payload(self) -> str:
        """Base64 part of the data URL, empty when the URL has no payload."""
        _, sep, payload = self.data.partition(",")
        return payload if sep else ""

    def decode_bytes(self) -> bytes:
        """Decode the base64 payload.

        Raises:
            FileDecodeError: If the payload is not valid base64.
        """
        try:
            return base64.b64decode(self.base64_payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FileDecodeError(
                f"Could not decode {self.name}: {e}",
                file_name=self.name,
            )

    def decode_text(self) -> str:
        """Decode the payload as UTF-8 text.

        Raises:
            FileDecodeError: If the payload is not valid base64 or not UTF-8.
        """
        raw = self.decode_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileDecodeError(
                f"{self.name} is not UTF-8 text",
                file_name=self.name,
                details={"position": e.start},
            )
