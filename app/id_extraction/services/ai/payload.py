"""
Encoding of document bytes for the external model.
"""

import base64
import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..file_validation import ValidationError

logger = logging.getLogger(__name__)

PDF_EXTENSION = "pdf"

MIME_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "pdf": "application/pdf",
}

# Formats the vision endpoint does not accept; re-encoded as PNG first.
TRANSCODE_TO_PNG = frozenset({"bmp"})


@dataclass(frozen=True)
class DocumentPayload:
    """Base64 document bytes plus the MIME type that describes them."""

    data: str
    mime_type: str


def mime_type_for(extension: str) -> str:
    """Look up the MIME type for an extension, defaulting to JPEG."""
    return MIME_TYPES.get(extension.lstrip(".").lower(), "image/jpeg")


def _transcode_to_png(file_bytes: bytes) -> bytes:
    try:
        with Image.open(io.BytesIO(file_bytes)) as image:
            buffer = io.BytesIO()
            image.save(buffer, format="PNG", optimize=True)
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Unreadable image file: {e}") from e
    return buffer.getvalue()


def build_payload(file_bytes: bytes, extension: str) -> DocumentPayload:
    """
    Base64-encode ``file_bytes`` with an accurate MIME type.

    Raises:
        ValidationError: If a file that must be transcoded cannot be decoded.
    """
    extension = extension.lstrip(".").lower()
    if extension in TRANSCODE_TO_PNG:
        logger.info("Transcoding .%s document to PNG", extension)
        file_bytes = _transcode_to_png(file_bytes)
        mime_type = "image/png"
    else:
        mime_type = mime_type_for(extension)

    return DocumentPayload(
        data=base64.b64encode(file_bytes).decode("utf-8"),
        mime_type=mime_type,
    )
