"""
Validation of uploaded identity documents.

Two checkpoints:
- the transport boundary (declared MIME type, before anything is stored)
- the extraction stage (extension allow-list and size ceiling, before the
  external model is called)
"""

import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp", "pdf"})
ALLOWED_UPLOAD_MIME_TYPES = frozenset({"image/jpeg", "image/png", "application/pdf"})

MAX_UPLOAD_BYTES = 5 * MIB
MAX_DOCUMENT_BYTES = 20 * MIB


class ValidationError(Exception):
    """Raised when an uploaded file is rejected."""

    def __init__(self, reason: str, value: Any = None):
        self.reason = reason
        self.value = value
        super().__init__(reason)


def extension_of(filename: str | Path) -> str:
    """Return the lower-case extension of ``filename`` without the dot."""
    return Path(filename).suffix.lstrip(".").lower()


def validate_upload(filename: str | None, content_type: str | None) -> None:
    """
    Check what the client declared before the body is written anywhere.

    Raises:
        ValidationError: If no file was sent or its MIME type is not allowed.
    """
    if not filename:
        raise ValidationError("No file uploaded")

    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type not in ALLOWED_UPLOAD_MIME_TYPES:
        logger.warning("Rejected upload %s: MIME type %s", filename, content_type)
        raise ValidationError(
            "Invalid file type. Only JPEG, PNG, and PDF files are allowed.",
            content_type,
        )


def validate_document(
    path: str | Path,
    size: int,
    extension: str,
    max_bytes: int = MAX_DOCUMENT_BYTES,
) -> None:
    """
    Confirm a stored document may be sent to the external model.

    Args:
        path: Where the document is stored (used for log context only).
        size: Byte length of the document.
        extension: File extension, with or without the leading dot.
        max_bytes: Inclusive size ceiling.

    Raises:
        ValidationError: On an unsupported extension, an empty file, or a
            file larger than ``max_bytes``.
    """
    extension = extension.lstrip(".").lower()

    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported file type: .{extension}. "
            f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            extension,
        )

    if size <= 0:
        raise ValidationError("Empty file provided", size)

    if size > max_bytes:
        raise ValidationError(
            f"File size too large. Maximum size is {max_bytes // MIB}MB.",
            size,
        )

    logger.debug("Validated %s (%d bytes, .%s)", path, size, extension)
