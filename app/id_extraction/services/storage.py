"""
Transient storage for uploaded documents.

An upload is written to disk for the duration of one request and removed
on every exit path, including validation and model failures.
"""

import logging
import secrets
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..config import get_settings
from ..models import UploadedFile
from .file_validation import MAX_UPLOAD_BYTES, MIB, ValidationError, extension_of

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class CleanupError(Exception):
    """Raised when a transient upload could not be deleted."""

    pass


class TransientFileStore:
    """
    Writes uploads to a scratch directory and guarantees their removal.

    Args:
        upload_dir: Directory for transient files (created on demand).
        max_bytes: Inclusive transport-level size ceiling.
    """

    def __init__(self, upload_dir: str | Path, max_bytes: int = MAX_UPLOAD_BYTES):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def _unique_path(self, extension: str) -> Path:
        suffix = f".{extension}" if extension else ""
        name = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"
        return self.upload_dir / name

    async def _write(self, upload: UploadFile, path: Path) -> int:
        size = 0
        with path.open("wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > self.max_bytes:
                    raise ValidationError(
                        f"File size too large. Maximum size is {self.max_bytes // MIB}MB.",
                        size,
                    )
                await run_in_threadpool(out.write, chunk)
        return size

    def delete(self, path: Path) -> None:
        """
        Remove ``path`` if it exists.

        Raises:
            CleanupError: If the file exists but cannot be removed.
        """
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CleanupError(f"Could not delete {path}: {e}") from e

    @asynccontextmanager
    async def store(self, upload: UploadFile) -> AsyncIterator[UploadedFile]:
        """
        Write ``upload`` to transient storage for the enclosed block.

        The file is deleted when the block exits, whatever the outcome.
        Deletion failures are logged and never replace the block's result.

        Raises:
            ValidationError: If the body exceeds ``max_bytes``.
        """
        original_name = upload.filename or ""
        extension = extension_of(original_name)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self._unique_path(extension)

        try:
            size = await self._write(upload, path)
            logger.info("Stored upload %s as %s (%d bytes)", original_name, path.name, size)
            yield UploadedFile(
                path=path,
                original_name=original_name,
                extension=extension,
                size=size,
                content_type=upload.content_type,
            )
        finally:
            try:
                self.delete(path)
            except CleanupError as e:
                logger.error("Error deleting upload %s: %s", original_name, e)
            await upload.close()


@lru_cache
def get_file_store() -> TransientFileStore:
    """Get or create the transient file store singleton."""
    settings = get_settings()
    return TransientFileStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)
