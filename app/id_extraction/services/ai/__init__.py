"""
AI service package for identity document extraction.

This package provides modular AI functionality split into:
- client: the external model collaborator and error classification
- payload: MIME lookup and base64 encoding of document bytes
- prompts: extraction prompts per content kind
- normalization: fenced-JSON cleanup and soft-failure fallback

The ExtractionService class ties them into the single extraction pipeline.
"""

import logging
from functools import lru_cache
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as RecordShapeError

from ...config import Settings, get_settings
from ...models import ExtractionMetadata, ExtractionResult
from ..file_validation import ValidationError, extension_of, validate_document
from .client import ModelClient, OpenAIModelClient, classify_transport_error
from .exceptions import AIServiceError, ParseError, TransportError, TransportErrorKind
from .normalization import normalize_response, strip_code_fences
from .payload import DocumentPayload, build_payload, mime_type_for
from .prompts import ContentKind, build_prompt, content_kind_for

logger = logging.getLogger(__name__)

__all__ = [
    "AIServiceError",
    "ContentKind",
    "ExtractionService",
    "ModelClient",
    "OpenAIModelClient",
    "ParseError",
    "TransportError",
    "TransportErrorKind",
    "build_payload",
    "build_prompt",
    "classify_transport_error",
    "content_kind_for",
    "get_extraction_service",
    "mime_type_for",
    "normalize_response",
    "strip_code_fences",
]


class ExtractionService:
    """
    Runs one document through validation, the external model and
    response normalization.

    Configuration and the model collaborator are injected so tests can
    substitute a fake client.
    """

    def __init__(self, settings: Settings, client: ModelClient):
        self.settings = settings
        self.client = client

    async def process_document(
        self, path: str | Path, original_name: str | None = None
    ) -> ExtractionResult:
        """
        Extract identity document fields from the file at ``path``.

        Args:
            path: Stored document location.
            original_name: Client-side file name, used for metadata and
                extension lookup. Defaults to the stored file name.

        Returns:
            A success result, or a soft failure if the reply was not JSON.

        Raises:
            ValidationError: If the file is rejected before the model call.
            TransportError: If the model call fails.
        """
        path = Path(path)
        file_name = original_name or path.name
        extension = extension_of(file_name) or extension_of(path)

        try:
            payload = await run_in_threadpool(self._load_payload, path, extension)
        except ValidationError as e:
            logger.warning("Rejected %s at stage=validate: %s", file_name, e.reason)
            raise

        kind = content_kind_for(extension)
        prompt = build_prompt(kind)
        logger.info(
            "Extracting %s (%s, %s)", file_name, kind.value, payload.mime_type
        )
        try:
            raw_text = await run_in_threadpool(
                self.client.generate, prompt, payload.data, payload.mime_type
            )
        except TransportError as e:
            logger.error(
                "Model call failed for %s at stage=model (%s): %s",
                file_name,
                e.kind.value,
                e.detail,
            )
            raise

        metadata = ExtractionMetadata(file_name=file_name, file_type=extension)
        result = normalize_response(raw_text, metadata)
        if result.success:
            self._log_detected_type(result, file_name)
        else:
            logger.warning("Soft failure for %s at stage=normalize", file_name)
        return result

    def _load_payload(self, path: Path, extension: str) -> DocumentPayload:
        """Validate the stored file and encode it; blocking file I/O."""
        validate_document(
            path,
            path.stat().st_size,
            extension,
            max_bytes=self.settings.max_document_bytes,
        )
        return build_payload(path.read_bytes(), extension)

    @staticmethod
    def _log_detected_type(result: ExtractionResult, file_name: str) -> None:
        try:
            record = result.record
        except RecordShapeError:
            logger.info("Extracted %s with an unrecognised record shape", file_name)
            return
        if record is not None:
            logger.info("Extracted %s: detected %s", file_name, record.kind.value)


@lru_cache
def get_extraction_service() -> ExtractionService:
    """Get or create the extraction service singleton."""
    settings = get_settings()
    client = OpenAIModelClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.openai_timeout_seconds,
    )
    return ExtractionService(settings, client)
