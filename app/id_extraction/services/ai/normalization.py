"""
Normalization of the model's free-text reply into an ExtractionResult.

The model is asked for JSON but may wrap it in Markdown fences or answer in
prose. Unparseable replies become a soft failure carrying the raw text.
"""

import json
import logging
import re
from typing import Any

from ...models import ExtractionMetadata, ExtractionResult
from .exceptions import ParseError

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse document information"

_OPENING_FENCE = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove surrounding ```json / ``` markers and trim whitespace."""
    cleaned = _OPENING_FENCE.sub("", text, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_document_json(text: str) -> dict[str, Any]:
    """
    Strictly parse a model reply as a JSON object.

    Raises:
        ParseError: If the cleaned text is not valid JSON or not an object.
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in model response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


def normalize_response(
    raw_text: str, metadata: ExtractionMetadata
) -> ExtractionResult:
    """
    Turn raw model output into a success or soft-failure result.

    Never raises; parse errors are absorbed into the failure variant so the
    caller can still show the raw reply.
    """
    try:
        data = parse_document_json(raw_text)
    except ParseError as e:
        logger.warning(
            "Could not parse model response for %s: %s", metadata.file_name, e
        )
        return ExtractionResult.failed(PARSE_FAILURE_MESSAGE, raw_text, metadata)

    return ExtractionResult.succeeded(data, metadata)
