"""
External model collaborator.

The extraction pipeline only needs ``generate(prompt, file_base64, mime_type)``;
``OpenAIModelClient`` implements it on top of OpenAI vision chat completions
and turns SDK failures into classified ``TransportError``s.
"""

import logging
from typing import Any, Protocol

import httpx
import openai

from .exceptions import TransportError, TransportErrorKind
from .prompts import EXTRACTION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that can turn a prompt plus a document into reply text."""

    def generate(self, prompt_text: str, file_base64: str, mime_type: str) -> str:
        ...


_MALFORMED_MARKERS = (
    "invalid image",
    "invalid_image",
    "unsupported image",
    "could not process",
    "corrupt",
    "malformed",
    "invalid file",
    "invalid base64",
)
_QUOTA_MARKERS = ("quota", "rate limit", "rate_limit", "resource exhausted")
_UNAUTHORIZED_MARKERS = (
    "api key",
    "api_key",
    "unauthorized",
    "permission denied",
    "invalid authentication",
)


def classify_transport_error(exc: Exception) -> TransportErrorKind:
    """
    Decide which user-facing category a model failure belongs to.

    SDK exception types are checked first; anything else falls back to
    sniffing the error message.
    """
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return TransportErrorKind.UNAUTHORIZED
    if isinstance(exc, openai.RateLimitError):
        return TransportErrorKind.QUOTA_EXCEEDED
    if isinstance(exc, (openai.BadRequestError, openai.UnprocessableEntityError)):
        return TransportErrorKind.MALFORMED_INPUT

    message = str(exc).lower()
    if any(marker in message for marker in _QUOTA_MARKERS):
        return TransportErrorKind.QUOTA_EXCEEDED
    if any(marker in message for marker in _UNAUTHORIZED_MARKERS):
        return TransportErrorKind.UNAUTHORIZED
    if any(marker in message for marker in _MALFORMED_MARKERS):
        return TransportErrorKind.MALFORMED_INPUT
    return TransportErrorKind.GENERIC


def _document_part(file_base64: str, mime_type: str) -> dict[str, Any]:
    data_url = f"data:{mime_type};base64,{file_base64}"
    if mime_type == "application/pdf":
        return {
            "type": "file",
            "file": {"filename": "document.pdf", "file_data": data_url},
        }
    return {
        "type": "image_url",
        "image_url": {"url": data_url, "detail": "high"},
    }


class OpenAIModelClient:
    """OpenAI vision model exposed through the ``ModelClient`` interface."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1",
        timeout_seconds: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client: openai.OpenAI | None = None

    @property
    def client(self) -> openai.OpenAI:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            self._client = openai.OpenAI(
                api_key=self.api_key,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def generate(self, prompt_text: str, file_base64: str, mime_type: str) -> str:
        """
        Send the prompt and document to the model and return its reply text.

        Raises:
            TransportError: If the request fails or the reply is empty.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt_text},
                            _document_part(file_base64, mime_type),
                        ],
                    },
                ],
            )
        except (openai.APIError, httpx.HTTPError) as e:
            kind = classify_transport_error(e)
            logger.debug("Model request failed (%s): %s", kind.value, e)
            raise TransportError(kind, str(e)) from e

        if not response.choices:
            raise TransportError(TransportErrorKind.GENERIC, "Model returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise TransportError(TransportErrorKind.GENERIC, "Empty response from model")
        return content
