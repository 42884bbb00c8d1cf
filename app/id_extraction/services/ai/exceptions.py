"""
Shared exceptions for AI service modules.
"""

from enum import Enum


class AIServiceError(Exception):
    """Raised when AI service operations fail."""

    pass


class TransportErrorKind(str, Enum):
    """Categories of external model failures surfaced to clients."""

    MALFORMED_INPUT = "malformed_input"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNAUTHORIZED = "unauthorized"
    GENERIC = "generic"


USER_MESSAGES: dict[TransportErrorKind, str] = {
    TransportErrorKind.MALFORMED_INPUT: (
        "The document could not be read. "
        "Please upload a clear, uncorrupted image or PDF."
    ),
    TransportErrorKind.QUOTA_EXCEEDED: (
        "The document analysis quota has been exceeded. Please try again later."
    ),
    TransportErrorKind.UNAUTHORIZED: (
        "The document analysis service rejected our credentials."
    ),
    TransportErrorKind.GENERIC: "Failed to process document",
}


class TransportError(AIServiceError):
    """
    Raised when the call to the external model fails.

    The provider's own message is kept in ``detail`` for logging; ``str(exc)``
    is the user-facing explanation for ``kind``.
    """

    def __init__(self, kind: TransportErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(USER_MESSAGES[kind])

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind]


class ParseError(AIServiceError):
    """Raised when the model reply is not a JSON object."""

    pass
