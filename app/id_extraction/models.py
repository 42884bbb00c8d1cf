"""
Pydantic models for the identity document extraction pipeline.

Defines the uploaded file handle, the loosely-typed document record the
model is asked to produce, and the request/response shapes of the API.
Wire names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentType(str, Enum):
    """Document classes the model is asked to choose from."""

    PASSPORT = "passport"
    DRIVING_LICENSE = "driving_license"
    ID_CARD = "id_card"
    OTHER = "other"


class UploadedFile(BaseModel):
    """
    An in-flight uploaded document held on transient storage.

    Attributes:
        path: Location of the stored bytes; deleted when the request ends.
        original_name: File name as sent by the client.
        extension: Lower-case extension without the dot.
        size: Number of bytes written.
        content_type: MIME type declared by the client.
    """

    path: Path
    original_name: str
    extension: str
    size: int = Field(..., ge=0)
    content_type: str | None = None


class PersonalInfo(CamelModel):
    """Holder details. Every field is optional; the model may add others."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    name: str | None = None
    date_of_birth: str | None = None
    address: str | None = None
    nationality: str | None = None
    gender: str | None = None


class DocumentRecord(CamelModel):
    """
    Typed view over the model's reply.

    The pipeline passes the raw dictionary through untouched; this view is
    for consumers that want attribute access and display-friendly keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    document_type: str | None = None
    personal_info: PersonalInfo | None = None
    document_number: str | None = None
    issue_date: str | None = None
    expiry_date: str | None = None
    issuing_authority: str | None = None
    country: str | None = None
    additional_info: dict[str, Any] | None = None

    @property
    def kind(self) -> DocumentType:
        """Map the free-text documentType onto the known enum."""
        if not self.document_type:
            return DocumentType.OTHER
        value = self.document_type.strip().lower().replace(" ", "_")
        try:
            return DocumentType(value)
        except ValueError:
            return DocumentType.OTHER

    def display_additional_info(self) -> dict[str, Any]:
        """
        Return additionalInfo with snake_case keys folded into camelCase.

        When both spellings are present (placeOfBirth / place_of_birth) the
        camelCase value wins.
        """
        canonical: dict[str, Any] = {}
        for key, value in (self.additional_info or {}).items():
            camel = to_camel(key) if "_" in key else key
            if camel in canonical and camel != key:
                continue
            canonical[camel] = value
        return canonical


class ExtractionMetadata(CamelModel):
    """Provenance attached to every extraction result."""

    file_name: str = Field(..., description="Original file name")
    file_type: str = Field(..., description="File extension without the dot")
    processed_at: str = Field(
        ..., description="UTC processing timestamp (ISO 8601)"
    )

    @model_validator(mode="before")
    @classmethod
    def stamp_processed_at(cls, data: Any) -> Any:
        """Fill in the current time so the timestamp always serialises."""
        if isinstance(data, dict) and not (
            data.get("processed_at") or data.get("processedAt")
        ):
            data = {**data, "processed_at": datetime.now(timezone.utc).isoformat()}
        return data


class ExtractionResult(CamelModel):
    """
    Outcome of one extraction.

    Success carries ``extracted_data``; a soft failure carries ``error`` and
    the model's ``raw_response`` instead. Only the fields that were set are
    serialised.
    """

    success: bool = Field(..., description="Whether the reply parsed as JSON")
    extracted_data: dict[str, Any] | None = Field(
        default=None,
        description="Document fields exactly as returned by the model",
    )
    metadata: ExtractionMetadata
    error: str | None = Field(default=None, description="Failure reason")
    raw_response: str | None = Field(
        default=None,
        description="Unparsed model reply (soft failures only)",
    )

    @classmethod
    def succeeded(
        cls, data: dict[str, Any], metadata: ExtractionMetadata
    ) -> "ExtractionResult":
        return cls(success=True, extracted_data=data, metadata=metadata)

    @classmethod
    def failed(
        cls, error: str, raw_response: str, metadata: ExtractionMetadata
    ) -> "ExtractionResult":
        return cls(
            success=False,
            error=error,
            raw_response=raw_response,
            metadata=metadata,
        )

    @property
    def record(self) -> DocumentRecord | None:
        """Typed view of ``extracted_data``, if the extraction succeeded."""
        if self.extracted_data is None:
            return None
        return DocumentRecord.model_validate(self.extracted_data)


class UploadResponse(ExtractionResult):
    """Response model for the upload endpoint."""

    message: str = Field(..., description="Status message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="OK")
    version: str = Field(default="1.0.0")


class ErrorResponse(BaseModel):
    """Body returned for every non-2xx response."""

    error: str
