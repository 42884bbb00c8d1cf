"""
Router for the document upload endpoint.

Handles:
- Single identity document upload and extraction
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from ..models import ErrorResponse, UploadResponse
from ..services.ai import ExtractionService, TransportError, get_extraction_service
from ..services.file_validation import ValidationError, validate_upload
from ..services.storage import TransientFileStore, get_file_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

SUCCESS_MESSAGE = "Document processed successfully"


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_unset=True,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def upload_document(
    service: Annotated[ExtractionService, Depends(get_extraction_service)],
    store: Annotated[TransientFileStore, Depends(get_file_store)],
    document: Annotated[
        UploadFile | None, File(description="Identity document (JPEG, PNG or PDF)")
    ] = None,
) -> UploadResponse:
    """
    Upload an identity document and extract its fields.

    The stored upload is deleted before the response is sent, whether
    extraction succeeded or not. Unparseable model replies still return 200
    with ``success: false`` and the raw reply.
    """
    if document is None:
        raise ValidationError("No file uploaded")

    try:
        validate_upload(document.filename, document.content_type)
        async with store.store(document) as uploaded:
            logger.info("Processing file: %s", uploaded.original_name)
            result = await service.process_document(
                uploaded.path, original_name=uploaded.original_name
            )
    except ValidationError as e:
        logger.warning("Rejected %s: %s", document.filename, e.reason)
        raise
    except TransportError:
        raise
    except Exception:
        logger.exception("Error processing document %s", document.filename)
        raise

    return UploadResponse(
        message=SUCCESS_MESSAGE,
        **result.model_dump(exclude_unset=True),
    )
