"""
FastAPI application for identity document extraction.

Provides endpoints for:
- Uploading an identity document and extracting its fields
- Health checks
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .models import HealthResponse
from .routers import upload
from .services.ai import TransportError, TransportErrorKind, get_extraction_service
from .services.file_validation import ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

TRANSPORT_ERROR_STATUS: dict[TransportErrorKind, int] = {
    TransportErrorKind.MALFORMED_INPUT: 422,
    TransportErrorKind.QUOTA_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    TransportErrorKind.UNAUTHORIZED: status.HTTP_502_BAD_GATEWAY,
    TransportErrorKind.GENERIC: status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Identity Document Extraction Service...")
    # Fails fast when OPENAI_API_KEY is missing
    get_extraction_service()
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down Identity Document Extraction Service...")


# Create FastAPI application
app = FastAPI(
    title="Identity Document Extraction API",
    description="Passport, driving licence and ID card data extraction using AI",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(version=__version__)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(upload.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle rejected uploads."""
    logger.debug("Validation failed for %s: %s", request.url.path, exc.reason)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.reason},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    """Handle malformed multipart requests."""
    logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid upload request"},
    )


@app.exception_handler(TransportError)
async def transport_error_handler(request: Request, exc: TransportError):
    """Handle external model failures."""
    logger.debug("Model call failed for %s (%s)", request.url.path, exc.kind.value)
    return JSONResponse(
        status_code=TRANSPORT_ERROR_STATUS[exc.kind],
        content={"error": exc.user_message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Handle anything else without leaking internals."""
    logger.exception("Unexpected error processing %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
