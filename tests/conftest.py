"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from typing import Generator

# The application refuses to start without an API key.
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from app.id_extraction.config import Settings
from app.id_extraction.main import app
from app.id_extraction.services.ai import ExtractionService, get_extraction_service
from app.id_extraction.services.storage import TransientFileStore, get_file_store


class FakeModelClient:
    """Stand-in for the external model that records every call."""

    def __init__(self, reply: str = '{"documentType": "passport"}'):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict[str, str]] = []

    def generate(self, prompt_text: str, file_base64: str, mime_type: str) -> str:
        self.calls.append(
            {
                "prompt_text": prompt_text,
                "file_base64": file_base64,
                "mime_type": mime_type,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment."""
    return Settings(
        openai_api_key="test-key",
        upload_dir=tmp_path / "uploads",
        _env_file=None,
    )


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return settings.upload_dir


@pytest.fixture
def fake_model() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def extraction_service(settings: Settings, fake_model: FakeModelClient) -> ExtractionService:
    return ExtractionService(settings, fake_model)


@pytest.fixture
def client(
    settings: Settings, extraction_service: ExtractionService
) -> Generator[TestClient, None, None]:
    """Create a test client wired to the fake model and a temp upload dir."""
    store = TransientFileStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)
    app.dependency_overrides[get_extraction_service] = lambda: extraction_service
    app.dependency_overrides[get_file_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A 2 MB payload with a JPEG header; never decoded."""
    return b"\xff\xd8\xff\xe0" + b"\x00" * (2 * 1024 * 1024 - 4)


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal PDF structure."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
trailer
<< /Size 4 /Root 1 0 R >>
%%EOF"""


def stored_files(upload_dir: Path) -> list[Path]:
    """Files left behind in the transient upload directory."""
    if not upload_dir.exists():
        return []
    return list(upload_dir.iterdir())


@pytest.fixture
def leftover_files(upload_dir: Path):
    """Callable listing files still present in the upload directory."""
    return lambda: stored_files(upload_dir)
