"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from app.id_extraction.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_api_key_is_required(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.delenv("PORT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.openai_api_key == "sk-test"
        assert settings.port == 5002
        assert settings.max_upload_bytes == 5 * 1024 * 1024
        assert settings.max_document_bytes == 20 * 1024 * 1024

    def test_port_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_api_key_is_rejected(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ):
        monkeypatch.setenv("OPENAI_API_KEY", value)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
