"""Tests for transient upload storage."""

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.id_extraction.services.file_validation import ValidationError
from app.id_extraction.services.storage import CleanupError, TransientFileStore


def _upload(content: bytes, filename: str = "id.jpg") -> UploadFile:
    return UploadFile(
        io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": "image/jpeg"}),
    )


class TestTransientFileStore:
    """Tests for TransientFileStore."""

    @pytest.mark.asyncio
    async def test_file_exists_inside_block_and_is_removed_after(self, tmp_path: Path):
        store = TransientFileStore(tmp_path)
        async with store.store(_upload(b"abc")) as uploaded:
            assert uploaded.path.read_bytes() == b"abc"
            assert uploaded.size == 3
            assert uploaded.extension == "jpg"
            assert uploaded.original_name == "id.jpg"
            assert uploaded.content_type == "image/jpeg"
            assert uploaded.path.suffix == ".jpg"
        assert not uploaded.path.exists()

    @pytest.mark.asyncio
    async def test_file_removed_when_block_raises(self, tmp_path: Path):
        store = TransientFileStore(tmp_path)
        with pytest.raises(RuntimeError):
            async with store.store(_upload(b"abc")) as uploaded:
                raise RuntimeError("pipeline failed")
        assert not uploaded.path.exists()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_oversized_upload_rejected_and_removed(self, tmp_path: Path):
        store = TransientFileStore(tmp_path, max_bytes=4)
        with pytest.raises(ValidationError):
            async with store.store(_upload(b"12345")):
                pytest.fail("block must not run")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_upload_at_ceiling_accepted(self, tmp_path: Path):
        store = TransientFileStore(tmp_path, max_bytes=4)
        async with store.store(_upload(b"1234")) as uploaded:
            assert uploaded.size == 4

    @pytest.mark.asyncio
    async def test_names_are_unique(self, tmp_path: Path):
        store = TransientFileStore(tmp_path)
        async with store.store(_upload(b"a")) as first:
            async with store.store(_upload(b"b")) as second:
                assert first.path != second.path

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_not_propagated(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        store = TransientFileStore(tmp_path)

        def failing_delete(path: Path) -> None:
            raise CleanupError("disk is read-only")

        monkeypatch.setattr(store, "delete", failing_delete)
        async with store.store(_upload(b"abc")) as uploaded:
            result = "processed"
        assert result == "processed"
        assert uploaded.path.exists()

    def test_delete_missing_file_is_noop(self, tmp_path: Path):
        TransientFileStore(tmp_path).delete(tmp_path / "gone.jpg")

    def test_delete_wraps_os_errors(self, tmp_path: Path):
        directory = tmp_path / "not-a-file"
        directory.mkdir()
        with pytest.raises(CleanupError):
            TransientFileStore(tmp_path).delete(directory)
