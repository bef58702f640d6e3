"""Tests for attachment file storage and who may read it."""

import io

import pytest
from fastapi import UploadFile

from config.settings import settings
from exceptions import ResourceNotFound, ValidationError
from services.file_service import FileService
from services.note_service import NoteService
from utils import minio_client


@pytest.fixture
def bucket(monkeypatch):
    """In-memory stand-in for the MinIO bucket."""
    objects = {}

    async def fake_upload(object_name, file_data, content_type="application/octet-stream"):
        objects[object_name] = file_data
        return f"{settings.FILE_PATH_PREFIX}{object_name}"

    async def fake_download(object_name):
        return objects[object_name]

    monkeypatch.setattr(minio_client, "upload_file", fake_upload)
    monkeypatch.setattr(minio_client, "download_file", fake_download)
    return objects


def _upload(data, filename="cat.png"):
    return UploadFile(file=io.BytesIO(data), filename=filename)


async def _stored(db, account, data=b"meow"):
    """Upload a file as ``account``; returns (attachment dict, object name)."""
    attachment = await FileService(db).upload(account.id, _upload(data))
    return attachment, minio_client.object_name_from_path(attachment["path"])


async def test_upload_returns_attachment_metadata(db, account, bucket):
    result = await FileService(db).upload(account.id, _upload(b"meow"))

    assert result["name"] == "cat.png"
    assert result["size"] == 4
    assert result["path"].startswith(f"/api/file/{account.id}/")
    assert result["path"].endswith(".png")
    assert list(bucket.values()) == [b"meow"]


async def test_same_content_maps_to_same_path(db, account, bucket):
    service = FileService(db)
    first = await service.upload(account.id, _upload(b"same", "a.txt"))
    second = await service.upload(account.id, _upload(b"same", "b.txt"))
    assert first["path"] == second["path"]


async def test_empty_and_oversized_files_are_rejected(db, account, bucket, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
    service = FileService(db)

    with pytest.raises(ValidationError):
        await service.upload(account.id, _upload(b""))
    with pytest.raises(ValidationError):
        await service.upload(account.id, _upload(b"too big"))
    assert bucket == {}


class TestDownload:
    async def test_uploader_can_read(self, db, account, bucket):
        _, object_name = await _stored(db, account)

        data, media_type = await FileService(db).download(object_name, account.id)
        assert data == b"meow"
        assert media_type == "image/png"

    async def test_anonymous_and_other_accounts_cannot_read_private_files(
        self, db, account, other_account, bucket
    ):
        attachment, object_name = await _stored(db, account)
        await NoteService(db).upsert_note(account.id, content="private", attachments=[attachment])
        service = FileService(db)

        with pytest.raises(ResourceNotFound):
            await service.download(object_name)
        with pytest.raises(ResourceNotFound):
            await service.download(object_name, other_account.id)

    async def test_files_on_shared_notes_are_public(self, db, account, bucket):
        attachment, object_name = await _stored(db, account)
        await NoteService(db).upsert_note(
            account.id, content="public", attachments=[attachment], is_share=True
        )

        data, _ = await FileService(db).download(object_name)
        assert data == b"meow"

    async def test_parent_segments_are_refused(self, db, account, other_account, bucket):
        _, object_name = await _stored(db, other_account)

        with pytest.raises(ResourceNotFound):
            await FileService(db).download(f"{account.id}/../{object_name}", account.id)
