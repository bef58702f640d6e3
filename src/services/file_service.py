"""Attachment file storage service."""
import hashlib
import mimetypes
from typing import Dict, Optional, Tuple
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from minio.error import S3Error
from config.settings import settings
from exceptions import ResourceNotFound, ValidationError
from repositories.note_repository import AttachmentRepository
from utils import minio_client
import logging

logger = logging.getLogger(__name__)


class FileService:
    """
    Stores attachment files in MinIO and reads them back.

    A file can be read by the account that uploaded it, or by anyone once it
    is attached to a shared note.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.attachment_repo = AttachmentRepository(db)

    async def upload(self, account_id: int, file: UploadFile) -> Dict:
        """
        Store an uploaded file.

        The object name is derived from the content hash, so uploading the
        same file twice yields the same path.

        Returns:
            ``{name, path, size}``, ready to be sent as a note attachment
        """
        file_data = await file.read()
        if not file_data:
            raise ValidationError("file", "File is empty")
        max_size = settings.MAX_UPLOAD_SIZE
        if len(file_data) > max_size:
            raise ValidationError("file", f"File must not exceed {max_size // 1024 // 1024}MB")

        filename = file.filename or "file"
        file_extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        file_hash = hashlib.md5(file_data).hexdigest()
        object_name = f"{account_id}/{file_hash}.{file_extension}"

        path = await minio_client.upload_file(
            object_name, file_data, file.content_type or "application/octet-stream"
        )
        logger.info(f"Account {account_id} uploaded {object_name} ({len(file_data)} bytes)")
        return {"name": filename, "path": path, "size": len(file_data)}

    async def download(self, object_name: str, account_id: Optional[int] = None) -> Tuple[bytes, str]:
        """
        Return the file's bytes and its guessed media type.

        Raises:
            ResourceNotFound: The file is missing or the caller may not read it
        """
        if not await self._can_read(object_name, account_id):
            raise ResourceNotFound("File", object_name)
        try:
            data = await minio_client.download_file(object_name)
        except S3Error as e:
            if e.code == "NoSuchKey":
                raise ResourceNotFound("File", object_name)
            raise
        media_type = mimetypes.guess_type(object_name)[0] or "application/octet-stream"
        return data, media_type

    async def _can_read(self, object_name: str, account_id: Optional[int]) -> bool:
        if ".." in object_name.split("/"):
            return False
        # Uploads are stored under "<account id>/"
        if account_id is not None and object_name.startswith(f"{account_id}/"):
            return True
        return await self.attachment_repo.is_shared_path(f"{settings.FILE_PATH_PREFIX}{object_name}")
