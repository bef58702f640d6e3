"""MinIO client for attachment storage."""
from minio import Minio
from minio.error import S3Error
from io import BytesIO
from config.settings import settings
import logging

logger = logging.getLogger(__name__)

minio_client = Minio(
    settings.MINIO_ENDPOINT,
    access_key=settings.MINIO_ACCESS_KEY,
    secret_key=settings.MINIO_SECRET_KEY,
    secure=settings.MINIO_SECURE
)


def ensure_bucket_exists():
    """Ensure the default bucket exists."""
    try:
        if not minio_client.bucket_exists(settings.MINIO_BUCKET):
            minio_client.make_bucket(settings.MINIO_BUCKET)
            logger.info(f"Created bucket: {settings.MINIO_BUCKET}")
    except S3Error as e:
        logger.error(f"Error ensuring bucket exists: {e}")
        raise


def object_name_from_path(path: str) -> str:
    """
    Map an attachment path to its object name.

    Attachment paths are stored the way clients reference them, e.g.
    ``/api/file/2024/cat.png``; the object name is ``2024/cat.png``.
    """
    if path.startswith(settings.FILE_PATH_PREFIX):
        path = path[len(settings.FILE_PATH_PREFIX):]
    return path.lstrip("/")


async def upload_file(object_name: str, file_data: bytes, content_type: str = "application/octet-stream") -> str:
    """
    Upload file to MinIO.

    Args:
        object_name: Object name in MinIO (e.g., '2024/cat.png')
        file_data: File data as bytes
        content_type: MIME type of the file

    Returns:
        Attachment path clients use to reference the file
    """
    try:
        ensure_bucket_exists()

        minio_client.put_object(
            settings.MINIO_BUCKET,
            object_name,
            BytesIO(file_data),
            len(file_data),
            content_type=content_type
        )

        logger.info(f"Uploaded file: {object_name} ({len(file_data)} bytes)")
        return f"{settings.FILE_PATH_PREFIX}{object_name}"

    except S3Error as e:
        logger.error(f"Error uploading file {object_name}: {e}")
        raise


async def delete_file(path: str):
    """
    Delete an attachment's file from MinIO.

    Args:
        path: Attachment path as stored on the attachment row
    """
    object_name = object_name_from_path(path)
    try:
        minio_client.remove_object(settings.MINIO_BUCKET, object_name)
        logger.info(f"Deleted file: {object_name}")

    except S3Error as e:
        logger.error(f"Error deleting file {object_name}: {e}")
        raise


async def download_file(object_name: str) -> bytes:
    """
    Download file from MinIO.

    Args:
        object_name: Object name in MinIO

    Returns:
        File data as bytes
    """
    try:
        response = minio_client.get_object(settings.MINIO_BUCKET, object_name)
        data = response.read()
        response.close()
        response.release_conn()
        return data

    except S3Error as e:
        logger.error(f"Error downloading file {object_name}: {e}")
        raise
