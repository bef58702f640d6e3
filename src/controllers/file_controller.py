"""Attachment file API endpoints."""
from fastapi import APIRouter, Depends, UploadFile, File
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from config.database import get_db
from schemas.schemas import AttachmentInput
from services.file_service import FileService
from middlewares.auth import get_current_account, get_current_account_optional
from models.account import Account

router = APIRouter(tags=["File"])


@router.post("/v1/file/upload", response_model=AttachmentInput)
async def upload_file(
    file: UploadFile = File(...),
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Upload an attachment file."""
    service = FileService(db)
    return await service.upload(current_account.id, file)


@router.get("/file/{object_name:path}")
async def get_file(
    object_name: str,
    current_account: Optional[Account] = Depends(get_current_account_optional),
    db: AsyncSession = Depends(get_db)
):
    """Serve a stored file to its uploader, or to anyone if a shared note links it."""
    service = FileService(db)
    data, media_type = await service.download(
        object_name, current_account.id if current_account else None
    )
    return Response(content=data, media_type=media_type)
