"""Per-account config API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from config.database import get_db
from schemas.schemas import UpdateConfigRequest
from services.config_service import ConfigService
from middlewares.auth import get_current_account
from models.account import Account

router = APIRouter(prefix="/v1/config", tags=["Config"])


@router.get("/list")
async def list_config(
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Get the caller's config."""
    service = ConfigService(db)
    return await service.get_config(current_account.id)


@router.post("/update")
async def update_config(
    request: UpdateConfigRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Set one config value."""
    service = ConfigService(db)
    return await service.update_config(current_account.id, request.key, request.value)
