"""Public API endpoints read by other sites."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from config.database import get_db
from schemas.schemas import SiteInfo
from services.auth_service import AuthService

router = APIRouter(prefix="/v1/public", tags=["Public"])


@router.get("/site-info", response_model=SiteInfo)
async def site_info(
    id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Describe this site (no auth required)."""
    service = AuthService(db)
    return await service.get_site_info(id)
