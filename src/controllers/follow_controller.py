"""Follow API endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from config.database import get_db
from schemas.schemas import FollowRequest, FollowFromRequest, UnfollowFromRequest, FollowResponse
from services.follow_service import FollowService
from middlewares.auth import get_current_account
from models.account import Account

router = APIRouter(prefix="/v1/follows", tags=["Follows"])


@router.post("/follow", response_model=FollowResponse)
async def follow(
    request: FollowRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Follow a remote site."""
    service = FollowService(db)
    return await service.follow(current_account.id, request.siteUrl, request.mySiteUrl)


@router.post("/follow-from", response_model=FollowResponse)
async def follow_from(
    request: FollowFromRequest,
    db: AsyncSession = Depends(get_db)
):
    """Some site wants to follow me."""
    service = FollowService(db)
    return await service.follow_from(
        request.mySiteAccountId, request.siteUrl, request.siteName, request.siteAvatar
    )


@router.post("/unfollow", response_model=bool)
async def unfollow(
    request: FollowRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Unfollow a remote site."""
    service = FollowService(db)
    return await service.unfollow(current_account.id, request.siteUrl, request.mySiteUrl)


@router.post("/unfollow-from", response_model=bool)
async def unfollow_from(
    request: UnfollowFromRequest,
    db: AsyncSession = Depends(get_db)
):
    """Some site wants to unfollow me."""
    service = FollowService(db)
    return await service.unfollow_from(request.siteUrl, request.mySiteAccountId)


@router.get("/follow-list", response_model=List[dict])
async def follow_list(
    userId: Optional[int] = Query(None),
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Get following list."""
    service = FollowService(db)
    return await service.follow_list(current_account.id, userId)


@router.get("/followers", response_model=List[dict])
async def follower_list(
    userId: Optional[int] = Query(None),
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Get followers list."""
    service = FollowService(db)
    return await service.follower_list(current_account.id, userId)


@router.get("/is-following", response_model=FollowResponse)
async def is_following(
    siteUrl: str = Query(...),
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Check if following a site."""
    service = FollowService(db)
    return await service.is_following(current_account.id, siteUrl)
