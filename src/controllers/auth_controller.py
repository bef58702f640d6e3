"""Account authentication API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from config.database import get_db
from schemas.schemas import LoginRequest, RegisterRequest, AuthResponse
from services.auth_service import AuthService

router = APIRouter(prefix="/v1/user", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Account login endpoint."""
    service = AuthService(db)
    token, account = await service.login(request.name, request.password)
    return {"token": token, "user": account}


@router.post("/register", response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Account registration endpoint."""
    service = AuthService(db)
    token, account = await service.register(request.name, request.password)
    return {"token": token, "user": account}
