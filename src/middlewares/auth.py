"""Authentication middleware and dependencies."""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from config.database import get_db
from exceptions import Unauthorized
from models.account import Account
from utils.security import decode_access_token
from repositories.account_repository import AccountRepository

security = HTTPBearer(auto_error=False)


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Account:
    """Get current authenticated account from JWT token."""
    if credentials is None:
        raise Unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise Unauthorized()

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise Unauthorized("Invalid token payload")

    account = await AccountRepository(db).get_by_id(int(subject))
    if account is None:
        raise Unauthorized("Account not found")

    return account



async def get_current_account_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[Account]:
    """Get current account if authenticated, None otherwise."""
    if credentials is None:
        return None

    try:
        return await get_current_account(credentials, db)
    except Unauthorized:
        return None
