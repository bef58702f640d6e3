"""Account authentication and public site info."""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Tuple
from exceptions import InvalidCredentials, UsernameAlreadyExists, ResourceNotFound
from models.account import Account
from repositories.account_repository import AccountRepository
from utils.security import verify_password, get_password_hash, create_access_token
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account registration, login and site identity."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.account_repo = AccountRepository(db)

    async def register(self, name: str, password: str) -> Tuple[str, dict]:
        """Register an account; the first one becomes the site owner."""
        if await self.account_repo.get_by_name(name):
            raise UsernameAlreadyExists(name)

        role = Account.ROLE_SUPERADMIN if await self.account_repo.count() == 0 else Account.ROLE_USER
        account = await self.account_repo.create(name, get_password_hash(password), role)
        await self.db.commit()
        logger.info(f"Registered account {account.id} ({role})")

        token = create_access_token(account.id)
        return token, account.to_dict()

    async def login(self, name: str, password: str) -> Tuple[str, dict]:
        """Check credentials and issue an access token."""
        account = await self.account_repo.get_by_name(name)
        if not account or not verify_password(password, account.password):
            raise InvalidCredentials()

        token = create_access_token(account.id)
        return token, account.to_dict()

    async def get_site_info(self, account_id: Optional[int] = None) -> dict:
        """
        Describe this site for remote sites.

        Returns the given account, or the site owner when no id is given.
        """
        if account_id is not None:
            account = await self.account_repo.get_by_id(account_id)
        else:
            account = await self.account_repo.get_site_owner()
        if not account:
            raise ResourceNotFound("Account", account_id if account_id is not None else "owner")
        return {"id": account.id, "name": account.display_name, "image": account.image or ""}
