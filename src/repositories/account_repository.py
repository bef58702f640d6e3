"""Account repository for database operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional
from models.account import Account


class AccountRepository:
    """Repository for Account model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        result = await self.db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Account]:
        """Get account by login name."""
        result = await self.db.execute(select(Account).where(Account.name == name))
        return result.scalar_one_or_none()

    async def get_site_owner(self) -> Optional[Account]:
        """Get the superadmin account that represents this site."""
        result = await self.db.execute(
            select(Account)
            .where(Account.role == Account.ROLE_SUPERADMIN)
            .order_by(Account.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count all accounts."""
        return (await self.db.execute(select(func.count(Account.id)))).scalar() or 0

    async def create(self, name: str, password_hash: str, role: str) -> Account:
        """Create a new account."""
        account = Account(name=name, nickname=name, password=password_hash, role=role)
        self.db.add(account)
        await self.db.flush()
        return account
