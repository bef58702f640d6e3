"""Follow repository for database operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import Optional, List
from models.follow import Follow


class FollowRepository:
    """Repository for Follow model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, account_id: int, site_url: str, follow_type: str) -> Optional[Follow]:
        """Get the relation of a given type between an account and a site."""
        result = await self.db.execute(
            select(Follow)
            .where(
                Follow.account_id == account_id,
                Follow.site_url == site_url,
                Follow.follow_type == follow_type,
            )
            .order_by(Follow.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def exists(self, account_id: int, site_url: str) -> bool:
        """Check for any relation between an account and a site."""
        result = await self.db.execute(
            select(Follow.id)
            .where(Follow.account_id == account_id, Follow.site_url == site_url)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        account_id: int,
        site_url: str,
        follow_type: str,
        site_name: Optional[str] = None,
        site_avatar: Optional[str] = None
    ) -> Follow:
        """Create a follow relation."""
        follow = Follow(
            account_id=account_id,
            site_url=site_url,
            follow_type=follow_type,
            site_name=site_name,
            site_avatar=site_avatar,
        )
        self.db.add(follow)
        await self.db.flush()
        return follow

    async def remove(self, account_id: int, site_url: str, follow_type: str) -> int:
        """Delete relations of a given type; returns the affected row count."""
        result = await self.db.execute(
            delete(Follow)
            .where(
                Follow.account_id == account_id,
                Follow.site_url == site_url,
                Follow.follow_type == follow_type,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def list_by_type(self, account_id: int, follow_type: str) -> List[Follow]:
        """List an account's relations of a given type."""
        result = await self.db.execute(
            select(Follow)
            .where(Follow.account_id == account_id, Follow.follow_type == follow_type)
            .order_by(Follow.id)
        )
        return list(result.scalars().all())
