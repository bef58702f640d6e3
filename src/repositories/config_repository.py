"""Per-account configuration repository."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Dict
from models.config import Config


class ConfigRepository:
    """Repository for Config model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_global_config(self, account_id: int) -> Dict[str, Any]:
        """Return every config entry of an account as a dict."""
        result = await self.db.execute(select(Config).where(Config.account_id == account_id))
        return {item.key: item.config for item in result.scalars().all()}

    async def set_value(self, account_id: int, key: str, value: Any) -> Config:
        """Create or overwrite a config entry."""
        result = await self.db.execute(
            select(Config).where(Config.account_id == account_id, Config.key == key)
        )
        item = result.scalar_one_or_none()
        if item is None:
            item = Config(account_id=account_id, key=key, config=value)
            self.db.add(item)
        else:
            item.config = value
        await self.db.flush()
        return item
