"""Per-account configuration service."""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any
from repositories.config_repository import ConfigRepository


class ConfigService:
    """Service for per-account settings such as note ordering."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.config_repo = ConfigRepository(db)

    async def get_config(self, account_id: int) -> dict:
        return await self.config_repo.get_global_config(account_id)

    async def update_config(self, account_id: int, key: str, value: Any) -> dict:
        item = await self.config_repo.set_value(account_id, key, value)
        await self.db.commit()
        return {"key": item.key, "value": item.config}
