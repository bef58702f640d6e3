"""Per-account configuration database model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, JSON
from config.database import Base
from models.base import utcnow


class Config(Base):
    """Key/value configuration entry owned by an account."""
    __tablename__ = "configs"

    # Known keys
    KEY_ORDER_BY_CREATE_TIME = "isOrderByCreateTime"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    config = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "key", name="uq_account_config_key"),
    )
