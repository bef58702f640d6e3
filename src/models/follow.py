"""Follow database model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from config.database import Base
from models.base import utcnow, isoformat


class Follow(Base):
    """A follow relation between a local account and a remote site."""
    __tablename__ = "follows"

    # Follow types
    TYPE_FOLLOWING = "following"
    TYPE_FOLLOWER = "follower"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    site_url = Column(String(512), nullable=False)
    site_name = Column(String(255), nullable=True)
    site_avatar = Column(String(1024), nullable=True)
    description = Column(String(1024), nullable=True)
    follow_type = Column(String(20), nullable=False, default=TYPE_FOLLOWING)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_follows_account_site_type", "account_id", "site_url", "follow_type"),
    )

    def to_dict(self):
        """Convert to dictionary; nullable site metadata is dropped when unset."""
        data = {
            "id": self.id,
            "accountId": self.account_id,
            "siteUrl": self.site_url,
            "followType": self.follow_type,
            "createdAt": isoformat(self.created_at),
        }
        if self.site_name is not None:
            data["siteName"] = self.site_name
        if self.site_avatar is not None:
            data["siteAvatar"] = self.site_avatar
        if self.description is not None:
            data["description"] = self.description
        return data
