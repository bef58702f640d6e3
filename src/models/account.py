"""Account database model."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from config.database import Base
from models.base import utcnow


class Account(Base):
    """Site account. The first registered account is the site owner."""
    __tablename__ = "accounts"

    ROLE_SUPERADMIN = "superadmin"
    ROLE_USER = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    nickname = Column(String(255), nullable=False, default="")
    password = Column(String(255), nullable=False)
    image = Column(String(512), nullable=False, default="")
    role = Column(String(20), nullable=False, default=ROLE_USER)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    notes = relationship("Note", back_populates="account")

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "nickname": self.nickname,
            "image": self.image,
            "role": self.role,
            "createdAt": self.created_at.isoformat(),
        }
