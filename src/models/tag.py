"""Tag and TagsToNote database models."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, inspect
from sqlalchemy.orm import relationship
from config.database import Base
from models.base import utcnow, isoformat


class Tag(Base):
    """Tag model. Tags form a forest per account; ``parent == 0`` is a root."""
    __tablename__ = "tag"

    ROOT_PARENT = 0

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=False, default="")
    parent = Column(Integer, nullable=False, default=ROOT_PARENT)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("name", "parent", "account_id", name="uq_tag_name_parent_account"),
    )

    notes = relationship("TagsToNote", back_populates="tag")

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "parent": self.parent,
            "sortOrder": self.sort_order,
            "accountId": self.account_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class TagsToNote(Base):
    """Association between a note and a tag."""
    __tablename__ = "tags_to_note"

    note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True, index=True)

    note = relationship("Note", back_populates="tags")
    tag = relationship("Tag", back_populates="notes")

    def to_dict(self):
        """Convert to dictionary."""
        data = {"noteId": self.note_id, "tagId": self.tag_id}
        if "tag" not in inspect(self).unloaded and self.tag is not None:
            data["tag"] = self.tag.to_dict()
        return data
