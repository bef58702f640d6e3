"""Note, attachment and note reference database models."""
from enum import IntEnum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, inspect
from sqlalchemy.orm import relationship
from config.database import Base
from models.base import utcnow, isoformat


class NoteType(IntEnum):
    """Kinds of note. ``-1`` in requests means "any" or "leave unchanged"."""
    TEXT = 0
    LINK = 1
    TODO = 2


class Note(Base):
    """Note model."""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    type = Column(Integer, nullable=False, default=NoteType.TEXT)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)
    is_top = Column(Boolean, nullable=False, default=False)
    is_share = Column(Boolean, nullable=False, default=False, index=True)
    is_recycle = Column(Boolean, nullable=False, default=False, index=True)
    is_reviewed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    account = relationship("Account", back_populates="notes")
    tags = relationship("TagsToNote", back_populates="note")
    attachments = relationship("Attachment", back_populates="note", order_by="Attachment.id")
    references = relationship(
        "NoteReference", foreign_keys="NoteReference.from_note_id", back_populates="from_note"
    )
    referenced_by = relationship(
        "NoteReference", foreign_keys="NoteReference.to_note_id", back_populates="to_note"
    )

    def to_dict(self):
        """Convert to dictionary; relations are included only when loaded."""
        data = {
            "id": self.id,
            "accountId": self.account_id,
            "content": self.content,
            "type": self.type,
            "isArchived": self.is_archived,
            "isTop": self.is_top,
            "isShare": self.is_share,
            "isRecycle": self.is_recycle,
            "isReviewed": self.is_reviewed,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        unloaded = inspect(self).unloaded
        if "tags" not in unloaded:
            data["tags"] = [link.to_dict() for link in self.tags]
        if "attachments" not in unloaded:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        if "references" not in unloaded:
            data["references"] = [{"toNoteId": r.to_note_id} for r in self.references]
        if "referenced_by" not in unloaded:
            data["referencedBy"] = [{"fromNoteId": r.from_note_id} for r in self.referenced_by]
        return data


class Attachment(Base):
    """File attached to exactly one note."""
    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    path = Column(String(1024), nullable=False)
    size = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    note = relationship("Note", back_populates="attachments")

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "id": self.id,
            "noteId": self.note_id,
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "createdAt": isoformat(self.created_at),
        }


class NoteReference(Base):
    """Directed edge between two notes of the same account."""
    __tablename__ = "note_reference"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    to_note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("from_note_id", "to_note_id", name="uq_note_reference_edge"),
    )

    from_note = relationship("Note", foreign_keys=[from_note_id], back_populates="references")
    to_note = relationship("Note", foreign_keys=[to_note_id], back_populates="referenced_by")

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "id": self.id,
            "fromNoteId": self.from_note_id,
            "toNoteId": self.to_note_id,
            "createdAt": isoformat(self.created_at),
        }
