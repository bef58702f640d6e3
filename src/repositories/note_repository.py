"""Note repository for database operations."""
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
from sqlalchemy.orm import selectinload
from typing import Optional, List, Dict, Any
from models.note import Note, Attachment, NoteReference
from models.tag import TagsToNote
from models.base import utcnow

ANY_TYPE = -1


def _with_relations(stmt):
    """Eager-load tags (with their tag), attachments and reference edges."""
    return stmt.options(
        selectinload(Note.tags).selectinload(TagsToNote.tag),
        selectinload(Note.attachments),
        selectinload(Note.references),
        selectinload(Note.referenced_by),
    )


class NoteRepository:
    """Repository for Note model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(
        self,
        note_id: int,
        account_id: int,
        with_relations: bool = False
    ) -> Optional[Note]:
        """Get note by ID for specific account."""
        stmt = select(Note).where(Note.id == note_id, Note.account_id == account_id)
        if with_relations:
            stmt = _with_relations(stmt).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_shared(self, note_id: int) -> Optional[Note]:
        """Get a shared note regardless of owner."""
        result = await self.db.execute(
            _with_relations(
                select(Note).where(Note.id == note_id, Note.is_share.is_(True))
            )
        )
        return result.scalar_one_or_none()

    async def list_notes(
        self,
        account_id: int,
        tag_id: Optional[int] = None,
        note_type: int = ANY_TYPE,
        is_archived: bool = False,
        is_recycle: bool = False,
        search_text: str = "",
        without_tag: bool = False,
        with_file: bool = False,
        with_link: bool = False,
        order_by_create_time: bool = False,
        descending: bool = True,
        page: int = 1,
        size: int = 30
    ) -> List[Note]:
        """
        List an account's notes.

        A non-empty ``search_text`` replaces the recycle, archive and type
        filters with a case-insensitive match on content or attachment
        path. ``with_link`` replaces that match, if any, with a check for
        an http(s) URL in the content. Pinned notes always sort first.
        """
        stmt = select(Note).where(Note.account_id == account_id)
        any_of = None

        if search_text:
            any_of = or_(
                Note.content.icontains(search_text, autoescape=True),
                Note.attachments.any(Attachment.path.icontains(search_text, autoescape=True)),
            )
        else:
            stmt = stmt.where(Note.is_recycle.is_(is_recycle))
            if not is_recycle:
                stmt = stmt.where(Note.is_archived.is_(is_archived))
            if note_type != ANY_TYPE:
                stmt = stmt.where(Note.type == note_type)

        if tag_id:
            stmt = stmt.where(
                Note.id.in_(select(TagsToNote.note_id).where(TagsToNote.tag_id == tag_id))
            )
        if with_file:
            stmt = stmt.where(Note.attachments.any())
        if without_tag:
            stmt = stmt.where(~Note.tags.any())
        if with_link:
            any_of = or_(
                Note.content.icontains("http://"),
                Note.content.icontains("https://"),
            )
        if any_of is not None:
            stmt = stmt.where(any_of)

        time_column = Note.created_at if order_by_create_time else Note.updated_at
        stmt = stmt.order_by(
            Note.is_top.desc(),
            time_column.desc() if descending else time_column.asc(),
            Note.id.desc() if descending else Note.id.asc(),
        )
        stmt = stmt.offset((page - 1) * size).limit(size)

        result = await self.db.execute(_with_relations(stmt))
        return list(result.scalars().all())

    async def list_shared(self, page: int = 1, size: int = 30) -> List[Note]:
        """List notes marked as shared, across all accounts."""
        stmt = (
            select(Note)
            .where(Note.is_share.is_(True))
            .order_by(Note.is_top.desc(), Note.updated_at.desc(), Note.id.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        result = await self.db.execute(_with_relations(stmt))
        return list(result.scalars().all())

    async def list_by_ids(self, note_ids: List[int], account_id: int) -> List[Note]:
        """List an account's notes by ID."""
        if not note_ids:
            return []
        stmt = select(Note).where(Note.id.in_(note_ids), Note.account_id == account_id)
        result = await self.db.execute(
            _with_relations(stmt).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_created_since(self, account_id: int, since: datetime) -> List[Note]:
        """List unreviewed, unarchived notes created after ``since``."""
        stmt = (
            select(Note)
            .options(selectinload(Note.attachments))
            .where(
                Note.account_id == account_id,
                Note.created_at > since,
                Note.is_reviewed.is_(False),
                Note.is_archived.is_(False),
            )
            .order_by(Note.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_owned(self, note_ids: List[int], account_id: int) -> int:
        """Count how many of ``note_ids`` exist and belong to the account."""
        result = await self.db.execute(
            select(Note.id).where(Note.id.in_(note_ids), Note.account_id == account_id)
        )
        return len(set(result.scalars().all()))

    async def create(
        self,
        account_id: int,
        content: str,
        note_type: int,
        is_share: bool = False,
        is_top: bool = False
    ) -> Note:
        """Create a new note."""
        note = Note(
            account_id=account_id,
            content=content,
            type=note_type,
            is_share=is_share,
            is_top=is_top,
        )
        self.db.add(note)
        await self.db.flush()
        return note

    async def update(self, note: Note, **fields) -> Note:
        """Set the given fields on a note."""
        for key, value in fields.items():
            setattr(note, key, value)
        note.updated_at = utcnow()
        await self.db.flush()
        return note

    async def bulk_update(self, note_ids: List[int], account_id: int, values: Dict[str, Any]) -> int:
        """Update fields on an account's notes; returns the affected row count."""
        if not note_ids or not values:
            return 0
        result = await self.db.execute(
            update(Note)
            .where(Note.id.in_(note_ids), Note.account_id == account_id)
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_many(self, note_ids: List[int], account_id: int) -> int:
        """Delete an account's notes; returns the affected row count."""
        if not note_ids:
            return 0
        result = await self.db.execute(
            delete(Note)
            .where(Note.id.in_(note_ids), Note.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class AttachmentRepository:
    """Repository for Attachment model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_paths(self, note_id: int) -> List[str]:
        """List attachment paths already on a note."""
        result = await self.db.execute(select(Attachment.path).where(Attachment.note_id == note_id))
        return list(result.scalars().all())

    async def add_many(self, note_id: int, attachments: List[Dict[str, Any]]) -> List[Attachment]:
        """Attach files to a note."""
        rows = [
            Attachment(
                note_id=note_id,
                name=item.get("name", ""),
                path=item["path"],
                size=int(item.get("size") or 0),
            )
            for item in attachments
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def is_shared_path(self, path: str) -> bool:
        """Whether the file at ``path`` is attached to any shared note."""
        result = await self.db.execute(
            select(Attachment.id)
            .join(Note, Note.id == Attachment.note_id)
            .where(Attachment.path == path, Note.is_share.is_(True))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def delete_by_ids(self, attachment_ids: List[int]) -> None:
        """Delete attachment rows."""
        if attachment_ids:
            await self.db.execute(
                delete(Attachment)
                .where(Attachment.id.in_(attachment_ids))
                .execution_options(synchronize_session=False)
            )


class NoteReferenceRepository:
    """Repository for NoteReference model."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_target_ids(self, from_note_id: int) -> List[int]:
        """List ids a note points to."""
        result = await self.db.execute(
            select(NoteReference.to_note_id).where(NoteReference.from_note_id == from_note_id)
        )
        return list(result.scalars().all())

    async def create(self, from_note_id: int, to_note_id: int) -> NoteReference:
        """Create a single edge."""
        reference = NoteReference(from_note_id=from_note_id, to_note_id=to_note_id)
        self.db.add(reference)
        await self.db.flush()
        return reference

    async def add_many(self, from_note_id: int, to_note_ids: List[int]) -> None:
        """Create edges from one note to many."""
        self.db.add_all([
            NoteReference(from_note_id=from_note_id, to_note_id=to_id)
            for to_id in to_note_ids
        ])
        await self.db.flush()

    async def remove(self, from_note_id: int, to_note_ids: List[int]) -> None:
        """Delete specific outgoing edges."""
        if to_note_ids:
            await self.db.execute(
                delete(NoteReference)
                .where(
                    NoteReference.from_note_id == from_note_id,
                    NoteReference.to_note_id.in_(to_note_ids),
                )
                .execution_options(synchronize_session=False)
            )

    async def remove_all_for_note(self, note_id: int) -> None:
        """Delete every edge touching a note, in either direction."""
        await self.db.execute(
            delete(NoteReference)
            .where(or_(NoteReference.from_note_id == note_id, NoteReference.to_note_id == note_id))
            .execution_options(synchronize_session=False)
        )

    async def list_neighbors(self, note_id: int, account_id: int, incoming: bool = False) -> List[tuple]:
        """
        List notes on the other end of a note's edges, newest edge first.

        Returns:
            ``(note, edge_created_at)`` pairs
        """
        if incoming:
            edge_column, other_column = NoteReference.to_note_id, NoteReference.from_note_id
        else:
            edge_column, other_column = NoteReference.from_note_id, NoteReference.to_note_id

        stmt = (
            select(Note, NoteReference.created_at)
            .join(NoteReference, Note.id == other_column)
            .where(edge_column == note_id, Note.account_id == account_id)
            .order_by(NoteReference.created_at.desc(), NoteReference.id.desc())
        )
        result = await self.db.execute(_with_relations(stmt))
        return [(note, created_at) for note, created_at in result.all()]
