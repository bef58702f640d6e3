"""Tag repository for database operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, insert
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from models.tag import Tag, TagsToNote
import logging

logger = logging.getLogger(__name__)


class TagRepository:
    """Repository for Tag and TagsToNote models."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, name: str, parent: int, account_id: int) -> Optional[Tag]:
        """Find a tag by its position in the account's tag forest."""
        result = await self.db.execute(
            select(Tag).where(
                Tag.name == name,
                Tag.parent == parent,
                Tag.account_id == account_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_or_create(self, name: str, parent: int, account_id: int) -> Tag:
        """
        Return the tag at (name, parent) for the account, creating it if absent.

        A concurrent request may create the same tag between the lookup and
        the insert; the unique constraint rejects ours and the winner is read.
        """
        tag = await self.find(name, parent, account_id)
        if tag:
            return tag
        try:
            async with self.db.begin_nested():
                tag = Tag(name=name, parent=parent, account_id=account_id)
                self.db.add(tag)
        except IntegrityError:
            logger.info(f"Tag '{name}' (parent {parent}) created concurrently, reusing it")
            tag = await self.find(name, parent, account_id)
            if tag is None:
                raise
        return tag

    async def list_for_note(self, note_id: int) -> List[Tag]:
        """List tags associated with a note."""
        result = await self.db.execute(
            select(Tag).join(TagsToNote, TagsToNote.tag_id == Tag.id).where(TagsToNote.note_id == note_id)
        )
        return list(result.scalars().all())

    async def link(self, note_id: int, tag_id: int) -> bool:
        """
        Associate a tag with a note.

        Returns:
            False when the association already existed
        """
        try:
            async with self.db.begin_nested():
                await self.db.execute(insert(TagsToNote).values(note_id=note_id, tag_id=tag_id))
            return True
        except IntegrityError:
            return False

    async def unlink(self, note_id: int, tag_ids: List[int]) -> None:
        """Remove specific tag associations from a note."""
        if tag_ids:
            await self.db.execute(
                delete(TagsToNote)
                .where(TagsToNote.note_id == note_id, TagsToNote.tag_id.in_(tag_ids))
                .execution_options(synchronize_session=False)
            )

    async def unlink_all(self, note_id: int) -> None:
        """Remove every tag association from a note."""
        await self.db.execute(
            delete(TagsToNote)
            .where(TagsToNote.note_id == note_id)
            .execution_options(synchronize_session=False)
        )

    async def delete_orphans(self, tag_ids: List[int], account_id: int) -> List[int]:
        """
        Delete those of ``tag_ids`` that no note references any more.

        Returns:
            IDs of the deleted tags
        """
        if not tag_ids:
            return []
        result = await self.db.execute(
            select(TagsToNote.tag_id).where(TagsToNote.tag_id.in_(tag_ids)).distinct()
        )
        in_use = set(result.scalars().all())
        orphans = [tag_id for tag_id in dict.fromkeys(tag_ids) if tag_id not in in_use]
        if orphans:
            await self.db.execute(
                delete(Tag)
                .where(Tag.id.in_(orphans), Tag.account_id == account_id)
                .execution_options(synchronize_session=False)
            )
            logger.info(f"Removed {len(orphans)} unused tag(s) for account {account_id}")
        return orphans
