"""Note service business logic."""
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Dict, Any
from config.settings import settings
from exceptions import ResourceNotFound, InvalidOperation
from models.base import utcnow
from models.config import Config
from models.note import Note, NoteType
from models.tag import Tag
from repositories.note_repository import (
    NoteRepository,
    AttachmentRepository,
    NoteReferenceRepository,
    ANY_TYPE,
)
from repositories.tag_repository import TagRepository
from repositories.config_repository import ConfigRepository
from utils import minio_client
from utils.external_services import WebhookClient, AiQueryClient
from utils.hashtags import TagKey, TagTreeNode, sanitize_content, tag_tree_from_content
import logging

logger = logging.getLogger(__name__)


class NoteService:
    """Service for note operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.note_repo = NoteRepository(db)
        self.tag_repo = TagRepository(db)
        self.attachment_repo = AttachmentRepository(db)
        self.reference_repo = NoteReferenceRepository(db)
        self.config_repo = ConfigRepository(db)

    # ============ Queries ============

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
        use_ai_query: bool = False,
        order: str = "desc",
        page: int = 1,
        size: int = 30
    ) -> List[dict]:
        """List notes for an account."""
        search_text = search_text or ""
        if use_ai_query and search_text.strip():
            # AI results are not paginated; they all come back on page 1
            if page != 1:
                return []
            return await self._ai_query(account_id, search_text)

        global_config = await self.config_repo.get_global_config(account_id)
        notes = await self.note_repo.list_notes(
            account_id,
            tag_id=tag_id,
            note_type=note_type,
            is_archived=bool(is_archived),
            is_recycle=bool(is_recycle),
            search_text=search_text,
            without_tag=bool(without_tag),
            with_file=bool(with_file),
            with_link=bool(with_link),
            order_by_create_time=bool(global_config.get(Config.KEY_ORDER_BY_CREATE_TIME)),
            descending=order != "asc",
            page=page,
            size=size,
        )
        return [note.to_dict() for note in notes]

    async def _ai_query(self, account_id: int, query: str) -> List[dict]:
        if not AiQueryClient.is_enabled():
            raise InvalidOperation("AI query is not configured on this site")
        note_ids = await AiQueryClient.enhance_query(query, account_id)
        notes = {note.id: note for note in await self.note_repo.list_by_ids(note_ids, account_id)}
        return [notes[i].to_dict() for i in dict.fromkeys(note_ids) if i in notes]

    async def list_public_notes(self, page: int = 1, size: int = 30) -> List[dict]:
        """List shared notes of every account."""
        return [note.to_dict() for note in await self.note_repo.list_shared(page, size)]

    async def get_public_note(self, note_id: int) -> Optional[dict]:
        """Get a shared note, or None."""
        note = await self.note_repo.get_shared(note_id)
        return note.to_dict() if note else None

    async def get_note(self, note_id: int, account_id: int) -> Optional[dict]:
        """Get one of the account's notes, or None."""
        note = await self.note_repo.get_by_id(note_id, account_id, with_relations=True)
        return note.to_dict() if note else None

    async def list_notes_by_ids(self, note_ids: List[int], account_id: int) -> List[dict]:
        """List the account's notes among ``note_ids``."""
        return [note.to_dict() for note in await self.note_repo.list_by_ids(note_ids, account_id)]

    async def daily_review_list(self, account_id: int) -> List[dict]:
        """Notes created within the review window that are still unreviewed."""
        since = utcnow() - timedelta(hours=settings.DAILY_REVIEW_WINDOW_HOURS)
        notes = await self.note_repo.list_created_since(account_id, since)
        return [note.to_dict() for note in notes]

    async def review_note(self, note_id: int, account_id: int) -> dict:
        """Mark a note as reviewed."""
        note = await self.note_repo.get_by_id(note_id, account_id)
        if not note:
            raise ResourceNotFound("Note", note_id)
        await self.note_repo.update(note, is_reviewed=True)
        await self.db.commit()
        return note.to_dict()

    async def reference_list(self, note_id: int, account_id: int, direction: str = "references") -> List[dict]:
        """
        List notes linked to a note, newest link first.

        ``direction`` is ``references`` for outgoing edges or
        ``referencedBy`` for incoming ones.
        """
        neighbors = await self.reference_repo.list_neighbors(
            note_id, account_id, incoming=direction == "referencedBy"
        )
        items = []
        for note, created_at in neighbors:
            item = note.to_dict()
            item["referenceCreatedAt"] = created_at.isoformat()
            items.append(item)
        return items

    # ============ Writes ============

    async def upsert_note(
        self,
        account_id: int,
        note_id: Optional[int] = None,
        content: Optional[str] = None,
        note_type: int = NoteType.TEXT,
        attachments: Optional[List[Dict[str, Any]]] = None,
        is_archived: Optional[bool] = None,
        is_top: Optional[bool] = None,
        is_share: Optional[bool] = None,
        is_recycle: Optional[bool] = None,
        references: Optional[List[int]] = None
    ) -> dict:
        """
        Create a note, or update one when ``note_id`` is given.

        Hashtags in the content become the note's tags; nested hashtags such
        as ``#a/b`` create a tag ``b`` under ``a``. On update, ``None``
        leaves a field unchanged.

        Returns:
            ``{"note": ..., "attachmentsFailed": bool}``
        """
        if content is not None:
            content = sanitize_content(content)
        if references:
            references = list(dict.fromkeys(references))
            await self._check_references(references, account_id, note_id)

        if note_id:
            return await self._update_note(
                account_id, note_id, content, note_type, attachments or [],
                is_archived, is_top, is_share, is_recycle, references
            )
        return await self._create_note(
            account_id, content, note_type, attachments or [], is_top, is_share, references
        )

    async def _create_note(
        self,
        account_id: int,
        content: Optional[str],
        note_type: int,
        attachments: List[Dict[str, Any]],
        is_top: Optional[bool],
        is_share: Optional[bool],
        references: Optional[List[int]]
    ) -> dict:
        note = await self.note_repo.create(
            account_id,
            content or "",
            NoteType.TEXT if note_type == ANY_TYPE else note_type,
            is_share=bool(is_share),
            is_top=bool(is_top),
        )
        for tag in await self._resolve_tag_tree(tag_tree_from_content(content or ""), account_id):
            await self.tag_repo.link(note.id, tag.id)
        attachments_failed = await self._add_attachments(note.id, attachments)
        if references:
            await self.reference_repo.add_many(note.id, references)
        await self.db.commit()

        data = await self._load(note.id, account_id)
        logger.info(f"Account {account_id} created note {note.id}")
        await WebhookClient.send(data, "create", account_id)
        return {"note": data, "attachmentsFailed": attachments_failed}

    async def _update_note(
        self,
        account_id: int,
        note_id: int,
        content: Optional[str],
        note_type: int,
        attachments: List[Dict[str, Any]],
        is_archived: Optional[bool],
        is_top: Optional[bool],
        is_share: Optional[bool],
        is_recycle: Optional[bool],
        references: Optional[List[int]]
    ) -> dict:
        note = await self.note_repo.get_by_id(note_id, account_id)
        if not note:
            raise ResourceNotFound("Note", note_id)

        fields = {}
        if note_type != ANY_TYPE:
            fields["type"] = note_type
        if is_archived is not None:
            fields["is_archived"] = is_archived
        if is_top is not None:
            fields["is_top"] = is_top
        if is_share is not None:
            fields["is_share"] = is_share
        if is_recycle is not None:
            fields["is_recycle"] = is_recycle
        if content is not None:
            fields["content"] = content
        await self.note_repo.update(note, **fields)

        if content is not None:
            await self._sync_tags(note.id, content, account_id)
        if references is not None:
            await self._sync_references(note.id, references)
        attachments_failed = await self._add_attachments(note.id, attachments)
        await self.db.commit()

        return {"note": await self._load(note.id, account_id), "attachmentsFailed": attachments_failed}

    async def _resolve_tag_tree(
        self,
        nodes: List[TagTreeNode],
        account_id: int,
        parent: int = Tag.ROOT_PARENT
    ) -> List[Tag]:
        """Find or create every tag in the tree; returns them depth-first."""
        tags = []
        for node in nodes:
            tag = await self.tag_repo.find_or_create(node.name, parent, account_id)
            tags.append(tag)
            tags.extend(await self._resolve_tag_tree(node.children, account_id, tag.id))
        return tags

    async def _sync_tags(self, note_id: int, content: str, account_id: int) -> None:
        """Make the note's tag associations match the hashtags in ``content``."""
        old_tags = {TagKey(t.name, t.parent): t for t in await self.tag_repo.list_for_note(note_id)}
        new_tags = {
            TagKey(t.name, t.parent): t
            for t in await self._resolve_tag_tree(tag_tree_from_content(content), account_id)
        }

        await self.tag_repo.unlink(note_id, [old_tags[key].id for key in old_tags.keys() - new_tags.keys()])
        for key in new_tags.keys() - old_tags.keys():
            await self.tag_repo.link(note_id, new_tags[key].id)

        await self.tag_repo.delete_orphans([tag.id for tag in old_tags.values()], account_id)

    async def _sync_references(self, note_id: int, references: List[int]) -> None:
        """Make the note's outgoing edges match ``references``."""
        old_ids = await self.reference_repo.list_target_ids(note_id)
        to_add = [i for i in references if i not in old_ids]
        to_remove = [i for i in old_ids if i not in references]
        if to_add:
            await self.reference_repo.add_many(note_id, to_add)
        await self.reference_repo.remove(note_id, to_remove)

    async def _check_references(self, references: List[int], account_id: int, note_id: Optional[int]) -> None:
        """Every reference target must be one of the account's notes."""
        targets = [i for i in references if i != note_id]
        if targets and await self.note_repo.count_owned(targets, account_id) != len(targets):
            raise ResourceNotFound("Note", ",".join(str(i) for i in targets), "Referenced note not found")

    async def _add_attachments(self, note_id: int, attachments: List[Dict[str, Any]]) -> bool:
        """
        Attach files whose path is not already on the note.

        Insert failures are rolled back to a savepoint so the note itself is
        still saved.

        Returns:
            True when the attachments could not be saved
        """
        if not attachments:
            return False
        try:
            async with self.db.begin_nested():
                existing = set(await self.attachment_repo.list_paths(note_id))
                pending = {}
                for item in attachments:
                    if item["path"] not in existing:
                        pending.setdefault(item["path"], item)
                if pending:
                    await self.attachment_repo.add_many(note_id, list(pending.values()))
        except SQLAlchemyError as e:
            logger.error(f"Failed to save attachments for note {note_id}: {e}")
            return True
        return False

    async def _load(self, note_id: int, account_id: int) -> dict:
        note = await self.note_repo.get_by_id(note_id, account_id, with_relations=True)
        return note.to_dict()

    async def update_many(
        self,
        note_ids: List[int],
        account_id: int,
        note_type: int = ANY_TYPE,
        is_archived: Optional[bool] = None,
        is_recycle: Optional[bool] = None
    ) -> dict:
        """Apply the same field changes to several notes."""
        values = {}
        if note_type != ANY_TYPE:
            values["type"] = note_type
        if is_archived is not None:
            values["is_archived"] = is_archived
        if is_recycle is not None:
            values["is_recycle"] = is_recycle
        count = await self.note_repo.bulk_update(note_ids, account_id, values)
        await self.db.commit()
        return {"count": count}

    async def trash_many(self, note_ids: List[int], account_id: int) -> dict:
        """Move notes to the recycle bin."""
        count = await self.note_repo.bulk_update(note_ids, account_id, {"is_recycle": True})
        await self.db.commit()
        return {"count": count}

    async def delete_many(self, note_ids: List[int], account_id: int) -> dict:
        """
        Permanently delete notes.

        Removes tag associations, reference edges in both directions, tags
        left without notes, attachment files and rows, then the notes.
        A file that cannot be deleted from storage is logged and skipped.
        """
        notes = await self.note_repo.list_by_ids(note_ids, account_id)
        deleted = []
        for note in notes:
            deleted.append(note.to_dict())
            tag_ids = [link.tag_id for link in note.tags]
            await self.tag_repo.unlink_all(note.id)
            await self.reference_repo.remove_all_for_note(note.id)
            await self.tag_repo.delete_orphans(tag_ids, account_id)

            if note.attachments:
                for attachment in note.attachments:
                    try:
                        await minio_client.delete_file(attachment.path)
                    except Exception as e:
                        logger.warning(f"Failed to delete attachment file {attachment.path}: {e}")
                await self.attachment_repo.delete_by_ids([a.id for a in note.attachments])

        await self.note_repo.delete_many([note.id for note in notes], account_id)
        await self.db.commit()
        logger.info(f"Account {account_id} deleted {len(notes)} note(s)")

        for data in deleted:
            await WebhookClient.send(data, "delete", account_id)
        return {"ok": True}

    async def add_reference(self, from_note_id: int, to_note_id: int, account_id: int) -> dict:
        """Link two of the account's notes."""
        note_ids = list({from_note_id, to_note_id})
        if await self.note_repo.count_owned(note_ids, account_id) != len(note_ids):
            raise ResourceNotFound("Note", f"{from_note_id},{to_note_id}", "Note not found")

        if to_note_id in await self.reference_repo.list_target_ids(from_note_id):
            raise InvalidOperation("Reference already exists")
        reference = await self.reference_repo.create(from_note_id, to_note_id)
        await self.db.commit()
        return reference.to_dict()
