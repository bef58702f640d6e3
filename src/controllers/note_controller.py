"""Notes API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from config.database import get_db
from schemas.schemas import (
    NoteListRequest,
    PageRequest,
    NoteIdRequest,
    NoteIdsRequest,
    UpsertNoteRequest,
    UpsertNoteResponse,
    BatchUpdateRequest,
    AddReferenceRequest,
    ReferenceListRequest,
)
from services.note_service import NoteService
from middlewares.auth import get_current_account
from models.account import Account

router = APIRouter(prefix="/v1/note", tags=["Note"])


@router.post("/list", response_model=List[dict])
async def list_notes(
    request: NoteListRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Query notes list."""
    service = NoteService(db)
    return await service.list_notes(
        current_account.id,
        tag_id=request.tagId,
        note_type=request.type,
        is_archived=request.isArchived,
        is_recycle=request.isRecycle,
        search_text=request.searchText,
        without_tag=request.withoutTag,
        with_file=request.withFile,
        with_link=request.withLink,
        use_ai_query=request.isUseAiQuery,
        order=request.orderBy,
        page=request.page,
        size=request.size,
    )


@router.post("/public-list", response_model=List[dict])
async def list_public_notes(
    request: PageRequest,
    db: AsyncSession = Depends(get_db)
):
    """Query shared notes list."""
    service = NoteService(db)
    return await service.list_public_notes(request.page, request.size)


@router.post("/list-by-ids", response_model=List[dict])
async def list_notes_by_ids(
    request: NoteIdsRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Query notes list by ids."""
    service = NoteService(db)
    return await service.list_notes_by_ids(request.ids, current_account.id)


@router.post("/public-detail", response_model=Optional[dict])
async def get_public_note(
    request: NoteIdRequest,
    db: AsyncSession = Depends(get_db)
):
    """Query shared note detail."""
    service = NoteService(db)
    return await service.get_public_note(request.id)


@router.post("/detail", response_model=Optional[dict])
async def get_note(
    request: NoteIdRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Query note detail."""
    service = NoteService(db)
    return await service.get_note(request.id, current_account.id)


@router.get("/daily-review-list", response_model=List[dict])
async def daily_review_list(
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Query daily review note list."""
    service = NoteService(db)
    return await service.daily_review_list(current_account.id)


@router.post("/review")
async def review_note(
    request: NoteIdRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Mark a note as reviewed."""
    service = NoteService(db)
    return await service.review_note(request.id, current_account.id)


@router.post("/upsert", response_model=UpsertNoteResponse)
async def upsert_note(
    request: UpsertNoteRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Update or create note."""
    service = NoteService(db)
    return await service.upsert_note(
        current_account.id,
        note_id=request.id,
        content=request.content,
        note_type=request.type,
        attachments=[a.model_dump() for a in request.attachments],
        is_archived=request.isArchived,
        is_top=request.isTop,
        is_share=request.isShare,
        is_recycle=request.isRecycle,
        references=request.references,
    )


@router.post("/batch-update")
async def batch_update_notes(
    request: BatchUpdateRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Batch update notes."""
    service = NoteService(db)
    return await service.update_many(
        request.ids,
        current_account.id,
        note_type=request.type,
        is_archived=request.isArchived,
        is_recycle=request.isRecycle,
    )


@router.post("/batch-trash")
async def batch_trash_notes(
    request: NoteIdsRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Batch move notes to the recycle bin."""
    service = NoteService(db)
    return await service.trash_many(request.ids, current_account.id)


@router.post("/batch-delete")
async def batch_delete_notes(
    request: NoteIdsRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Batch delete notes permanently."""
    service = NoteService(db)
    return await service.delete_many(request.ids, current_account.id)


@router.post("/add-reference")
async def add_reference(
    request: AddReferenceRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Add note reference."""
    service = NoteService(db)
    return await service.add_reference(request.fromNoteId, request.toNoteId, current_account.id)


@router.post("/reference-list", response_model=List[dict])
async def reference_list(
    request: ReferenceListRequest,
    current_account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    """Query note references."""
    service = NoteService(db)
    return await service.reference_list(request.noteId, current_account.id, request.type)
