"""Pydantic schemas for request/response validation."""
from pydantic import BaseModel, Field, constr
from typing import Optional, List, Any, Literal, Union
from config.settings import settings
from models.note import NoteType


# "-1" selects every type in filters and leaves the type unchanged in updates
NoteTypeOrAny = Union[NoteType, Literal[-1]]


# === Accounts ===
class LoginRequest(BaseModel):
    """Login request body."""
    name: constr(min_length=1, max_length=255)
    password: constr(min_length=1)


class RegisterRequest(BaseModel):
    """Register request body."""
    name: constr(min_length=1, max_length=255)
    password: constr(min_length=6)


class AuthResponse(BaseModel):
    """Auth response with token."""
    token: str
    user: dict


class SiteInfo(BaseModel):
    """Public description of this site's owner, read by remote sites."""
    id: int
    name: str
    image: str = ""


# === Config ===
class UpdateConfigRequest(BaseModel):
    """Set a per-account config value."""
    key: constr(min_length=1, max_length=255)
    value: Any = None


# === Follows ===
class FollowRequest(BaseModel):
    """Follow or unfollow a remote site."""
    siteUrl: str
    mySiteUrl: str


class FollowFromRequest(BaseModel):
    """A remote site announcing that it follows one of our accounts."""
    mySiteAccountId: int
    siteUrl: str
    siteName: str
    siteAvatar: str


class UnfollowFromRequest(BaseModel):
    """A remote site announcing that it no longer follows one of our accounts."""
    siteUrl: str
    mySiteAccountId: int


class FollowResponse(BaseModel):
    success: bool
    data: Any = None


# === Notes ===
class NoteListRequest(BaseModel):
    """Filters for an account's note list."""
    tagId: Optional[int] = None
    page: int = Field(1, ge=1)
    size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=1000)
    orderBy: Literal["asc", "desc"] = "desc"
    type: NoteTypeOrAny = -1
    isArchived: Optional[bool] = False
    isRecycle: Optional[bool] = False
    searchText: Optional[str] = ""
    withoutTag: Optional[bool] = False
    withFile: Optional[bool] = False
    withLink: Optional[bool] = False
    isUseAiQuery: Optional[bool] = False


class PageRequest(BaseModel):
    page: int = Field(1, ge=1)
    size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=1000)


class NoteIdRequest(BaseModel):
    id: int


class NoteIdsRequest(BaseModel):
    ids: List[int]


class AttachmentInput(BaseModel):
    """Attachment metadata for a file that is already stored."""
    name: str = ""
    path: constr(min_length=1)
    size: int = 0


class UpsertNoteRequest(BaseModel):
    """
    Create a note (no id) or update one.

    On update every nullable field follows "null leaves it unchanged";
    an explicit false or empty value is applied.
    """
    id: Optional[int] = None
    content: Optional[str] = None
    type: NoteTypeOrAny = NoteType.TEXT
    attachments: List[AttachmentInput] = []
    isArchived: Optional[bool] = None
    isTop: Optional[bool] = None
    isShare: Optional[bool] = None
    isRecycle: Optional[bool] = None
    references: Optional[List[int]] = None


class UpsertNoteResponse(BaseModel):
    """Upsert outcome; ``attachmentsFailed`` is set when the note was saved but its attachments were not."""
    note: dict
    attachmentsFailed: bool = False


class BatchUpdateRequest(BaseModel):
    """Bulk field update on the caller's notes."""
    ids: List[int]
    type: NoteTypeOrAny = -1
    isArchived: Optional[bool] = None
    isRecycle: Optional[bool] = None


class AddReferenceRequest(BaseModel):
    fromNoteId: int
    toNoteId: int


class ReferenceListRequest(BaseModel):
    noteId: int
    type: Literal["references", "referencedBy"] = "references"
