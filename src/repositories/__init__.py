"""Data access layer repositories."""
from .account_repository import AccountRepository
from .note_repository import NoteRepository, AttachmentRepository, NoteReferenceRepository
from .tag_repository import TagRepository
from .follow_repository import FollowRepository
from .config_repository import ConfigRepository

__all__ = [
    "AccountRepository",
    "NoteRepository",
    "AttachmentRepository",
    "NoteReferenceRepository",
    "TagRepository",
    "FollowRepository",
    "ConfigRepository",
]
