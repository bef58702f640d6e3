"""Database models."""
from .account import Account
from .note import Note, NoteType, Attachment, NoteReference
from .tag import Tag, TagsToNote
from .follow import Follow
from .config import Config

__all__ = [
    "Account",
    "Note",
    "NoteType",
    "Attachment",
    "NoteReference",
    "Tag",
    "TagsToNote",
    "Follow",
    "Config",
]
