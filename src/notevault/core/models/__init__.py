"""
Database models for NoteVault.

SQLAlchemy ORM models for the collaborative note backend, designed for async
sessions.

Models included:
    - User: account identified by a case-insensitive email
    - Note: markdown note with an owner and a visibility tier
    - Tag / NoteTag: case-insensitive labels and their note associations
    - Share: read-only grant of a note to another user
    - PublicLink: anonymous read token for a note
    - RefreshToken: JWT refresh token management
"""

from .base import BaseModel
from .note import Note, Visibility
from .public_link import PublicLink
from .refresh_token import RefreshToken
from .share import Share, SharePermission
from .tag import NoteTag, Tag
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Visibility",
    "Tag",
    "NoteTag",
    "Share",
    "SharePermission",
    "PublicLink",
    "RefreshToken",
]
