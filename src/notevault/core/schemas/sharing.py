"""
Sharing and public link schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.note import Visibility
from ..models.share import SharePermission


class ShareCreate(BaseModel):
    """Share a note read-only with another user."""

    email: EmailStr = Field(description="Recipient email")

    model_config = ConfigDict(json_schema_extra={"example": {"email": "bob@example.com"}})


class ShareResponse(BaseModel):
    """Share record."""

    id: uuid.UUID
    note_id: uuid.UUID
    recipient_id: uuid.UUID
    recipient_email: str
    permission: SharePermission
    created_at: datetime


class PublicLinkCreate(BaseModel):
    """Public link request. No expiry means the link never expires."""

    expires_at: Optional[datetime] = Field(default=None, description="Must be in the future")


class PublicLinkResponse(BaseModel):
    """Public link record. The token is the only secret in it."""

    id: uuid.UUID
    note_id: uuid.UUID
    token: str
    expires_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class PublicNoteResponse(BaseModel):
    """Note as seen by an anonymous link holder."""

    title: str
    content: str
    tags: List[str]
    visibility: Visibility
    updated_at: datetime
