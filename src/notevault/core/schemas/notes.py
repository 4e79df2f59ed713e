"""
Note management schemas.

These schemas define the API contracts for note CRUD operations and listing.
Length rules live in the service layer so that every caller gets the same
domain ValidationError, not only HTTP clients.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.note import Visibility
from .common import PaginationResponse


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(description="Note title, 3-255 characters")
    content: str = Field(default="", description="Note content (supports Markdown)")
    visibility: Optional[Visibility] = Field(default=None, description="Defaults to PRIVATE")
    tags: List[str] = Field(default_factory=list, description="Tag labels")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Trip plan",
                "content": "## Day 1\n\nTrain to Lyon",
                "tags": ["travel", "2025"],
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema.

    ``tags=None`` keeps the current tags, any list (even empty) replaces them.
    """

    title: str = Field(description="Note title, 3-255 characters")
    content: str = Field(default="", description="Note content")
    visibility: Optional[Visibility] = Field(default=None, description="Keep current when omitted")
    tags: Optional[List[str]] = Field(default=None, description="Replacement tag labels")


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID
    title: str
    content: str
    visibility: Visibility
    tags: List[str]
    owner_id: uuid.UUID
    owner_email: str
    is_owner: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteListItem(BaseModel):
    """Simplified note schema for list views."""

    id: uuid.UUID
    title: str
    content_preview: str
    visibility: Visibility
    tags: List[str]
    owner_id: uuid.UUID
    is_owner: bool = True
    created_at: datetime
    updated_at: datetime


class NoteListResponse(PaginationResponse[NoteListItem]):
    """Paginated note list response."""

    pass
