"""Notes API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.note import Visibility
from ..core.schemas.notes import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from ..core.schemas.sharing import PublicLinkCreate, PublicLinkResponse, ShareCreate, ShareResponse
from ..core.services import NoteService, PublicLinkService, SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note."""
    note_service = NoteService(session)
    return await note_service.create_note(current_user_id, request)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    q: Optional[str] = Query(None, description="Case-insensitive title substring"),
    visibility: Optional[Visibility] = Query(None),
    tag: Optional[str] = Query(None, description="Exact tag label, any casing"),
    page: int = Query(1),
    per_page: Optional[int] = Query(None, description="Clamped to the configured maximum"),
    include_shared: bool = Query(True, description="Also list notes shared with me"),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List my notes, optionally with notes shared with me."""
    note_service = NoteService(session)
    if include_shared:
        return await note_service.list_for_user_including_shared(
            current_user_id, query=q, visibility=visibility, tag=tag, page=page, per_page=per_page
        )
    return await note_service.list_for_owner(
        current_user_id, query=q, visibility=visibility, tag=tag, page=page, per_page=per_page
    )


@router.get("/shared", response_model=NoteListResponse)
async def list_shared_notes(
    page: int = Query(1),
    per_page: Optional[int] = Query(None),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes other users shared with me."""
    note_service = NoteService(session)
    return await note_service.list_shared_with_user(current_user_id, page=page, per_page=per_page)


@router.get("/tags", response_model=List[str])
async def list_tags(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Tag labels used on my notes."""
    note_service = NoteService(session)
    return await note_service.get_available_tags(current_user_id)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    note_service = NoteService(session)
    return await note_service.get_note(note_id, current_user_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a note."""
    note_service = NoteService(session)
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note with its shares and public links."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/shares", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def share_note(
    note_id: UUID,
    request: ShareCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Share a note read-only with another user."""
    sharing_service = SharingService(session)
    return await sharing_service.share_with_user(note_id, current_user_id, request.email)


@router.get("/{note_id}/shares", response_model=List[ShareResponse])
async def list_note_shares(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List shares of one of my notes."""
    sharing_service = SharingService(session)
    return await sharing_service.list_note_shares(note_id, current_user_id)


@router.post(
    "/{note_id}/public-links",
    response_model=PublicLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_public_link(
    note_id: UUID,
    request: Optional[PublicLinkCreate] = None,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create an anonymous read link. The note becomes PUBLIC."""
    link_service = PublicLinkService(session)
    expires_at = request.expires_at if request else None
    return await link_service.create_link(note_id, current_user_id, expires_at)


@router.get("/{note_id}/public-links", response_model=List[PublicLinkResponse])
async def list_public_links(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List public links of one of my notes."""
    link_service = PublicLinkService(session)
    return await link_service.list_note_links(note_id, current_user_id)
