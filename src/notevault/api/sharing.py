"""Share and public link removal endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.services import PublicLinkService, SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/shares", tags=["sharing"])


@router.delete("/public-links/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_public_link(
    link_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke a public link of one of my notes."""
    link_service = PublicLinkService(session)
    await link_service.delete_link(link_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{share_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_share(
    share_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke a share of one of my notes."""
    sharing_service = SharingService(session)
    await sharing_service.delete_share(share_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
