"""Anonymous access through public links."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.sharing import PublicNoteResponse
from ..core.services import PublicLinkService
from ..database import get_db_session

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/{token}", response_model=PublicNoteResponse)
async def get_public_note(token: str, session: AsyncSession = Depends(get_db_session)):
    """Read a note through its public token. Unknown and expired tokens both give 404."""
    link_service = PublicLinkService(session)
    return await link_service.get_public_note(token)
