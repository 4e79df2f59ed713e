"""Share repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.note import Note
from ..models.share import Share, SharePermission


class ShareRepository:
    """Repository for share database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_share(
        self, note_id: UUID, recipient_id: UUID, permission: SharePermission = SharePermission.READ
    ) -> Share:
        share = Share(note_id=note_id, recipient_id=recipient_id, permission=permission)
        self.session.add(share)
        await self.session.flush()
        return share

    async def get_for_note_owner(self, share_id: UUID, owner_id: UUID) -> Optional[Share]:
        """Get share only if its note belongs to the owner."""
        stmt = (
            select(Share)
            .join(Note, Note.id == Share.note_id)
            .options(selectinload(Share.note), selectinload(Share.recipient))
            .where(and_(Share.id == share_id, Note.owner_id == owner_id))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_for_pair(self, note_id: UUID, recipient_id: UUID) -> bool:
        stmt = select(Share.id).where(
            and_(Share.note_id == note_id, Share.recipient_id == recipient_id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def count_for_note(self, note_id: UUID) -> int:
        stmt = select(func.count(Share.id)).where(Share.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def delete_share(self, share_id: UUID) -> bool:
        result = await self.session.execute(delete(Share).where(Share.id == share_id))
        return result.rowcount > 0

    async def list_for_note(self, note_id: UUID) -> List[Share]:
        """Shares of a note, oldest first."""
        stmt = (
            select(Share)
            .options(selectinload(Share.recipient))
            .where(Share.note_id == note_id)
            .order_by(Share.created_at, Share.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
