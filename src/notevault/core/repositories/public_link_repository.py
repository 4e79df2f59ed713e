"""Public link repository for database operations."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..exceptions import ConflictError
from ..models.note import Note
from ..models.public_link import PublicLink


class PublicLinkRepository:
    """Repository for public link database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_link(
        self, note_id: UUID, token: str, expires_at: Optional[datetime] = None
    ) -> PublicLink:
        """Insert a link inside a savepoint.

        Raises:
            ConflictError: the token is already in use.
        """
        link = PublicLink(note_id=note_id, token=token, expires_at=expires_at)
        try:
            async with self.session.begin_nested():
                self.session.add(link)
        except IntegrityError as exc:
            raise ConflictError("Public link token already in use") from exc
        return link

    async def get_for_note_owner(self, link_id: UUID, owner_id: UUID) -> Optional[PublicLink]:
        """Get link only if its note belongs to the owner."""
        stmt = (
            select(PublicLink)
            .join(Note, Note.id == PublicLink.note_id)
            .options(selectinload(PublicLink.note))
            .where(and_(PublicLink.id == link_id, Note.owner_id == owner_id))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_by_token(self, token: str, now: datetime) -> Optional[PublicLink]:
        """Get an unexpired link by token, with its note and tags loaded."""
        stmt = (
            select(PublicLink)
            .options(selectinload(PublicLink.note).selectinload(Note.tags))
            .where(
                and_(
                    PublicLink.token == token,
                    or_(PublicLink.expires_at.is_(None), PublicLink.expires_at > now),
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def has_active_for_note(self, note_id: UUID, now: datetime) -> bool:
        stmt = select(PublicLink.id).where(
            and_(
                PublicLink.note_id == note_id,
                or_(PublicLink.expires_at.is_(None), PublicLink.expires_at > now),
            )
        )
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def delete_link(self, link_id: UUID) -> bool:
        result = await self.session.execute(delete(PublicLink).where(PublicLink.id == link_id))
        return result.rowcount > 0

    async def list_for_note(self, note_id: UUID) -> List[PublicLink]:
        stmt = (
            select(PublicLink)
            .where(PublicLink.note_id == note_id)
            .order_by(PublicLink.created_at, PublicLink.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
