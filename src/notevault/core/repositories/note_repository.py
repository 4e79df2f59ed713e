"""Note repository for database operations."""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.note import Note, Visibility
from ..models.public_link import PublicLink
from ..models.share import Share
from ..models.tag import NoteTag, Tag


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select_notes(self):
        # populate_existing refreshes identity-map copies so tags are never stale
        return (
            select(Note)
            .options(selectinload(Note.tags), selectinload(Note.owner))
            .execution_options(populate_existing=True)
        )

    async def create_note(self, note_data: dict) -> Note:
        """Create new note (flushed, not committed)."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        stmt = self._select_notes().where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id_and_owner(self, note_id: UUID, owner_id: UUID) -> Optional[Note]:
        """Get note only if owned by user."""
        stmt = self._select_notes().where(and_(Note.id == note_id, Note.owner_id == owner_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_readable_by_user(self, note_id: UUID, user_id: UUID) -> Optional[Note]:
        """Get note if the user owns it or it is shared with them."""
        shared = exists().where(and_(Share.note_id == Note.id, Share.recipient_id == user_id))
        stmt = self._select_notes().where(
            and_(Note.id == note_id, or_(Note.owner_id == user_id, shared))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        """Apply field changes and flush."""
        for field, value in update_data.items():
            setattr(note, field, value)
        await self.session.flush()
        return note

    async def set_visibility(self, note: Note, visibility: Visibility) -> Note:
        if note.visibility != visibility:
            note.visibility = visibility
            await self.session.flush()
        return note

    async def replace_tags(self, note_id: UUID, tag_ids: Sequence[UUID]) -> None:
        """Replace the note's tag set with exactly ``tag_ids``."""
        await self.session.execute(delete(NoteTag).where(NoteTag.note_id == note_id))
        for tag_id in dict.fromkeys(tag_ids):
            self.session.add(NoteTag(note_id=note_id, tag_id=tag_id))
        await self.session.flush()

    async def delete_note(self, note_id: UUID, owner_id: UUID) -> bool:
        """Delete an owned note together with its tag links, shares and public links."""
        owned = select(Note.id).where(and_(Note.id == note_id, Note.owner_id == owner_id))

        await self.session.execute(delete(NoteTag).where(NoteTag.note_id.in_(owned)))
        await self.session.execute(delete(Share).where(Share.note_id.in_(owned)))
        await self.session.execute(delete(PublicLink).where(PublicLink.note_id.in_(owned)))

        result = await self.session.execute(
            delete(Note).where(and_(Note.id == note_id, Note.owner_id == owner_id))
        )
        return result.rowcount > 0

    async def list_notes(
        self,
        user_id: UUID,
        include_shared: bool = False,
        query: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        tag: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[Note], int]:
        """List notes visible to the user, newest update first.

        Returns the requested page and the total match count.
        """
        if include_shared:
            shared = exists().where(and_(Share.note_id == Note.id, Share.recipient_id == user_id))
            conditions = [or_(Note.owner_id == user_id, shared)]
        else:
            conditions = [Note.owner_id == user_id]

        if query:
            conditions.append(Note.title.icontains(query, autoescape=True))

        if visibility is not None:
            conditions.append(Note.visibility == visibility)

        if tag:
            tagged = (
                exists()
                .where(NoteTag.note_id == Note.id)
                .where(NoteTag.tag_id == Tag.id)
                .where(func.lower(Tag.label) == func.lower(tag))
            )
            conditions.append(tagged)

        where_clause = and_(*conditions)

        count_stmt = select(func.count(Note.id)).where(where_clause)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            self._select_notes()
            .where(where_clause)
            .order_by(Note.updated_at.desc(), Note.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_shared_with_user(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Note], int]:
        """Notes other users shared with this user."""
        where_clause = exists().where(and_(Share.note_id == Note.id, Share.recipient_id == user_id))

        count_stmt = select(func.count(Note.id)).where(where_clause)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            self._select_notes()
            .where(where_clause)
            .order_by(Note.updated_at.desc(), Note.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
