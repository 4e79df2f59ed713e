"""Tag repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, ErrorCode
from ..models.note import Note
from ..models.tag import NoteTag, Tag


class TagRepository:
    """Repository for tag database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_label(self, label: str) -> Optional[Tag]:
        """Case-insensitive lookup."""
        stmt = select(Tag).where(func.lower(Tag.label) == func.lower(label))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_tag(self, label: str) -> Tag:
        """Insert a tag inside a savepoint.

        Raises:
            ConflictError: another transaction already holds this label.
        """
        tag = Tag(label=label)
        try:
            async with self.session.begin_nested():
                self.session.add(tag)
        except IntegrityError as exc:
            raise ConflictError(
                f"Tag '{label}' already exists", code=ErrorCode.TAG_EXISTS, details={"label": label}
            ) from exc
        return tag

    async def get_owner_labels(self, owner_id: UUID) -> List[str]:
        """All distinct labels used on notes owned by the user."""
        stmt = (
            select(Tag.label)
            .join(NoteTag, NoteTag.tag_id == Tag.id)
            .join(Note, Note.id == NoteTag.note_id)
            .where(Note.owner_id == owner_id)
            .distinct()
            .order_by(Tag.label)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())
