"""Read and write rights on notes."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.base import utcnow
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..repositories.public_link_repository import PublicLinkRepository
from ..repositories.share_repository import ShareRepository


@dataclass(frozen=True)
class Principal:
    """Whoever is asking: a signed-in user or an anonymous link holder."""

    user_id: Optional[UUID] = None
    public_token: Optional[str] = None

    @classmethod
    def for_user(cls, user_id: UUID) -> "Principal":
        return cls(user_id=user_id)

    @classmethod
    def anonymous(cls, public_token: Optional[str] = None) -> "Principal":
        return cls(public_token=public_token)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


class AccessEvaluator:
    """Decides who may read or write a note.

    Read: the owner, a user holding a share on the note, or an anonymous caller
    whose token resolves to an active link of that note. Write: the owner only.
    Missing rights are reported exactly like a missing note.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)
        self.link_repo = PublicLinkRepository(session)

    async def can_read(self, note: Note, principal: Principal) -> bool:
        if principal.user_id is not None:
            if note.is_owned_by(principal.user_id):
                return True
            return await self.share_repo.exists_for_pair(note.id, principal.user_id)

        if principal.public_token:
            link = await self.link_repo.get_active_by_token(principal.public_token, utcnow())
            return link is not None and link.note_id == note.id

        return False

    def can_write(self, note: Note, principal: Principal) -> bool:
        return note.is_owned_by(principal.user_id)

    async def get_readable_note(self, note_id: UUID, principal: Principal) -> Note:
        """Fetch a note the principal may read, scoped in a single query.

        Raises:
            NotFoundError: the note does not exist or is not readable.
        """
        note: Optional[Note] = None
        if principal.user_id is not None:
            note = await self.note_repo.get_readable_by_user(note_id, principal.user_id)
        elif principal.public_token:
            link = await self.link_repo.get_active_by_token(principal.public_token, utcnow())
            if link is not None and link.note_id == note_id:
                note = link.note

        if note is None:
            raise NotFoundError("Note not found", details={"note_id": str(note_id)})
        return note

    async def get_owned_note(self, note_id: UUID, owner_id: UUID) -> Note:
        """Fetch a note for mutation; only its owner gets it back."""
        note = await self.note_repo.get_by_id_and_owner(note_id, owner_id)
        if note is None:
            raise NotFoundError("Note not found", details={"note_id": str(note_id)})
        return note
