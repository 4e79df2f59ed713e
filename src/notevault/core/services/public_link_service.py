"""Public link service: anonymous read tokens for notes."""

import secrets
import string
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from ..logging import get_logger, mask_token
from ..models.base import as_utc, utcnow
from ..models.note import Note, Visibility
from ..models.public_link import PublicLink
from ..repositories.note_repository import NoteRepository
from ..repositories.public_link_repository import PublicLinkRepository
from ..repositories.share_repository import ShareRepository
from ..schemas.sharing import PublicLinkResponse, PublicNoteResponse
from ..visibility import recompute_visibility
from .access_service import AccessEvaluator
from .base import transactional
from .interfaces import IPublicLinkService

logger = get_logger("public_links")

ALPHABET = string.ascii_letters + string.digits


def generate_token(length: int = 32) -> str:
    """Random token over ``[A-Za-z0-9]`` from the OS CSPRNG."""
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


class PublicLinkService(IPublicLinkService):
    """Mints, resolves and revokes public links.

    Token uniqueness is enforced by the database: each candidate is inserted
    in a savepoint and a collision just draws another token.
    """

    def __init__(self, session: AsyncSession, token_generator: Optional[Callable[[int], str]] = None):
        self.session = session
        self.settings = get_settings()
        self.token_generator = token_generator or generate_token
        self.link_repo = PublicLinkRepository(session)
        self.share_repo = ShareRepository(session)
        self.note_repo = NoteRepository(session)
        self.access = AccessEvaluator(session)

    @transactional
    async def create_link(
        self, note_id: UUID, owner_id: UUID, expires_at: Optional[datetime] = None
    ) -> PublicLinkResponse:
        """Create a link for an owned note and mark the note PUBLIC.

        Raises:
            NotFoundError: note not owned by the caller.
            ValidationError: ``expires_at`` is not in the future.
            ConflictError: no unique token after the configured number of draws.
        """
        note = await self.access.get_owned_note(note_id, owner_id)

        if expires_at is not None:
            expires_at = as_utc(expires_at)
            if expires_at <= utcnow():
                raise ValidationError("Expiry must be in the future", field="expires_at", value=expires_at)

        link = await self._insert_with_unique_token(note.id, expires_at)
        await self.note_repo.set_visibility(note, Visibility.PUBLIC)

        logger.info(
            "Public link created",
            extra={"note_id": str(note.id), "link_id": str(link.id), "token": mask_token(link.token)},
        )
        return self._to_response(link)

    @transactional
    async def delete_link(self, link_id: UUID, owner_id: UUID) -> bool:
        """Delete a link and recompute the note's visibility in the same transaction."""
        link = await self.link_repo.get_for_note_owner(link_id, owner_id)
        if link is None:
            raise NotFoundError(
                "Public link not found",
                code=ErrorCode.PUBLIC_LINK_NOT_FOUND,
                details={"link_id": str(link_id)},
            )

        note = link.note
        await self.link_repo.delete_link(link.id)

        has_shares = await self.share_repo.count_for_note(note.id) > 0
        has_link = await self.link_repo.has_active_for_note(note.id, utcnow())
        visibility = recompute_visibility(has_shares, has_link)
        await self.note_repo.set_visibility(note, visibility)

        logger.info(
            "Public link deleted",
            extra={"note_id": str(note.id), "link_id": str(link_id), "visibility": visibility.value},
        )
        return True

    async def resolve(self, token: str) -> Optional[Note]:
        """Note behind an active link, or None. Unknown, malformed and expired look the same."""
        if not self._well_formed(token):
            return None
        link = await self.link_repo.get_active_by_token(token, utcnow())
        if link is None:
            logger.debug("Public token did not resolve", extra={"token": mask_token(token)})
            return None
        return link.note

    async def get_public_note(self, token: str) -> PublicNoteResponse:
        note = await self.resolve(token)
        if note is None:
            raise NotFoundError("Note not found")
        return PublicNoteResponse(
            title=note.title,
            content=note.content,
            tags=note.tag_labels,
            visibility=note.visibility,
            updated_at=note.updated_at,
        )

    async def list_note_links(self, note_id: UUID, owner_id: UUID) -> List[PublicLinkResponse]:
        note = await self.access.get_owned_note(note_id, owner_id)
        links = await self.link_repo.list_for_note(note.id)
        return [self._to_response(link) for link in links]

    async def _insert_with_unique_token(self, note_id: UUID, expires_at: Optional[datetime]) -> PublicLink:
        attempts = self.settings.public_link_max_attempts
        for attempt in range(1, attempts + 1):
            token = self.token_generator(self.settings.public_link_token_length)
            try:
                return await self.link_repo.add_link(note_id, token, expires_at)
            except ConflictError:
                logger.warning(
                    "Public token collision, drawing again",
                    extra={"note_id": str(note_id), "attempt": attempt},
                )

        raise ConflictError(
            "Could not generate a unique public token",
            code=ErrorCode.TOKEN_EXHAUSTED,
            details={"attempts": attempts},
        )

    def _well_formed(self, token: Optional[str]) -> bool:
        return (
            bool(token)
            and len(token) == self.settings.public_link_token_length
            and all(ch in ALPHABET for ch in token)
        )

    def _to_response(self, link: PublicLink) -> PublicLinkResponse:
        return PublicLinkResponse(
            id=link.id,
            note_id=link.note_id,
            token=link.token,
            expires_at=link.expires_at,
            is_active=link.is_active(),
            created_at=link.created_at,
        )
