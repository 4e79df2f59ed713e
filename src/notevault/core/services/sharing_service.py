"""Sharing service implementation."""

from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import (
    ConflictError,
    ErrorCode,
    InvalidOperationError,
    NotFoundError,
)
from ..logging import get_logger
from ..models.base import utcnow
from ..models.note import Visibility
from ..models.share import Share
from ..repositories.note_repository import NoteRepository
from ..repositories.public_link_repository import PublicLinkRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..schemas.sharing import ShareResponse
from ..visibility import promote_for_new_share, recompute_visibility
from .access_service import AccessEvaluator
from .base import transactional
from .interfaces import ISharingService

logger = get_logger("sharing")


class SharingService(ISharingService):
    """Read-only sharing of notes between users."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)
        self.note_repo = NoteRepository(session)
        self.link_repo = PublicLinkRepository(session)
        self.access = AccessEvaluator(session)

    @transactional
    async def share_with_user(self, note_id: UUID, owner_id: UUID, recipient_email: str) -> ShareResponse:
        """Grant read access on an owned note to the user with this email.

        Raises:
            NotFoundError: note not owned by the caller, or no such recipient.
            InvalidOperationError: the recipient is the owner.
            ConflictError: the note is already shared with the recipient.
        """
        note = await self.access.get_owned_note(note_id, owner_id)

        recipient = await self.user_repo.get_by_email(recipient_email)
        if recipient is None:
            raise NotFoundError(
                "User not found", code=ErrorCode.USER_NOT_FOUND, details={"email": recipient_email}
            )

        if recipient.id == owner_id:
            raise InvalidOperationError("Cannot share note with yourself", code=ErrorCode.SELF_SHARE)

        if await self.share_repo.exists_for_pair(note.id, recipient.id):
            raise ConflictError(
                "Note already shared with this user",
                code=ErrorCode.SHARE_EXISTS,
                details={"note_id": str(note.id)},
            )

        try:
            share = await self.share_repo.create_share(note.id, recipient.id)
        except IntegrityError as exc:
            # a concurrent request created the same pair after our check
            raise ConflictError(
                "Note already shared with this user",
                code=ErrorCode.SHARE_EXISTS,
                details={"note_id": str(note.id)},
            ) from exc

        await self.note_repo.set_visibility(note, promote_for_new_share(note.visibility))

        logger.info(
            "Note shared",
            extra={"note_id": str(note.id), "share_id": str(share.id), "visibility": note.visibility.value},
        )
        return self._to_response(share, recipient.email)

    @transactional
    async def delete_share(self, share_id: UUID, owner_id: UUID) -> bool:
        """Remove a share and recompute the note's visibility in the same transaction."""
        share = await self.share_repo.get_for_note_owner(share_id, owner_id)
        if share is None:
            raise NotFoundError(
                "Share not found", code=ErrorCode.SHARE_NOT_FOUND, details={"share_id": str(share_id)}
            )

        note = share.note
        await self.share_repo.delete_share(share.id)

        remaining = await self.share_repo.count_for_note(note.id)
        if self.settings.legacy_share_deletion_visibility:
            # old rule: losing the last share always meant PRIVATE, active links ignored
            visibility = Visibility.PRIVATE if remaining == 0 else note.visibility
        else:
            has_link = await self.link_repo.has_active_for_note(note.id, utcnow())
            visibility = recompute_visibility(remaining > 0, has_link)

        await self.note_repo.set_visibility(note, visibility)

        logger.info(
            "Share deleted",
            extra={"note_id": str(note.id), "share_id": str(share_id), "visibility": visibility.value},
        )
        return True

    async def list_note_shares(self, note_id: UUID, owner_id: UUID) -> List[ShareResponse]:
        note = await self.access.get_owned_note(note_id, owner_id)
        shares = await self.share_repo.list_for_note(note.id)
        return [self._to_response(share, share.recipient.email) for share in shares]

    def _to_response(self, share: Share, recipient_email: str) -> ShareResponse:
        return ShareResponse(
            id=share.id,
            note_id=share.note_id,
            recipient_id=share.recipient_id,
            recipient_email=recipient_email,
            permission=share.permission,
            created_at=share.created_at,
        )
