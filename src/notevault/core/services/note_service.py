"""Note service implementation."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import NotFoundError, ValidationError
from ..logging import get_logger
from ..models.base import utcnow
from ..models.note import Note, Visibility
from ..repositories.note_repository import NoteRepository
from ..repositories.tag_repository import TagRepository
from ..schemas.notes import NoteCreate, NoteListItem, NoteListResponse, NoteResponse, NoteUpdate
from .access_service import AccessEvaluator, Principal
from .base import transactional
from .interfaces import INoteService
from .tag_resolver import TagResolver

logger = get_logger("notes")

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 50_000


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.note_repo = NoteRepository(session)
        self.tag_repo = TagRepository(session)
        self.tag_resolver = TagResolver(session)
        self.access = AccessEvaluator(session)

    # validation

    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        cleaned = (title or "").strip()
        if len(cleaned) < TITLE_MIN_LENGTH or len(cleaned) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters",
                field="title",
                value=title,
            )
        return cleaned

    @staticmethod
    def validate_content(content: Optional[str]) -> str:
        content = content or ""
        if len(content) > CONTENT_MAX_LENGTH:
            raise ValidationError(
                f"Content must be at most {CONTENT_MAX_LENGTH} characters", field="content"
            )
        return content

    def clamp_pagination(self, page: int, per_page: Optional[int]) -> Tuple[int, int]:
        page = max(page or 1, 1)
        if per_page is None:
            per_page = self.settings.default_page_size
        per_page = min(max(per_page, 1), self.settings.max_page_size)
        return page, per_page

    # operations

    @transactional
    async def create_note(self, owner_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create a note and attach its tags.

        An explicit ``visibility`` is stored as given. Creating a link sets PUBLIC,
        a new share promotes PRIVATE, and removing a share or link recomputes it
        from the remaining records.
        """
        title = self.validate_title(request.title)
        content = self.validate_content(request.content)
        # fail on a bad label before anything is written
        for label in request.tags:
            TagResolver.validate_label(label)

        note = await self.note_repo.create_note(
            {
                "title": title,
                "content": content,
                "visibility": request.visibility or Visibility.PRIVATE,
                "owner_id": owner_id,
            }
        )

        if request.tags:
            tags = await self.tag_resolver.resolve_many(request.tags)
            await self.note_repo.replace_tags(note.id, [tag.id for tag in tags])

        note = await self.note_repo.get_by_id(note.id)
        logger.info(
            "Note created",
            extra={"note_id": str(note.id), "owner_id": str(owner_id), "tag_count": len(note.tags)},
        )
        return self._to_response(note, owner_id)

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get a note the user owns or that was shared with them."""
        note = await self.access.get_readable_note(note_id, Principal.for_user(user_id))
        return self._to_response(note, user_id)

    @transactional
    async def update_note(self, note_id: UUID, owner_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update an owned note. A tag list, even an empty one, replaces all tags.

        ``visibility`` follows the same rule as on create.
        """
        note = await self.access.get_owned_note(note_id, owner_id)

        title = self.validate_title(request.title)
        content = self.validate_content(request.content)
        if request.tags is not None:
            for label in request.tags:
                TagResolver.validate_label(label)

        changes = {"title": title, "content": content, "updated_at": utcnow()}
        if request.visibility is not None:
            changes["visibility"] = request.visibility
        await self.note_repo.update_note(note, changes)

        if request.tags is not None:
            tags = await self.tag_resolver.resolve_many(request.tags)
            await self.note_repo.replace_tags(note.id, [tag.id for tag in tags])

        note = await self.note_repo.get_by_id(note.id)
        logger.info("Note updated", extra={"note_id": str(note.id)})
        return self._to_response(note, owner_id)

    @transactional
    async def delete_note(self, note_id: UUID, owner_id: UUID) -> bool:
        """Delete an owned note with its tags, shares and public links."""
        deleted = await self.note_repo.delete_note(note_id, owner_id)
        if not deleted:
            raise NotFoundError("Note not found", details={"note_id": str(note_id)})
        logger.info("Note deleted", extra={"note_id": str(note_id)})
        return True

    async def list_for_owner(
        self,
        owner_id: UUID,
        query: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        tag: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> NoteListResponse:
        """Notes owned by the user, filtered and paginated."""
        return await self._list(owner_id, False, query, visibility, tag, page, per_page)

    async def list_for_user_including_shared(
        self,
        user_id: UUID,
        query: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        tag: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> NoteListResponse:
        """Owned notes plus notes shared with the user, filtered and paginated."""
        return await self._list(user_id, True, query, visibility, tag, page, per_page)

    async def list_shared_with_user(
        self, user_id: UUID, page: int = 1, per_page: Optional[int] = None
    ) -> NoteListResponse:
        page, per_page = self.clamp_pagination(page, per_page)
        notes, total = await self.note_repo.list_shared_with_user(user_id, page, per_page)
        items = [self._to_list_item(note, user_id) for note in notes]
        return NoteListResponse.create(items=items, total=total, page=page, per_page=per_page)

    async def get_available_tags(self, user_id: UUID) -> List[str]:
        """Labels used on the user's own notes, sorted."""
        return await self.tag_repo.get_owner_labels(user_id)

    # helpers

    async def _list(
        self,
        user_id: UUID,
        include_shared: bool,
        query: Optional[str],
        visibility: Optional[Visibility],
        tag: Optional[str],
        page: int,
        per_page: Optional[int],
    ) -> NoteListResponse:
        page, per_page = self.clamp_pagination(page, per_page)
        query = query.strip() if query else None
        tag = tag.strip() if tag else None

        notes, total = await self.note_repo.list_notes(
            user_id,
            include_shared=include_shared,
            query=query,
            visibility=visibility,
            tag=tag,
            page=page,
            per_page=per_page,
        )
        items = [self._to_list_item(note, user_id) for note in notes]
        return NoteListResponse.create(items=items, total=total, page=page, per_page=per_page)

    def _to_response(self, note: Note, user_id: UUID) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            title=note.title,
            content=note.content,
            visibility=note.visibility,
            tags=note.tag_labels,
            owner_id=note.owner_id,
            owner_email=note.owner.email if note.owner else "",
            is_owner=note.is_owned_by(user_id),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    def _to_list_item(self, note: Note, user_id: UUID) -> NoteListItem:
        return NoteListItem(
            id=note.id,
            title=note.title,
            content_preview=note.preview,
            visibility=note.visibility,
            tags=note.tag_labels,
            owner_id=note.owner_id,
            is_owner=note.is_owned_by(user_id),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
