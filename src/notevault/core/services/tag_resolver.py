"""Find-or-create for case-insensitive tag labels."""

from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, ValidationError
from ..logging import get_logger
from ..models.tag import TAG_LABEL_MAX_LENGTH, Tag
from ..repositories.tag_repository import TagRepository

logger = get_logger("tags")


class TagResolver:
    """Resolves labels to Tag rows, creating missing ones.

    Two writers may race to create the same label. The loser's insert fails on
    the unique index inside its savepoint and the resolver reads the winner's row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repo = TagRepository(session)

    @staticmethod
    def validate_label(label: str) -> str:
        """Return the trimmed label or raise ValidationError."""
        if label is None:
            raise ValidationError("Tag label is required", field="tags")
        cleaned = Tag.clean_label(label)
        if not cleaned:
            raise ValidationError("Tag label cannot be blank", field="tags", value=label)
        if len(cleaned) > TAG_LABEL_MAX_LENGTH:
            raise ValidationError(
                f"Tag label must be at most {TAG_LABEL_MAX_LENGTH} characters",
                field="tags",
                value=cleaned,
            )
        return cleaned

    async def resolve(self, label: str) -> Tag:
        cleaned = self.validate_label(label)

        tag = await self.tag_repo.get_by_label(cleaned)
        if tag is not None:
            return tag

        try:
            tag = await self.tag_repo.create_tag(cleaned)
            logger.debug("Created tag", extra={"tag_id": str(tag.id)})
            return tag
        except ConflictError:
            # someone else created it between our lookup and insert
            tag = await self.tag_repo.get_by_label(cleaned)
            if tag is None:
                raise
            logger.info("Tag creation raced, reusing existing row", extra={"tag_id": str(tag.id)})
            return tag

    async def resolve_many(self, labels: Iterable[str]) -> List[Tag]:
        """Resolve labels in order, skipping case-insensitive duplicates."""
        cleaned = [self.validate_label(label) for label in labels]

        seen = set()
        tags: List[Tag] = []
        for label in cleaned:
            key = label.lower()
            if key in seen:
                continue
            seen.add(key)
            tags.append(await self.resolve(label))
        return tags
