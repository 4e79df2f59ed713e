# Note model for user content
import uuid
from enum import Enum
from typing import List, TYPE_CHECKING

from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.orm import attributes as orm_attributes

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .public_link import PublicLink
    from .share import Share
    from .tag import NoteTag, Tag
    from .user import User


class Visibility(str, Enum):
    """Declared access tier of a note."""

    PRIVATE = "PRIVATE"  # owner only
    SHARED = "SHARED"    # owner plus named recipients
    PUBLIC = "PUBLIC"    # anyone holding an active public link


class Note(BaseModel):
    """Markdown note owned by a single user."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    visibility: Mapped[Visibility] = mapped_column(
        SAEnum(Visibility, name="note_visibility", native_enum=False, length=20),
        nullable=False,
        default=Visibility.PRIVATE,
    )

    # owner reference, never reassigned after creation
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="notes",
        lazy="selectin",
        doc="User who created and owns this note",
    )

    note_tags: Mapped[List["NoteTag"]] = relationship(
        "NoteTag",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Tag associations for this note",
    )

    shares: Mapped[List["Share"]] = relationship(
        "Share",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Share records granting read access to other users",
    )

    public_links: Mapped[List["PublicLink"]] = relationship(
        "PublicLink",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Anonymous read links",
    )

    # Read side of the note_tags join; writes always go through NoteTag rows
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary="note_tags",
        viewonly=True,
        lazy="selectin",
        order_by="Tag.label",
        doc="Tags associated with this note",
    )

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_owner_updated", "owner_id", "updated_at"),
        Index("idx_notes_visibility", "visibility"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', visibility={self.visibility}, owner_id={self.owner_id})>"

    @property
    def tag_labels(self) -> List[str]:
        """Labels of the loaded tags."""
        return [tag.label for tag in self.tags]

    @property
    def preview(self) -> str:
        """Content preview for list views."""
        content = self.content or ""
        if len(content) <= 200:
            return content
        return content[:197] + "..."

    def is_owned_by(self, user_id: uuid.UUID | None) -> bool:
        return user_id is not None and self.owner_id == user_id


# Ensure relationship collections are initialized to avoid implicit lazy loads
@event.listens_for(Note, "init", propagate=True)
def _init_note_collections(target, args, kwargs):
    if "tags" not in kwargs:
        orm_attributes.set_committed_value(target, "tags", [])
