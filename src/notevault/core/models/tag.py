# Tag models for organizing notes
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note

TAG_LABEL_MAX_LENGTH = 50


class Tag(BaseModel):
    """Free-text label shared by all users.

    Labels are unique case-insensitively; the first spelling wins and is kept.
    Tags are only ever referenced by NoteTag rows, they own nothing.
    """

    __tablename__ = "tags"

    label: Mapped[str] = mapped_column(String(TAG_LABEL_MAX_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"<Tag(label='{self.label}')>"

    @classmethod
    def clean_label(cls, label: str) -> str:
        """Trim surrounding whitespace, keep the casing."""
        return label.strip()


Index("uq_tags_label_lower", func.lower(Tag.label), unique=True)


class NoteTag(BaseModel):
    """Links a note to a tag. Identity is the (note_id, tag_id) pair."""

    __tablename__ = "note_tags"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("tags.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="note_tags")
    tag: Mapped["Tag"] = relationship("Tag", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "tag_id", name="uq_note_tags_note_tag"),
        Index("idx_note_tags_note_id", "note_id"),
        Index("idx_note_tags_tag_id", "tag_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, tag_id={self.tag_id})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoteTag):
            return NotImplemented
        return (self.note_id, self.tag_id) == (other.note_id, other.tag_id)

    def __hash__(self) -> int:
        return hash((self.note_id, self.tag_id))
