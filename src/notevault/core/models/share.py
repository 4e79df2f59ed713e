# Note sharing between users
import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note
    from .user import User


class SharePermission(str, Enum):
    """Permission carried by a share. Sharing is read-only."""

    READ = "READ"


class Share(BaseModel):
    """Grants one user read access to one note."""

    __tablename__ = "shares"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    permission: Mapped[SharePermission] = mapped_column(
        SAEnum(SharePermission, name="share_permission", native_enum=False, length=20),
        default=SharePermission.READ,
        nullable=False,
    )

    note: Mapped["Note"] = relationship("Note", back_populates="shares")
    recipient: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "recipient_id", name="uq_shares_note_recipient"),
        Index("idx_shares_note_id", "note_id"),
        Index("idx_shares_recipient_id", "recipient_id"),
    )

    def __repr__(self) -> str:
        return f"<Share(note_id={self.note_id}, recipient_id={self.recipient_id}, permission={self.permission})>"

    @property
    def can_write(self) -> bool:
        """Recipients never get write access."""
        return False
