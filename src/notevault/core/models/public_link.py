# Anonymous read links for notes
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, as_utc, utcnow
from .types import GUID

if TYPE_CHECKING:
    from .note import Note

TOKEN_LENGTH = 32


class PublicLink(BaseModel):
    """Opaque token granting anonymous read access to one note.

    A link without ``expires_at`` never expires. Expiry is checked lazily when
    the token is resolved; nothing sweeps expired rows.
    """

    __tablename__ = "public_links"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(String(TOKEN_LENGTH), nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    note: Mapped["Note"] = relationship("Note", back_populates="public_links")

    __table_args__ = (
        UniqueConstraint("token", name="uq_public_links_token"),
        Index("idx_public_links_note_id", "note_id"),
    )

    def __repr__(self) -> str:
        # never print the full token
        return f"<PublicLink(note_id={self.note_id}, token={self.token[:4]}..., expires_at={self.expires_at})>"

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Active iff there is no expiry or ``now`` is before it."""
        if self.expires_at is None:
            return True
        now = as_utc(now) if now is not None else utcnow()
        return now < as_utc(self.expires_at)

    @property
    def is_expired(self) -> bool:
        return not self.is_active()
