"""
User model for authentication.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .note import Note
    from .refresh_token import RefreshToken


class User(BaseModel):
    """User account, identified by email."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relations
    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    refresh_tokens: Mapped[List["RefreshToken"]] = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """Emails are compared case-insensitively; store them lowercased."""
        return email.strip().lower()

    @property
    def name(self) -> str:
        """Display name, falling back to the email."""
        return self.display_name if self.display_name else self.email

    def can_login(self) -> bool:
        return self.is_active


# lower(email) keeps uniqueness case-insensitive even for rows written outside the service
Index("uq_users_email_lower", func.lower(User.email), unique=True)
