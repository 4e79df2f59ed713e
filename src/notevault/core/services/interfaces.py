"""
Service interfaces for NoteVault application.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..models.note import Note, Visibility
from ..schemas.auth import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from ..schemas.sharing import PublicLinkResponse, PublicNoteResponse, ShareResponse


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""
        pass

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return JWT tokens."""
        pass

    @abstractmethod
    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Refresh JWT token."""
        pass

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        pass


class INoteService(ABC):
    """Note service for CRUD operations."""

    @abstractmethod
    async def create_note(self, owner_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note by ID."""
        pass

    @abstractmethod
    async def update_note(self, note_id: UUID, owner_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update existing note."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, owner_id: UUID) -> bool:
        """Delete note."""
        pass

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: UUID,
        query: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        tag: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> NoteListResponse:
        """List owned notes with filters and pagination."""
        pass

    @abstractmethod
    async def list_for_user_including_shared(
        self,
        user_id: UUID,
        query: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        tag: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> NoteListResponse:
        """List owned and shared notes with filters and pagination."""
        pass

    @abstractmethod
    async def get_available_tags(self, user_id: UUID) -> List[str]:
        """Get all user tags."""
        pass


class ISharingService(ABC):
    """Sharing service for note collaboration."""

    @abstractmethod
    async def share_with_user(self, note_id: UUID, owner_id: UUID, recipient_email: str) -> ShareResponse:
        """Share note read-only with another user."""
        pass

    @abstractmethod
    async def delete_share(self, share_id: UUID, owner_id: UUID) -> bool:
        """Remove a share."""
        pass

    @abstractmethod
    async def list_note_shares(self, note_id: UUID, owner_id: UUID) -> List[ShareResponse]:
        """List shares of an owned note."""
        pass


class IPublicLinkService(ABC):
    """Public link service for anonymous read access."""

    @abstractmethod
    async def create_link(
        self, note_id: UUID, owner_id: UUID, expires_at: Optional[datetime] = None
    ) -> PublicLinkResponse:
        """Create a public link for an owned note."""
        pass

    @abstractmethod
    async def delete_link(self, link_id: UUID, owner_id: UUID) -> bool:
        """Revoke a public link."""
        pass

    @abstractmethod
    async def resolve(self, token: str) -> Optional[Note]:
        """Note behind an active token, or None."""
        pass

    @abstractmethod
    async def get_public_note(self, token: str) -> PublicNoteResponse:
        """Anonymous view of the note behind a token."""
        pass

    @abstractmethod
    async def list_note_links(self, note_id: UUID, owner_id: UUID) -> List[PublicLinkResponse]:
        """List links of an owned note."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass
