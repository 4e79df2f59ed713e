"""
Pydantic schemas for validating and documenting API requests and responses.

This package exposes the Pydantic models used across the application to
define input/output contracts for authentication, notes, sharing, public
links and common responses (pagination, errors, health).
"""

from .auth import LoginRequest, RefreshTokenRequest, RegisterRequest, TokenResponse, UserResponse
from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .notes import NoteCreate, NoteListItem, NoteListResponse, NoteResponse, NoteUpdate
from .sharing import (
    PublicLinkCreate,
    PublicLinkResponse,
    PublicNoteResponse,
    ShareCreate,
    ShareResponse,
)

__all__ = [
    # Auth schemas
    "LoginRequest",
    "RegisterRequest",
    "RefreshTokenRequest",
    "TokenResponse",
    "UserResponse",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListItem",
    "NoteListResponse",
    # Sharing schemas
    "ShareCreate",
    "ShareResponse",
    "PublicLinkCreate",
    "PublicLinkResponse",
    "PublicNoteResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
