"""Authentication service implementation."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import create_access_token, hash_password, verify_password
from ..exceptions import AuthenticationError, ConflictError, ErrorCode, NotFoundError
from ..logging import get_logger
from ..models.refresh_token import RefreshToken
from ..models.user import User
from ..repositories.refresh_token_repository import RefreshTokenRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from .base import transactional
from .interfaces import IAuthService

logger = get_logger("auth")


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.token_repo = RefreshTokenRepository(session)
        self.settings = get_settings()

    @transactional
    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""
        email = User.normalize_email(request.email)
        if await self.user_repo.is_email_taken(email):
            raise ConflictError("Email already registered", code=ErrorCode.EMAIL_TAKEN)

        user = await self.user_repo.create_user(
            {
                "email": email,
                "password_hash": hash_password(request.password),
                "display_name": request.display_name,
                "is_active": True,
            }
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return UserResponse.model_validate(user)

    @transactional
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return JWT tokens."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not user.can_login():
            raise AuthenticationError()

        if not verify_password(request.password, user.password_hash):
            logger.info("Failed login", extra={"user_id": str(user.id)})
            raise AuthenticationError()

        return await self._issue_tokens(user)

    @transactional
    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Rotate a refresh token: the old one is revoked, a new pair is issued."""
        token_obj = await self.token_repo.get_by_token(request.refresh_token)
        if token_obj is None or not token_obj.is_valid:
            raise AuthenticationError("Invalid refresh token", code=ErrorCode.INVALID_REFRESH_TOKEN)

        user = await self.user_repo.get_by_id(token_obj.user_id)
        if not user or not user.can_login():
            raise AuthenticationError("User account inactive", code=ErrorCode.INVALID_REFRESH_TOKEN)

        token_obj.revoke()
        return await self._issue_tokens(user)

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
        return UserResponse.model_validate(user)

    async def _issue_tokens(self, user: User) -> TokenResponse:
        access_token = create_access_token(data={"sub": str(user.id)})
        refresh = RefreshToken.create_for_user(user.id, self.settings.refresh_token_expire_days)
        await self.token_repo.add_token(refresh)

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh.token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
        )
