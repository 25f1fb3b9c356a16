"""
Authentication service layer
Handles registration, login and credential verification
"""

from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from app.models import User
from app.core.security import SecurityUtils
from app.core.config import settings
from app.core.exceptions import DuplicateResourceException, UnauthorizedException
from app.schemas.user import UserPublic
from app.services.user_service import UserService
from app.services.wishlist_store import store_operation
from .schemas import AuthResponse, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserService(db)

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new user

        Raises:
            DuplicateResourceException: If username or email is taken
        """
        if await self.users.get_by_email(request.email):
            raise DuplicateResourceException("User", "email", request.email)
        if await self.users.get_by_username(request.username):
            raise DuplicateResourceException("User", "username", request.username)

        user = User(
            username=request.username,
            email=request.email,
            password_hash=SecurityUtils.hash_password(request.password),
        )
        self.db.add(user)
        await self._commit()

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    async def login(self, request: LoginRequest) -> User:
        """
        Check credentials

        Raises:
            UnauthorizedException: Same message whether the email or the password is wrong
        """
        user = await self.users.get_by_email(request.email)
        if not user or not SecurityUtils.verify_password(request.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password", error_code="INVALID_CREDENTIALS")
        return user

    async def verify(self, credential: str) -> uuid.UUID:
        """
        Resolve a bearer credential to the id of an existing user

        Used by both the HTTP and the realtime boundary.

        Raises:
            UnauthorizedException: If the credential is missing, invalid, expired,
                or names a user that no longer exists
        """
        user = await self.authenticate(credential)
        return user.id

    async def authenticate(self, credential: str) -> User:
        subject = SecurityUtils.subject_from_token(credential)
        user = await self.users.get_by_id(subject)
        if user is None:
            raise UnauthorizedException("User not found", error_code="USER_NOT_FOUND")
        return user

    def issue_token(self, user: User, message: str) -> AuthResponse:
        token = SecurityUtils.create_access_token({"sub": str(user.id)})
        return AuthResponse(
            message=message,
            token=token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserPublic.model_validate(user),
        )

    @store_operation
    async def _commit(self) -> None:
        await self.db.commit()
