"""User service for account lookups"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
import uuid

from app.models.user import User
from .wishlist_store import coerce_id, store_operation

class UserService:
    """Service class for user operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation
    async def get_by_id(self, user_id) -> Optional[User]:
        parsed_id = coerce_id(user_id)
        if parsed_id is None:
            return None
        return await self.db.get(User, parsed_id)

    @store_operation
    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @store_operation
    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.strip().lower())
        )
        return result.scalar_one_or_none()

    async def find(
        self,
        user_id: Optional[uuid.UUID] = None,
        username: Optional[str] = None,
        email: Optional[str] = None
    ) -> Optional[User]:
        """Find a user by whichever identifier is given"""
        if user_id is not None:
            return await self.get_by_id(user_id)
        if username:
            return await self.get_by_username(username)
        if email:
            return await self.get_by_email(email)
        return None
