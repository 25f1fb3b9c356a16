"""
Wishlist store
Authorization-aware queries over wishlist aggregates
"""

from typing import Any, Callable, List, Optional, Union
from functools import wraps
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, or_
import logging
import uuid

from app.models import User, Wishlist, WishlistProduct
from app.core.exceptions import StoreUnavailableException, WishlistNotFoundException

logger = logging.getLogger(__name__)

IdLike = Union[str, uuid.UUID]

def store_operation(func: Callable) -> Callable:
    """Translate persistence failures into StoreUnavailableException"""
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception(f"Store failure in {func.__qualname__}: {str(e)}")
            raise StoreUnavailableException()
    return wrapper

def coerce_id(value: Optional[IdLike]) -> Optional[uuid.UUID]:
    """Parse an id, returning None when it is malformed"""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None

def visible_to(user_id: uuid.UUID):
    """Owner, collaborator or public"""
    return or_(
        Wishlist.owner_id == user_id,
        Wishlist.collaborators.any(User.id == user_id),
        Wishlist.is_public.is_(True),
    )

def writable_by(user_id: uuid.UUID):
    """Owner or collaborator"""
    return or_(
        Wishlist.owner_id == user_id,
        Wishlist.collaborators.any(User.id == user_id),
    )

def resolved_wishlists():
    """Select wishlists with every user reference eagerly resolved"""
    return (
        select(Wishlist)
        .options(
            selectinload(Wishlist.owner),
            selectinload(Wishlist.collaborators),
            selectinload(Wishlist.products).selectinload(WishlistProduct.added_by),
        )
        .execution_options(populate_existing=True)
    )

class WishlistStore:
    """Query surface over wishlist aggregates, always scoped to an acting user"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation
    async def list_visible(self, user_id: uuid.UUID) -> List[Wishlist]:
        """Wishlists the user owns, collaborates on, or that are public"""
        result = await self.db.execute(
            resolved_wishlists()
            .where(visible_to(user_id))
            .order_by(Wishlist.updated_at.desc(), Wishlist.created_at.desc())
        )
        return list(result.scalars().unique().all())

    @store_operation
    async def list_public(self) -> List[Wishlist]:
        result = await self.db.execute(
            resolved_wishlists()
            .where(Wishlist.is_public.is_(True))
            .order_by(Wishlist.updated_at.desc(), Wishlist.created_at.desc())
        )
        return list(result.scalars().unique().all())

    async def get_visible(self, wishlist_id: IdLike, user_id: uuid.UUID) -> Wishlist:
        """
        Load a wishlist the user may view

        Raises:
            WishlistNotFoundException: If absent or not visible, without telling which
        """
        return await self._get_where(wishlist_id, visible_to(user_id))

    async def get_writable(self, wishlist_id: IdLike, user_id: uuid.UUID) -> Wishlist:
        """Like get_visible, restricted to owner and collaborators"""
        return await self._get_where(wishlist_id, writable_by(user_id))

    async def get_owned(self, wishlist_id: IdLike, user_id: uuid.UUID) -> Wishlist:
        """Restricted to the owner"""
        return await self._get_where(wishlist_id, Wishlist.owner_id == user_id)

    async def load(self, wishlist_id: IdLike) -> Wishlist:
        """Reload a resolved aggregate without any visibility predicate"""
        return await self._get_where(wishlist_id)

    @store_operation
    async def _get_where(self, wishlist_id: IdLike, *conditions) -> Wishlist:
        parsed_id = coerce_id(wishlist_id)
        if parsed_id is None:
            raise WishlistNotFoundException()

        result = await self.db.execute(
            resolved_wishlists().where(Wishlist.id == parsed_id, *conditions)
        )
        wishlist = result.scalars().unique().one_or_none()
        if wishlist is None:
            raise WishlistNotFoundException()
        return wishlist
