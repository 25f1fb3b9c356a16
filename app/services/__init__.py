"""Services package"""

from .user_service import UserService
from .wishlist_store import WishlistStore
from .wishlist_service import WishlistService

__all__ = [
    "UserService",
    "WishlistStore",
    "WishlistService",
]
