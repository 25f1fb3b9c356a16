"""Models package initialization"""

from .base import Base, utcnow
from .user import User
from .wishlist import Wishlist, WishlistProduct, ProductPriority, wishlist_collaborators

# Export all models
__all__ = [
    "Base",
    "utcnow",
    "User",
    "Wishlist",
    "WishlistProduct",
    "ProductPriority",
    "wishlist_collaborators",
]
