"""
Wishlist authorization policy

Pure decisions over a freshly loaded aggregate. Nothing here touches the
database or caches a result; callers re-evaluate on every operation.
"""

from app.models import Wishlist, WishlistProduct

def can_view(user_id, wishlist: Wishlist) -> bool:
    """Owner, collaborator, or anyone when the wishlist is public"""
    return wishlist.is_owner(user_id) or wishlist.is_collaborator(user_id) or bool(wishlist.is_public)

def can_mutate(user_id, wishlist: Wishlist) -> bool:
    """Add or edit products: owner or collaborator only"""
    return wishlist.is_owner(user_id) or wishlist.is_collaborator(user_id)

def can_edit_metadata(user_id, wishlist: Wishlist) -> bool:
    """Title, description, visibility and collaborators belong to the owner"""
    return wishlist.is_owner(user_id)

def can_delete(user_id, wishlist: Wishlist) -> bool:
    return wishlist.is_owner(user_id)

def can_delete_product(user_id, wishlist: Wishlist, product: WishlistProduct) -> bool:
    """The owner may delete any product, anyone else only what they added"""
    return wishlist.is_owner(user_id) or product.added_by_id == user_id
