"""Wishlist, product and collaborator routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.v1.auth.dependencies import get_current_user
from app.models import User
from app.services.wishlist_service import WishlistService
from app.services.wishlist_store import WishlistStore
from app.schemas.wishlist import (
    CollaboratorAdd,
    MessageResponse,
    ProductCreate,
    ProductUpdate,
    WishlistCreate,
    WishlistEnvelope,
    WishlistListResponse,
    WishlistUpdate,
)

router = APIRouter()

def envelope(wishlist, message=None) -> WishlistEnvelope:
    return WishlistEnvelope.model_validate({"message": message, "wishlist": wishlist}, from_attributes=True)

# Queries

@router.get("", response_model=WishlistListResponse)
async def list_wishlists(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Wishlists the user owns, collaborates on, or that are public"""
    wishlists = await WishlistStore(db).list_visible(current_user.id)
    return WishlistListResponse.model_validate({"wishlists": wishlists}, from_attributes=True)

@router.get("/public", response_model=WishlistListResponse)
async def list_public_wishlists(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All public wishlists"""
    wishlists = await WishlistStore(db).list_public()
    return WishlistListResponse.model_validate({"wishlists": wishlists}, from_attributes=True)

@router.get("/{wishlist_id}", response_model=WishlistEnvelope)
async def get_wishlist(
    wishlist_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistStore(db).get_visible(wishlist_id, current_user.id)
    return envelope(wishlist)

# Wishlist mutations

@router.post("", response_model=WishlistEnvelope, status_code=status.HTTP_201_CREATED)
async def create_wishlist(
    payload: WishlistCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistService(db).create_wishlist(current_user.id, payload)
    return envelope(wishlist, "Wishlist created successfully")

@router.api_route("/{wishlist_id}", methods=["PUT", "PATCH"], response_model=WishlistEnvelope)
async def update_wishlist(
    wishlist_id: str,
    payload: WishlistUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update title, description or visibility (owner only)"""
    wishlist = await WishlistService(db).update_wishlist_metadata(current_user.id, wishlist_id, payload)
    return envelope(wishlist, "Wishlist updated successfully")

@router.delete("/{wishlist_id}", response_model=MessageResponse)
async def delete_wishlist(
    wishlist_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a wishlist and all of its products (owner only)"""
    await WishlistService(db).delete_wishlist(current_user.id, wishlist_id)
    return MessageResponse(message="Wishlist deleted successfully")

# Products

@router.post("/{wishlist_id}/products", response_model=WishlistEnvelope, status_code=status.HTTP_201_CREATED)
async def add_product(
    wishlist_id: str,
    payload: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistService(db).add_product(current_user.id, wishlist_id, payload)
    return envelope(wishlist, "Product added successfully")

@router.api_route("/{wishlist_id}/products/{product_id}", methods=["PUT", "PATCH"], response_model=WishlistEnvelope)
async def update_product(
    wishlist_id: str,
    product_id: str,
    payload: ProductUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistService(db).update_product(current_user.id, wishlist_id, product_id, payload)
    return envelope(wishlist, "Product updated successfully")

@router.delete("/{wishlist_id}/products/{product_id}", response_model=WishlistEnvelope)
async def delete_product(
    wishlist_id: str,
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Owner may delete any product, collaborators only their own"""
    wishlist = await WishlistService(db).delete_product(current_user.id, wishlist_id, product_id)
    return envelope(wishlist, "Product deleted successfully")

# Collaborators

@router.post("/{wishlist_id}/collaborators", response_model=WishlistEnvelope, status_code=status.HTTP_201_CREATED)
async def add_collaborator(
    wishlist_id: str,
    payload: CollaboratorAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistService(db).add_collaborator(current_user.id, wishlist_id, payload)
    return envelope(wishlist, "Collaborator added successfully")

@router.delete("/{wishlist_id}/collaborators/{user_id}", response_model=WishlistEnvelope)
async def remove_collaborator(
    wishlist_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    wishlist = await WishlistService(db).remove_collaborator(current_user.id, wishlist_id, user_id)
    return envelope(wishlist, "Collaborator removed successfully")
