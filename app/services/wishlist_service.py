"""
Wishlist mutation service
Orchestrates wishlist, product and collaborator changes
"""

from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from app.models import Wishlist, WishlistProduct, utcnow
from app.core.exceptions import (
    ForbiddenException,
    ProductNotFoundException,
    ValidationException,
)
from app.schemas.wishlist import (
    CollaboratorAdd,
    ProductCreate,
    ProductUpdate,
    WishlistCreate,
    WishlistUpdate,
)
from . import wishlist_policy as policy
from .user_service import UserService
from .wishlist_store import IdLike, WishlistStore, coerce_id, store_operation

logger = logging.getLogger(__name__)

class WishlistService:
    """
    Wishlist mutation service

    Every operation loads the target aggregate with the right visibility,
    consults the policy, applies the change, persists it in one transaction
    and returns the freshly resolved aggregate.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = WishlistStore(db)
        self.users = UserService(db)

    async def create_wishlist(self, actor_id: uuid.UUID, data: WishlistCreate) -> Wishlist:
        """Create a wishlist owned by the actor, with no collaborators and no products"""
        wishlist = Wishlist(
            title=data.title,
            description=data.description,
            owner_id=actor_id,
            is_public=data.is_public,
        )
        self.db.add(wishlist)
        resolved = await self._persist(wishlist)

        logger.info(f"User {actor_id} created wishlist {resolved.id}")
        return resolved

    async def update_wishlist_metadata(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        data: WishlistUpdate
    ) -> Wishlist:
        """
        Partially update title, description and visibility

        Raises:
            WishlistNotFoundException: If the actor is neither owner nor collaborator
            ForbiddenException: If the actor is a collaborator but not the owner
        """
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        if not policy.can_edit_metadata(actor_id, wishlist):
            raise ForbiddenException("Only the owner can update wishlist details")

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(wishlist, field, value)
        wishlist.touch()

        return await self._persist(wishlist)

    async def delete_wishlist(self, actor_id: uuid.UUID, wishlist_id: IdLike) -> None:
        """
        Delete a wishlist together with all of its products

        Non-owners get NotFound rather than Forbidden so the wishlist's
        existence is not confirmed.
        """
        wishlist = await self.store.get_owned(wishlist_id, actor_id)
        await self.db.delete(wishlist)
        await self._commit()

        logger.info(f"User {actor_id} deleted wishlist {wishlist.id}")

    async def add_product(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        data: ProductCreate
    ) -> Wishlist:
        """Append a product to the end of the wishlist"""
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        if not policy.can_mutate(actor_id, wishlist):
            raise ForbiddenException("Unauthorized to add products")

        now = utcnow()
        wishlist.products.append(
            WishlistProduct(
                name=data.name,
                description=data.description,
                price=data.price,
                image_url=data.image_url,
                url=data.url,
                category=data.category,
                priority=data.priority.value,
                added_by_id=actor_id,
                added_at=now,
                updated_at=now,
            )
        )
        wishlist.touch()

        return await self._persist(wishlist)

    async def update_product(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        product_id: IdLike,
        data: ProductUpdate
    ) -> Wishlist:
        """Apply only the provided fields to a product"""
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        product = self._find_product(wishlist, product_id)
        if not policy.can_mutate(actor_id, wishlist):
            raise ForbiddenException("Unauthorized to update this product")

        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "priority":
                value = value.value
            setattr(product, field, value)
        product.updated_at = utcnow()
        wishlist.touch()

        return await self._persist(wishlist)

    async def delete_product(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        product_id: IdLike
    ) -> Wishlist:
        """
        Remove a product from the wishlist

        Raises:
            ForbiddenException: If the actor is neither the owner nor the one who added it
        """
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        product = self._find_product(wishlist, product_id)
        if not policy.can_delete_product(actor_id, wishlist, product):
            raise ForbiddenException("Unauthorized to delete this product")

        wishlist.products.remove(product)
        wishlist.products.reorder()
        wishlist.touch()

        return await self._persist(wishlist)

    async def add_collaborator(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        data: CollaboratorAdd
    ) -> Wishlist:
        """Grant a user write access to the wishlist's products. Idempotent."""
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        if not policy.can_edit_metadata(actor_id, wishlist):
            raise ForbiddenException("Only the owner can manage collaborators")

        user = await self.users.find(user_id=data.user_id, username=data.username, email=data.email)
        if user is None:
            raise ValidationException("User not found", field=self._identifier_field(data))
        if wishlist.is_owner(user.id):
            raise ValidationException("The owner cannot be a collaborator", field=self._identifier_field(data))

        if wishlist.is_collaborator(user.id):
            return wishlist

        wishlist.collaborators.append(user)
        wishlist.touch()
        resolved = await self._persist(wishlist)

        logger.info(f"User {actor_id} added collaborator {user.id} to wishlist {wishlist.id}")
        return resolved

    async def remove_collaborator(
        self,
        actor_id: uuid.UUID,
        wishlist_id: IdLike,
        user_id: IdLike
    ) -> Wishlist:
        """
        Revoke a collaborator

        The owner may remove anyone; a collaborator may only remove themself.
        Products the removed user added are kept.
        """
        wishlist = await self.store.get_writable(wishlist_id, actor_id)
        target_id = coerce_id(user_id)
        if not (policy.can_edit_metadata(actor_id, wishlist) or target_id == actor_id):
            raise ForbiddenException("Only the owner can manage collaborators")

        target = next((user for user in wishlist.collaborators if user.id == target_id), None)
        if target is None:
            return wishlist

        wishlist.collaborators.remove(target)
        wishlist.touch()
        resolved = await self._persist(wishlist)

        logger.info(f"User {actor_id} removed collaborator {target_id} from wishlist {wishlist.id}")
        return resolved

    def _find_product(self, wishlist: Wishlist, product_id: IdLike) -> WishlistProduct:
        product = wishlist.find_product(coerce_id(product_id))
        if product is None:
            raise ProductNotFoundException()
        return product

    @staticmethod
    def _identifier_field(data: CollaboratorAdd) -> str:
        if data.user_id is not None:
            return "userId"
        return "username" if data.username else "email"

    @store_operation
    async def _commit(self) -> None:
        await self.db.commit()

    async def _persist(self, wishlist: Wishlist) -> Wishlist:
        """Write the aggregate in one transaction and return it resolved"""
        await self._commit()
        return await self.store.load(wishlist.id)
