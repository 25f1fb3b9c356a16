"""
Wishlist aggregate: the wishlist, its collaborators and its ordered products
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Table, Text, Uuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, utcnow

class ProductPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

wishlist_collaborators = Table(
    "wishlist_collaborators",
    Base.metadata,
    Column("wishlist_id", Uuid(as_uuid=True), ForeignKey("wishlists.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

class Wishlist(Base, TimestampedModel, UUIDModel):
    """Shared wishlist owned by one user"""

    __tablename__ = "wishlists"

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_public = Column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_wishlists")
    collaborators = relationship(
        "User",
        secondary=wishlist_collaborators,
        order_by="User.username"
    )
    products = relationship(
        "WishlistProduct",
        back_populates="wishlist",
        order_by="WishlistProduct.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_wishlist_owner", "owner_id"),
    )

    def is_owner(self, user_id) -> bool:
        return self.owner_id == user_id

    def is_collaborator(self, user_id) -> bool:
        return any(user.id == user_id for user in self.collaborators)

    def find_product(self, product_id):
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    @property
    def member_count(self) -> int:
        """Collaborators plus the owner"""
        return len(self.collaborators) + 1

class WishlistProduct(Base, UUIDModel):
    """Product entry embedded in a wishlist"""

    __tablename__ = "wishlist_products"

    wishlist_id = Column(Uuid(as_uuid=True), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    image_url = Column(String(2048), nullable=True)
    url = Column(String(2048), nullable=True)
    category = Column(String(50), nullable=True)
    priority = Column(String(10), nullable=False, default=ProductPriority.MEDIUM.value)

    added_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    wishlist = relationship("Wishlist", back_populates="products")
    added_by = relationship("User")

    __table_args__ = (
        Index("idx_wishlist_product_wishlist", "wishlist_id", "position"),
    )
