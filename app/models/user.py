"""
User model
Handles account identity and profile information
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class User(Base, TimestampedModel, UUIDModel):
    """Registered account"""

    __tablename__ = "users"

    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)

    # Relationships
    owned_wishlists = relationship(
        "Wishlist",
        back_populates="owner",
        cascade="all, delete-orphan"
    )
