"""
Wishlist schemas for request/response validation
"""

from pydantic import Field, field_serializer, field_validator, model_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid

from app.models import ProductPriority
from .base import BaseSchema, reject_explicit_null, validate_optional_url
from .user import UserPublic

# Wishlist requests

class WishlistCreate(BaseSchema):
    """Schema for creating a wishlist"""
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_public: bool = False

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Books",
                "description": "Reading list for the holidays",
                "isPublic": False
            }
        }
    }

class WishlistUpdate(BaseSchema):
    """Schema for partially updating wishlist metadata"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        reject_explicit_null(self, ("title", "is_public"))
        return self

# Product requests

class ProductCreate(BaseSchema):
    """Schema for adding a product to a wishlist"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    image_url: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: ProductPriority = ProductPriority.MEDIUM

    @field_validator("image_url", "url")
    @classmethod
    def validate_urls(cls, v):
        return validate_optional_url(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Clean Code",
                "price": 35.99,
                "url": "https://example.com/clean-code",
                "category": "Books",
                "priority": "high"
            }
        }
    }

class ProductUpdate(BaseSchema):
    """
    Schema for partially updating a product

    Absent fields are left unchanged. An explicit null or empty string
    overwrites the optional text fields.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    image_url: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: Optional[ProductPriority] = None

    @field_validator("image_url", "url")
    @classmethod
    def validate_urls(cls, v):
        return validate_optional_url(v)

    @model_validator(mode="after")
    def check_required_not_null(self):
        reject_explicit_null(self, ("name", "price", "priority"))
        return self

# Collaborator requests

class CollaboratorAdd(BaseSchema):
    """Identify the user to add by exactly one of id, username or email"""
    user_id: Optional[uuid.UUID] = None
    username: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[str] = Field(None, min_length=3, max_length=255)

    @model_validator(mode="after")
    def check_single_identifier(self):
        given = [v for v in (self.user_id, self.username, self.email) if v is not None]
        if len(given) != 1:
            raise ValueError("Provide exactly one of userId, username or email")
        return self

# Responses

class ProductResponse(BaseSchema):
    """Resolved product entry"""
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    priority: ProductPriority
    added_by: UserPublic
    added_at: datetime
    updated_at: datetime

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

class WishlistResponse(BaseSchema):
    """Resolved wishlist aggregate"""
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    owner: UserPublic
    collaborators: List[UserPublic] = []
    products: List[ProductResponse] = []
    is_public: bool
    member_count: int
    created_at: datetime
    updated_at: datetime

class WishlistEnvelope(BaseSchema):
    """Single wishlist, optionally with an outcome message"""
    message: Optional[str] = None
    wishlist: WishlistResponse

class WishlistListResponse(BaseSchema):
    """Sequence of wishlists, most recently updated first"""
    wishlists: List[WishlistResponse]

class MessageResponse(BaseSchema):
    message: str
