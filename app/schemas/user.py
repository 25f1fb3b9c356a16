"""User-facing representations of accounts"""

from typing import Optional
import uuid

from .base import BaseSchema

class UserPublic(BaseSchema):
    """Resolved user reference. Never carries the credential hash."""

    id: uuid.UUID
    username: str
    email: str
    avatar: Optional[str] = None
