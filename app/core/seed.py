"""
Demo data
Resets the database and fills it with a few users and shared wishlists
"""

from decimal import Decimal
import logging

from app.models import User, Wishlist, WishlistProduct, ProductPriority, utcnow
from .database import get_db_context, reset_db
from .security import SecurityUtils

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Demo1234"

DEMO_USERS = [
    {"username": "jayesh", "email": "jayesh@example.com"},
    {"username": "john_doe", "email": "john@example.com"},
    {"username": "jane_smith", "email": "jane@example.com"},
]

def _product(name, description, price, category, priority, added_by, image_url=None, url=None):
    now = utcnow()
    return WishlistProduct(
        name=name,
        description=description,
        price=Decimal(price),
        image_url=image_url,
        url=url,
        category=category,
        priority=priority.value,
        added_by_id=added_by.id,
        added_at=now,
        updated_at=now,
    )

async def seed_demo_data() -> dict:
    """
    Drop every table and insert the demo accounts and wishlists

    Returns a summary with the number of users and wishlists created.
    """
    await reset_db()

    async with get_db_context() as db:
        password_hash = SecurityUtils.hash_password(DEMO_PASSWORD)
        users = [User(password_hash=password_hash, **fields) for fields in DEMO_USERS]
        db.add_all(users)
        await db.flush()
        jayesh, john, jane = users

        tech = Wishlist(
            title="Tech Gadgets 2025",
            description="Latest tech gadgets I want to buy this year",
            owner_id=jayesh.id,
            is_public=True,
            collaborators=[john],
        )
        tech.products.extend([
            _product(
                "iPhone 15 Pro", "Latest iPhone with titanium design", "999.99",
                "Electronics", ProductPriority.HIGH, jayesh,
                url="https://apple.com/iphone-15-pro",
            ),
            _product(
                "MacBook Air M3", "Lightweight laptop for development", "1299.00",
                "Computers", ProductPriority.MEDIUM, john,
                url="https://apple.com/macbook-air",
            ),
            _product(
                "AirPods Pro 2", "Noise cancelling wireless earbuds", "249.99",
                "Audio", ProductPriority.LOW, jayesh,
                url="https://apple.com/airpods-pro",
            ),
        ])

        books = Wishlist(
            title="Programming Books",
            description="Must-read books for software developers",
            owner_id=john.id,
            is_public=False,
            collaborators=[jayesh, jane],
        )
        books.products.extend([
            _product(
                "Clean Code", "A Handbook of Agile Software Craftsmanship", "35.99",
                "Books", ProductPriority.HIGH, john,
                url="https://amazon.com/clean-code",
            ),
            _product(
                "System Design Interview", "An insider's guide to system design interviews", "29.99",
                "Books", ProductPriority.MEDIUM, jane,
                url="https://amazon.com/system-design",
            ),
        ])

        home = Wishlist(
            title="Home Improvement",
            description="Items for making our home better",
            owner_id=jane.id,
            is_public=True,
        )
        home.products.append(
            _product(
                "Robot Vacuum", "Smart vacuum cleaner with mapping", "399.99",
                "Home", ProductPriority.MEDIUM, jane,
            )
        )

        db.add_all([tech, books, home])

    logger.info(f"Seeded {len(DEMO_USERS)} users and 3 wishlists")
    return {"users": len(DEMO_USERS), "wishlists": 3}
