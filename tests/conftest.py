"""Shared fixtures: a throwaway SQLite database, users and clients"""

import asyncio
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="wishlist-hub-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REALTIME_VERIFY_ROOM_ACCESS"] = "true"

import httpx
import pytest
from starlette.testclient import TestClient

from app.core.database import AsyncSessionLocal, reset_db
from app.core.security import SecurityUtils
from app.main import app
from app.models import User

PASSWORD = "Secret123"
PASSWORD_HASH = SecurityUtils.hash_password(PASSWORD)

@pytest.fixture(autouse=True)
def fresh_database():
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(reset_db())
    finally:
        loop.close()
    yield

@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session

async def create_user(db, username: str) -> User:
    user = User(username=username, email=f"{username}@example.com", password_hash=PASSWORD_HASH)
    db.add(user)
    await db.commit()
    return user

@pytest.fixture
async def alice(db):
    return await create_user(db, "alice")

@pytest.fixture
async def bob(db):
    return await create_user(db, "bob")

@pytest.fixture
async def carol(db):
    return await create_user(db, "carol")

def token_for(user: User) -> str:
    return SecurityUtils.create_access_token({"sub": str(user.id)})

def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}

@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

@pytest.fixture
def sync_client():
    return TestClient(app)
