from slowapi.middleware import SlowAPIMiddleware

from app.main import app
from app.middleware.rate_limit import limiter
from tests.conftest import PASSWORD, auth_headers

API = "/api/v1"

async def register(client, username):
    response = await client.post(f"{API}/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": PASSWORD,
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]

# Authentication

async def test_register_and_profile(client):
    headers, user = await register(client, "dana")

    response = await client.get(f"{API}/auth/profile", headers=headers)

    assert response.status_code == 200
    assert response.json()["username"] == "dana"
    assert "passwordHash" not in response.json()
    assert "password_hash" not in user

async def test_register_duplicate_email(client):
    await register(client, "dana")

    response = await client.post(f"{API}/auth/register", json={
        "username": "dana2",
        "email": "DANA@example.com",
        "password": PASSWORD,
    })

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

async def test_register_weak_password(client):
    response = await client.post(f"{API}/auth/register", json={
        "username": "weak",
        "email": "weak@example.com",
        "password": "short",
    })

    assert response.status_code == 422
    fields = response.json()["error"]["fields"]
    assert fields[0]["field"] == "password"

async def test_login_with_wrong_password(client):
    await register(client, "dana")

    response = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "Wrong123"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"

async def test_login_returns_token(client):
    await register(client, "dana")

    response = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["tokenType"] == "bearer"

async def test_wishlists_require_credentials(client):
    response = await client.get(f"{API}/wishlists")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_REQUIRED"

async def test_invalid_token_rejected(client):
    response = await client.get(f"{API}/wishlists", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"

# Wishlists

async def test_collaboration_flow(client):
    owner, _ = await register(client, "owner")
    helper, helper_user = await register(client, "helper")

    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Birthday"})
    assert created.status_code == 201
    wishlist_id = created.json()["wishlist"]["id"]
    assert created.json()["message"] == "Wishlist created successfully"

    added = await client.post(
        f"{API}/wishlists/{wishlist_id}/collaborators", headers=owner, json={"username": "helper"}
    )
    assert added.status_code == 201
    assert added.json()["wishlist"]["memberCount"] == 2

    product = await client.post(f"{API}/wishlists/{wishlist_id}/products", headers=helper, json={
        "name": "Board game",
        "price": 45.5,
        "url": "https://example.com/game",
        "priority": "high",
    })
    assert product.status_code == 201
    entry = product.json()["wishlist"]["products"][0]
    assert entry["addedBy"]["id"] == helper_user["id"]
    assert entry["price"] == 45.5
    assert entry["url"] == "https://example.com/game"

    listed = await client.get(f"{API}/wishlists", headers=helper)
    assert [w["id"] for w in listed.json()["wishlists"]] == [wishlist_id]

    forbidden = await client.patch(f"{API}/wishlists/{wishlist_id}", headers=helper, json={"title": "Mine"})
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["code"] == "FORBIDDEN"

async def test_private_wishlist_hidden_from_strangers(client):
    owner, _ = await register(client, "owner")
    stranger, _ = await register(client, "stranger")
    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Secret"})
    wishlist_id = created.json()["wishlist"]["id"]

    response = await client.get(f"{API}/wishlists/{wishlist_id}", headers=stranger)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "WISHLIST_NOT_FOUND"

async def test_public_listing(client):
    owner, _ = await register(client, "owner")
    viewer, _ = await register(client, "viewer")
    await client.post(f"{API}/wishlists", headers=owner, json={"title": "Open", "isPublic": True})
    await client.post(f"{API}/wishlists", headers=owner, json={"title": "Closed"})

    response = await client.get(f"{API}/wishlists/public", headers=viewer)

    assert [w["title"] for w in response.json()["wishlists"]] == ["Open"]

async def test_update_and_delete_product(client):
    owner, _ = await register(client, "owner")
    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Kitchen"})
    wishlist_id = created.json()["wishlist"]["id"]
    added = await client.post(
        f"{API}/wishlists/{wishlist_id}/products", headers=owner, json={"name": "Kettle", "price": 30}
    )
    product_id = added.json()["wishlist"]["products"][0]["id"]

    updated = await client.put(
        f"{API}/wishlists/{wishlist_id}/products/{product_id}", headers=owner, json={"category": "Appliances"}
    )
    assert updated.status_code == 200
    assert updated.json()["wishlist"]["products"][0]["category"] == "Appliances"
    assert updated.json()["wishlist"]["products"][0]["name"] == "Kettle"

    deleted = await client.delete(f"{API}/wishlists/{wishlist_id}/products/{product_id}", headers=owner)
    assert deleted.status_code == 200
    assert deleted.json()["wishlist"]["products"] == []

async def test_delete_wishlist(client):
    owner, _ = await register(client, "owner")
    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Temp"})
    wishlist_id = created.json()["wishlist"]["id"]

    deleted = await client.delete(f"{API}/wishlists/{wishlist_id}", headers=owner)
    assert deleted.json() == {"message": "Wishlist deleted successfully"}

    missing = await client.get(f"{API}/wishlists/{wishlist_id}", headers=owner)
    assert missing.status_code == 404

async def test_invalid_product_fields(client):
    owner, _ = await register(client, "owner")
    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Gear"})
    wishlist_id = created.json()["wishlist"]["id"]

    response = await client.post(f"{API}/wishlists/{wishlist_id}/products", headers=owner, json={
        "name": "",
        "price": -1,
        "url": "not a url",
    })

    assert response.status_code == 422
    fields = {f["field"] for f in response.json()["error"]["fields"]}
    assert {"name", "price", "url"} <= fields

async def test_explicit_null_title_rejected(client):
    owner, _ = await register(client, "owner")
    created = await client.post(f"{API}/wishlists", headers=owner, json={"title": "Gear"})
    wishlist_id = created.json()["wishlist"]["id"]

    response = await client.patch(f"{API}/wishlists/{wishlist_id}", headers=owner, json={"title": None})

    assert response.status_code == 422

async def test_unknown_route_uses_error_envelope(client, alice):
    response = await client.get("/api/v1/nowhere", headers=auth_headers(alice))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"

async def test_request_id_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.json()["status"] == "healthy"

async def test_explicit_null_and_empty_overwrite_optional_fields(client):
    owner, _ = await register(client, "owner")
    created = await client.post(
        f"{API}/wishlists", headers=owner, json={"title": "Gear", "description": "Camping"}
    )
    wishlist_id = created.json()["wishlist"]["id"]
    added = await client.post(f"{API}/wishlists/{wishlist_id}/products", headers=owner, json={
        "name": "Tent",
        "price": 120,
        "description": "Two person",
        "category": "Outdoor",
        "url": "https://example.com/tent",
    })
    product_id = added.json()["wishlist"]["products"][0]["id"]

    updated = await client.patch(
        f"{API}/wishlists/{wishlist_id}/products/{product_id}",
        headers=owner,
        json={"description": None, "category": "", "url": ""},
    )
    entry = updated.json()["wishlist"]["products"][0]
    assert entry["description"] is None
    assert entry["category"] == ""
    assert entry["url"] is None
    assert entry["name"] == "Tent"

    metadata = await client.patch(f"{API}/wishlists/{wishlist_id}", headers=owner, json={"description": None})
    assert metadata.json()["wishlist"]["description"] is None
    assert metadata.json()["wishlist"]["title"] == "Gear"

async def test_default_limits_applied_by_middleware():
    assert any(m.cls is SlowAPIMiddleware for m in app.user_middleware)

async def test_login_rate_limited(client):
    limiter.reset()
    limiter.enabled = True
    try:
        statuses = []
        for _ in range(6):
            response = await client.post(
                f"{API}/auth/login", json={"email": "nobody@example.com", "password": "Wrong123"}
            )
            statuses.append(response.status_code)
    finally:
        limiter.enabled = False
        limiter.reset()

    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429
    assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
