# 📄 File: tests/test_cart.py
# 🧪 Purpose (Technical Summary):
# Cart endpoints: set-not-add semantics, quantity validation, idempotent removal,
# live pricing and authentication.

from tests.conftest import auth_headers, create_product, create_user, get_user


async def test_cart_requires_token(client):
    response = await client.get("/api/v1/cart")

    assert response.status_code == 401
    body = response.json()
    assert body["error"]["code"] == "AUTHENTICATION_ERROR"
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_cart_rejects_bad_token(client):
    response = await client.get("/api/v1/cart", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_empty_cart(client):
    user = await create_user()

    response = await client.get("/api/v1/cart", headers=auth_headers(user.user_id))

    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == user.user_id
    assert body["items"] == []
    assert body["total"] == 0
    assert body["itemCount"] == 0


async def test_add_sets_quantity_instead_of_accumulating(client):
    user = await create_user()
    product_id = await create_product(price="12.50")
    headers = auth_headers(user.user_id)

    await client.post("/api/v1/cart", json={"productId": product_id, "qty": 2}, headers=headers)
    response = await client.post("/api/v1/cart", json={"productId": product_id, "qty": 5}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert len(body["items"]) == 1
    assert body["items"][0]["qty"] == 5
    assert body["items"][0]["itemTotal"] == 62.5
    assert body["total"] == 62.5

    stored = await get_user(user.user_id)
    assert [(line.product_id, line.qty) for line in stored.cart_items] == [(product_id, 5)]


async def test_add_rejects_quantity_below_one(client):
    user = await create_user()
    product_id = await create_product()

    response = await client.post(
        "/api/v1/cart", json={"productId": product_id, "qty": 0}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_add_rejects_inactive_product(client):
    user = await create_user()
    product_id = await create_product(is_active=False)

    response = await client.post(
        "/api/v1/cart", json={"productId": product_id, "qty": 1}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 404
    stored = await get_user(user.user_id)
    assert stored.cart_items == []


async def test_add_rejects_unknown_product(client):
    user = await create_user()

    response = await client.post(
        "/api/v1/cart", json={"productId": "missing", "qty": 1}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_update_line_requires_existing_line(client):
    user = await create_user()
    product_id = await create_product()

    response = await client.put(
        f"/api/v1/cart/{product_id}", json={"qty": 3}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 404


async def test_update_line_changes_quantity(client):
    product_id = await create_product(price="3.00")
    user = await create_user(cart=[{"product_id": product_id, "qty": 1}])

    response = await client.put(
        f"/api/v1/cart/{product_id}", json={"qty": 4}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 200
    assert response.json()["items"][0]["qty"] == 4
    assert response.json()["total"] == 12.0


async def test_remove_line_is_idempotent(client):
    product_id = await create_product()
    other_id = await create_product(name="Feeder")
    user = await create_user(cart=[{"product_id": product_id, "qty": 1}, {"product_id": other_id, "qty": 2}])
    headers = auth_headers(user.user_id)

    first = await client.delete(f"/api/v1/cart/{product_id}", headers=headers)
    second = await client.delete(f"/api/v1/cart/{product_id}", headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert [item["productId"] for item in second.json()["items"]] == [other_id]


async def test_clear_cart(client):
    product_id = await create_product()
    user = await create_user(cart=[{"product_id": product_id, "qty": 2}])

    response = await client.delete("/api/v1/cart", headers=auth_headers(user.user_id))

    assert response.status_code == 200
    assert response.json()["items"] == []
    stored = await get_user(user.user_id)
    assert stored.cart_items == []
    assert stored.version == user.version + 1


async def test_view_uses_current_price_and_flags_inactive_products(client):
    active_id = await create_product(price="5.00")
    retired_id = await create_product(name="Old pump", price="40.00", is_active=False)
    user = await create_user(cart=[{"product_id": active_id, "qty": 2}, {"product_id": retired_id, "qty": 1}])

    response = await client.get("/api/v1/cart", headers=auth_headers(user.user_id))

    body = response.json()
    by_id = {item["productId"]: item for item in body["items"]}
    assert by_id[active_id]["available"] is True
    assert by_id[retired_id]["available"] is False
    assert body["itemCount"] == 3


async def test_inactive_account_is_forbidden(client):
    user = await create_user(is_active=False)

    response = await client.get("/api/v1/cart", headers=auth_headers(user.user_id))

    assert response.status_code == 403
