# 📄 File: tests/test_checkout.py
# 🧪 Purpose (Technical Summary):
# Checkout saga: price snapshot, ownership transfer, cart clearing, validation
# failures that leave no trace, duplicate checkout protection and reconciliation.

from decimal import Decimal
from uuid import uuid4

from farmx.background_jobs.tasks.order_reconciliation import run_reconciliation
from farmx.modules.storefront.infrastructure.database.models import OrderItemModel, OrderModel, ProductModel
from farmx.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from farmx.shared.core.exceptions import ConflictError
from farmx.shared.infrastructure.database.session import session_manager
from tests.conftest import add_rows, auth_headers, create_product, create_user, get_user


async def test_checkout_creates_completed_order_and_transfers_ownership(client):
    pump = await create_product(name="Pump", price="19.99")
    net = await create_product(name="Net", price="5.00")
    user = await create_user(cart=[{"product_id": pump, "qty": 2}, {"product_id": net, "qty": 1}])

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "completed"
    assert order["isActive"] is True
    assert order["ownershipTransferred"] is True
    assert order["total"] == 44.98
    assert [(item["productId"], item["qty"], item["priceAtPurchase"]) for item in order["items"]] == [
        (pump, 2, 19.99),
        (net, 1, 5.0),
    ]

    stored = await get_user(user.user_id)
    assert stored.cart_items == []
    assert sorted(stored.owned_products) == sorted([pump, pump, net])
    assert stored.fulfilled_orders == [order["orderId"]]


async def test_checkout_empty_cart(client):
    user = await create_user()

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMPTY_CART"


async def test_checkout_with_inactive_product_leaves_no_trace(client):
    active = await create_product()
    retired = await create_product(name="Retired", is_active=False)
    user = await create_user(cart=[{"product_id": active, "qty": 1}, {"product_id": retired, "qty": 1}])
    headers = auth_headers(user.user_id)

    response = await client.post("/api/v1/cart/checkout", headers=headers)

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "PRODUCT_UNAVAILABLE"
    assert error["details"]["product_id"] == retired

    stored = await get_user(user.user_id)
    assert len(stored.cart_items) == 2
    assert stored.owned_products == []
    orders = await client.get("/api/v1/orders", headers=headers)
    assert orders.json()["total"] == 0


async def test_checkout_with_missing_product(client):
    user = await create_user(cart=[{"product_id": str(uuid4()), "qty": 1}])

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 404


async def test_checkout_rejects_mixed_currencies(client):
    usd = await create_product(currency="USD")
    eur = await create_product(name="Feed", currency="EUR")
    user = await create_user(cart=[{"product_id": usd, "qty": 1}, {"product_id": eur, "qty": 1}])

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 400


async def test_order_total_is_frozen_after_price_change(client):
    product_id = await create_product(price="10.00")
    user = await create_user(cart=[{"product_id": product_id, "qty": 3}])
    headers = auth_headers(user.user_id)

    placed = (await client.post("/api/v1/cart/checkout", headers=headers)).json()

    async with session_manager.get_session() as session:
        product = await session.get(ProductModel, product_id)
        product.price = Decimal("99.00")

    fetched = await client.get(f"/api/v1/orders/{placed['orderId']}", headers=headers)
    assert fetched.json()["total"] == 30.0
    assert fetched.json()["items"][0]["priceAtPurchase"] == 10.0


async def test_second_checkout_of_same_cart_version_conflicts(client):
    product_id = await create_product(price="10.00")
    user = await create_user(cart=[{"product_id": product_id, "qty": 1}])
    await add_rows(OrderModel(
        order_id=str(uuid4()),
        user_id=user.user_id,
        total=Decimal("10.00"),
        currency="USD",
        status="completed",
        checkout_key=f"{user.user_id}:{user.version}",
        ownership_transferred=False,
        items=[OrderItemModel(position=0, product_id=product_id, qty=1, price_at_purchase=Decimal("10.00"))],
    ))

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 409
    stored = await get_user(user.user_id)
    assert len(stored.cart_items) == 1


async def test_repeat_checkout_finds_empty_cart(client):
    bought = await create_product(price="2.00")
    user = await create_user(cart=[{"product_id": bought, "qty": 1}])

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 201
    repeat = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))
    assert repeat.status_code == 400


async def test_failed_transfer_is_deferred_then_reconciled(client, monkeypatch):
    product_id = await create_product(price="7.00")
    user = await create_user(cart=[{"product_id": product_id, "qty": 2}])

    async def always_conflict(self, user_id, expected_version, changes):
        raise ConflictError("User was modified concurrently", resource_type="user", conflict_field="version")

    original = UserRepositoryImpl.update_versioned
    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", always_conflict)

    response = await client.post("/api/v1/cart/checkout", headers=auth_headers(user.user_id))

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "completed"
    assert order["ownershipTransferred"] is False
    assert (await get_user(user.user_id)).owned_products == []

    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", original)
    summary = await run_reconciliation()

    assert summary == {"scanned": 1, "fulfilled": 1, "deferred": 0}
    stored = await get_user(user.user_id)
    assert stored.owned_products == [product_id, product_id]
    assert stored.cart_items == []

    again = await run_reconciliation()
    assert again["scanned"] == 0
    assert (await get_user(user.user_id)).owned_products == [product_id, product_id]


async def test_reconciliation_does_not_grant_twice(client):
    product_id = await create_product()
    user = await create_user()
    order_id = str(uuid4())
    await add_rows(OrderModel(
        order_id=order_id,
        user_id=user.user_id,
        total=Decimal("10.00"),
        currency="USD",
        status="completed",
        ownership_transferred=False,
        items=[OrderItemModel(position=0, product_id=product_id, qty=1, price_at_purchase=Decimal("10.00"))],
    ))

    async with session_manager.get_session() as session:
        repo = UserRepositoryImpl(session)
        await repo.update_versioned(
            user.user_id, user.version, {"owned_products": [product_id], "fulfilled_orders": [order_id]}
        )

    summary = await run_reconciliation()

    assert summary["fulfilled"] == 1
    stored = await get_user(user.user_id)
    assert stored.owned_products == [product_id]


async def test_reconciled_checkout_keeps_cart_lines_edited_afterwards(client, monkeypatch):
    pump = await create_product(price="7.00")
    net = await create_product(price="2.00")
    user = await create_user(cart=[{"product_id": pump, "qty": 2}, {"product_id": net, "qty": 1}])
    headers = auth_headers(user.user_id)

    async def always_conflict(self, user_id, expected_version, changes):
        raise ConflictError("User was modified concurrently", resource_type="user", conflict_field="version")

    original = UserRepositoryImpl.update_versioned
    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", always_conflict)
    response = await client.post("/api/v1/cart/checkout", headers=headers)
    assert response.json()["ownershipTransferred"] is False

    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", original)
    edited = await client.put(f"/api/v1/cart/{pump}", json={"qty": 5}, headers=headers)
    assert edited.status_code == 200

    await run_reconciliation()

    stored = await get_user(user.user_id)
    assert sorted(stored.owned_products) == sorted([pump, pump, net])
    assert [(line.product_id, line.qty) for line in stored.cart_items] == [(pump, 5)]
