# 📄 File: tests/test_orders.py
# 🧪 Purpose (Technical Summary):
# Order listing, manual creation and the status state machine, including the
# ownership rules for regular users and administrators.

from decimal import Decimal
from uuid import uuid4

import pytest

from farmx.background_jobs.tasks.order_reconciliation import run_reconciliation
from farmx.modules.storefront.domain.services.fulfillment_service import FulfillmentService
from farmx.modules.storefront.domain.services.order_service import OrderService
from farmx.modules.storefront.infrastructure.database.models import OrderItemModel, OrderModel
from farmx.modules.storefront.infrastructure.database.order_repository_impl import OrderRepositoryImpl
from farmx.modules.storefront.infrastructure.database.product_repository_impl import ProductRepositoryImpl
from farmx.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from farmx.shared.core.dependencies import CurrentUser
from farmx.shared.core.exceptions import ConflictError
from farmx.shared.infrastructure.database.session import session_manager
from tests.conftest import add_rows, auth_headers, create_product, create_user, get_user


async def seed_order(user_id: str, product_id: str, status: str = "pending", qty: int = 1, price: str = "10.00") -> str:
    order_id = str(uuid4())
    unit = Decimal(price)
    await add_rows(OrderModel(
        order_id=order_id,
        user_id=user_id,
        total=unit * qty,
        currency="USD",
        status=status,
        is_active=status != "cancelled",
        items=[OrderItemModel(position=0, product_id=product_id, qty=qty, price_at_purchase=unit)],
    ))
    return order_id


async def test_list_orders_only_returns_callers_orders(client):
    product_id = await create_product()
    alice = await create_user()
    bob = await create_user()
    await seed_order(alice.user_id, product_id)
    await seed_order(alice.user_id, product_id, status="completed")
    await seed_order(bob.user_id, product_id)

    response = await client.get("/api/v1/orders", headers=auth_headers(alice.user_id))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert {order["userId"] for order in body["orders"]} == {alice.user_id}
    assert body["page"] == 1
    assert body["totalPages"] == 1
    assert body["hasNext"] is False


async def test_list_orders_filters_and_paginates(client):
    product_id = await create_product()
    user = await create_user()
    for _ in range(3):
        await seed_order(user.user_id, product_id)
    await seed_order(user.user_id, product_id, status="cancelled")
    headers = auth_headers(user.user_id)

    pending = await client.get("/api/v1/orders", params={"status": "pending", "limit": 2}, headers=headers)
    inactive = await client.get("/api/v1/orders", params={"isActive": "false"}, headers=headers)

    assert pending.json()["total"] == 3
    assert len(pending.json()["orders"]) == 2
    assert pending.json()["hasNext"] is True
    assert inactive.json()["total"] == 1
    assert inactive.json()["orders"][0]["status"] == "cancelled"


async def test_list_orders_rejects_bad_paging(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    assert (await client.get("/api/v1/orders", params={"page": 0}, headers=headers)).status_code == 400
    assert (await client.get("/api/v1/orders", params={"limit": 1000}, headers=headers)).status_code == 400
    assert (await client.get("/api/v1/orders", params={"status": "shipped"}, headers=headers)).status_code == 400


async def test_admin_lists_everyone_and_filters_by_user(client):
    product_id = await create_product()
    admin = await create_user(role="admin")
    alice = await create_user()
    bob = await create_user()
    await seed_order(alice.user_id, product_id)
    await seed_order(bob.user_id, product_id)
    headers = auth_headers(admin.user_id, role="admin")

    everyone = await client.get("/api/v1/orders", headers=headers)
    only_bob = await client.get("/api/v1/orders", params={"userId": bob.user_id}, headers=headers)

    assert everyone.json()["total"] == 2
    assert only_bob.json()["total"] == 1
    assert only_bob.json()["orders"][0]["userId"] == bob.user_id


async def test_user_id_filter_is_ignored_for_regular_users(client):
    product_id = await create_product()
    alice = await create_user()
    bob = await create_user()
    await seed_order(bob.user_id, product_id)

    response = await client.get("/api/v1/orders", params={"userId": bob.user_id}, headers=auth_headers(alice.user_id))

    assert response.json()["total"] == 0


async def test_get_order_of_another_user_is_forbidden(client):
    product_id = await create_product()
    alice = await create_user()
    bob = await create_user()
    order_id = await seed_order(bob.user_id, product_id)

    response = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(alice.user_id))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"


async def test_get_missing_order(client):
    user = await create_user()

    response = await client.get(f"/api/v1/orders/{uuid4()}", headers=auth_headers(user.user_id))

    assert response.status_code == 404


async def test_create_pending_order_snapshots_prices(client):
    product_id = await create_product(price="4.25")
    user = await create_user()

    response = await client.post(
        "/api/v1/orders",
        json={"items": [{"productId": product_id, "qty": 4}]},
        headers=auth_headers(user.user_id),
    )

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "pending"
    assert order["total"] == 17.0
    assert order["ownershipTransferred"] is False
    assert (await get_user(user.user_id)).owned_products == []


async def test_create_order_rejects_inactive_product(client):
    product_id = await create_product(is_active=False)
    user = await create_user()

    response = await client.post(
        "/api/v1/orders",
        json={"items": [{"productId": product_id, "qty": 1}]},
        headers=auth_headers(user.user_id),
    )

    assert response.status_code == 404


async def test_create_order_requires_items(client):
    user = await create_user()

    response = await client.post("/api/v1/orders", json={"items": []}, headers=auth_headers(user.user_id))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_regular_user_cannot_create_completed_order(client):
    product_id = await create_product()
    user = await create_user()

    response = await client.post(
        "/api/v1/orders",
        json={"items": [{"productId": product_id, "qty": 1}], "status": "completed"},
        headers=auth_headers(user.user_id),
    )

    assert response.status_code == 403


async def test_admin_completed_order_transfers_ownership(client):
    product_id = await create_product()
    admin = await create_user(role="admin")

    response = await client.post(
        "/api/v1/orders",
        json={"items": [{"productId": product_id, "qty": 2}], "status": "completed"},
        headers=auth_headers(admin.user_id, role="admin"),
    )

    assert response.status_code == 201
    assert response.json()["ownershipTransferred"] is True
    assert (await get_user(admin.user_id)).owned_products == [product_id, product_id]


async def test_user_cancels_own_pending_order(client):
    product_id = await create_product()
    user = await create_user()
    order_id = await seed_order(user.user_id, product_id)

    response = await client.delete(f"/api/v1/orders/{order_id}", headers=auth_headers(user.user_id))

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["isActive"] is False


async def test_user_cannot_cancel_completed_order(client):
    product_id = await create_product()
    user = await create_user()
    order_id = await seed_order(user.user_id, product_id, status="completed")

    response = await client.delete(f"/api/v1/orders/{order_id}", headers=auth_headers(user.user_id))

    assert response.status_code == 403


async def test_user_cannot_complete_own_order(client):
    product_id = await create_product()
    user = await create_user()
    order_id = await seed_order(user.user_id, product_id)

    response = await client.put(
        f"/api/v1/orders/{order_id}", json={"status": "completed"}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 403


async def test_user_cannot_touch_someone_elses_order(client):
    product_id = await create_product()
    alice = await create_user()
    bob = await create_user()
    order_id = await seed_order(bob.user_id, product_id)

    response = await client.delete(f"/api/v1/orders/{order_id}", headers=auth_headers(alice.user_id))

    assert response.status_code == 403


async def test_admin_completes_pending_order_and_buyer_gets_products(client):
    product_id = await create_product()
    admin = await create_user(role="admin")
    buyer = await create_user()
    order_id = await seed_order(buyer.user_id, product_id, qty=3)

    response = await client.put(
        f"/api/v1/orders/{order_id}",
        json={"status": "completed"},
        headers=auth_headers(admin.user_id, role="admin"),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["ownershipTransferred"] is True
    assert (await get_user(buyer.user_id)).owned_products == [product_id] * 3


async def test_admin_cancel_keeps_transferred_products(client):
    product_id = await create_product()
    admin = await create_user(role="admin")
    buyer = await create_user()
    order_id = await seed_order(buyer.user_id, product_id)
    headers = auth_headers(admin.user_id, role="admin")
    await client.put(f"/api/v1/orders/{order_id}", json={"status": "completed"}, headers=headers)

    response = await client.delete(f"/api/v1/orders/{order_id}", headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert (await get_user(buyer.user_id)).owned_products == [product_id]


async def test_cancelled_order_is_terminal(client):
    product_id = await create_product()
    admin = await create_user(role="admin")
    order_id = await seed_order(admin.user_id, product_id, status="cancelled")

    response = await client.put(
        f"/api/v1/orders/{order_id}",
        json={"status": "completed"},
        headers=auth_headers(admin.user_id, role="admin"),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_STATE"


async def test_unknown_status_in_update_is_rejected(client):
    product_id = await create_product()
    user = await create_user()
    order_id = await seed_order(user.user_id, product_id)

    response = await client.put(
        f"/api/v1/orders/{order_id}", json={"status": "shipped"}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 400


class SnapshotOrderRepository(OrderRepositoryImpl):
    """Serves one earlier read of the order before going back to the database."""

    def __init__(self, session, snapshot):
        super().__init__(session)
        self.snapshot = snapshot

    async def get_by_id(self, order_id):
        if self.snapshot is not None:
            snapshot, self.snapshot = self.snapshot, None
            return snapshot
        return await super().get_by_id(order_id)


async def test_cancel_based_on_outdated_read_cannot_undo_admin_completion(client):
    product_id = await create_product()
    admin = await create_user(role="admin")
    buyer = await create_user()
    order_id = await seed_order(buyer.user_id, product_id)
    async with session_manager.get_session() as session:
        read_while_pending = await OrderRepositoryImpl(session).get_by_id(order_id)

    completed = await client.put(
        f"/api/v1/orders/{order_id}",
        json={"status": "completed"},
        headers=auth_headers(admin.user_id, role="admin"),
    )
    assert completed.status_code == 200

    async with session_manager.get_session() as session:
        orders = SnapshotOrderRepository(session, read_while_pending)
        service = OrderService(
            order_repository=orders,
            product_repository=ProductRepositoryImpl(session),
            fulfillment_service=FulfillmentService(
                user_repository=UserRepositoryImpl(session), order_repository=orders
            ),
        )
        with pytest.raises(ConflictError):
            await service.cancel_order(CurrentUser(user_id=buyer.user_id), order_id)

    fetched = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(buyer.user_id))
    assert fetched.json()["status"] == "completed"
    assert fetched.json()["isActive"] is True


async def test_cancelling_completed_order_with_pending_transfer_grants_units_first(client, monkeypatch):
    product_id = await create_product(price="3.00")
    admin = await create_user(role="admin")
    buyer = await create_user(cart=[{"product_id": product_id, "qty": 2}])
    admin_headers = auth_headers(admin.user_id, role="admin")

    async def always_conflict(self, user_id, expected_version, changes):
        raise ConflictError("User was modified concurrently", resource_type="user", conflict_field="version")

    original = UserRepositoryImpl.update_versioned
    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", always_conflict)

    checkout = await client.post("/api/v1/cart/checkout", headers=auth_headers(buyer.user_id))
    order_id = checkout.json()["orderId"]
    assert checkout.json()["ownershipTransferred"] is False

    blocked = await client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers)
    assert blocked.status_code == 409
    still = await client.get(f"/api/v1/orders/{order_id}", headers=admin_headers)
    assert still.json()["status"] == "completed"

    monkeypatch.setattr(UserRepositoryImpl, "update_versioned", original)
    cancelled = await client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers)

    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["ownershipTransferred"] is True
    assert (await get_user(buyer.user_id)).owned_products == [product_id, product_id]
    assert (await run_reconciliation())["scanned"] == 0
