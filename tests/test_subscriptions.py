# 📄 File: tests/test_subscriptions.py
# 🧪 Purpose (Technical Summary):
# Plan catalog, lazy free subscription, paid plan charging, cancellation rules,
# payment ledger ordering and the premium access check.

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from farmx.modules.subscriptions.domain.models.plan import build_plan_catalog
from farmx.modules.subscriptions.domain.models.subscription import PaymentRecord
from farmx.modules.subscriptions.infrastructure.database.models import SubscriptionModel
from farmx.shared.infrastructure.database.session import session_manager
from tests.conftest import auth_headers, create_user, get_user


async def test_plans_are_public(client):
    response = await client.get("/api/v1/subscriptions/plans")

    assert response.status_code == 200
    body = response.json()
    prices = {plan["plan"]: plan["price"] for plan in body["plans"]}
    assert prices == {"free": 0, "premium": 29.99, "enterprise": 99.99}
    assert body["periodDays"] == 30


async def test_current_creates_free_subscription_once(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    first = await client.get("/api/v1/subscriptions/current", headers=headers)
    second = await client.get("/api/v1/subscriptions/current", headers=headers)

    assert first.status_code == 200
    assert first.json()["plan"] == "free"
    assert first.json()["status"] == "active"
    assert first.json()["endDate"] is None
    assert first.json()["paymentHistory"] == []
    assert second.json()["subscriptionId"] == first.json()["subscriptionId"]
    assert (await get_user(user.user_id)).subscription_id == first.json()["subscriptionId"]


async def test_subscribe_to_paid_plan_records_payment(client):
    user = await create_user()

    response = await client.post(
        "/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["plan"] == "premium"
    assert body["status"] == "active"
    assert body["price"] == 29.99
    assert body["autoRenew"] is True
    assert body["endDate"] is not None
    start = datetime.fromisoformat(body["startDate"])
    end = datetime.fromisoformat(body["endDate"])
    assert (end - start).days == 30
    assert len(body["paymentHistory"]) == 1
    payment = body["paymentHistory"][0]
    assert payment["amount"] == 29.99
    assert payment["status"] == "success"
    assert payment["transactionId"].startswith("txn_")


async def test_subscribe_to_unknown_plan(client):
    user = await create_user()

    response = await client.post(
        "/api/v1/subscriptions/subscribe", json={"plan": "platinum"}, headers=auth_headers(user.user_id)
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_history_is_append_only_and_ordered(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    await client.post("/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=headers)
    await client.post("/api/v1/subscriptions/subscribe", json={"plan": "enterprise"}, headers=headers)
    await client.post("/api/v1/subscriptions/subscribe", json={"plan": "free"}, headers=headers)

    response = await client.get("/api/v1/subscriptions/history", headers=headers)

    body = response.json()
    assert body["count"] == 2
    assert [payment["amount"] for payment in body["payments"]] == [29.99, 99.99]
    assert len({payment["transactionId"] for payment in body["payments"]}) == 2

    current = (await client.get("/api/v1/subscriptions/current", headers=headers)).json()
    assert current["plan"] == "free"
    assert current["price"] == 0
    assert current["endDate"] is None


async def test_history_without_subscription_is_empty(client):
    user = await create_user()

    response = await client.get("/api/v1/subscriptions/history", headers=auth_headers(user.user_id))

    assert response.json() == {"payments": [], "count": 0}


async def test_cancel_paid_plan(client):
    user = await create_user()
    headers = auth_headers(user.user_id)
    await client.post("/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=headers)

    response = await client.put("/api/v1/subscriptions/cancel", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "cancelled"
    assert body["autoRenew"] is False
    assert body["plan"] == "premium"
    assert len(body["paymentHistory"]) == 1


async def test_cancel_free_plan_is_rejected(client):
    user = await create_user()
    headers = auth_headers(user.user_id)
    await client.get("/api/v1/subscriptions/current", headers=headers)

    response = await client.put("/api/v1/subscriptions/cancel", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "FREE_PLAN"


async def test_cancel_without_subscription(client):
    user = await create_user()

    response = await client.put("/api/v1/subscriptions/cancel", headers=auth_headers(user.user_id))

    assert response.status_code == 404


async def test_access_check(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    free = await client.get("/api/v1/subscriptions/access", headers=headers)
    await client.post("/api/v1/subscriptions/subscribe", json={"plan": "enterprise"}, headers=headers)
    paid = await client.get("/api/v1/subscriptions/access", headers=headers)
    await client.put("/api/v1/subscriptions/cancel", headers=headers)
    cancelled = await client.get("/api/v1/subscriptions/access", headers=headers)

    assert free.json() == {"plan": "free", "status": "active", "premium": False}
    assert paid.json() == {"plan": "enterprise", "status": "active", "premium": True}
    assert cancelled.json()["premium"] is False


def test_catalog_lookup_and_payment_record():
    catalog = build_plan_catalog("USD", 30)
    premium = catalog.get("premium")

    assert catalog.get("gold") is None
    assert catalog.get("free").is_paid is False
    assert premium.is_paid is True

    at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    record = PaymentRecord.charge(premium, at)
    assert record.amount == premium.price
    assert record.date == at
    assert record.status == "success"


async def test_concurrent_first_reads_create_one_subscription(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    responses = await asyncio.gather(
        *(client.get("/api/v1/subscriptions/current", headers=headers) for _ in range(8))
    )

    assert [response.status_code for response in responses] == [200] * 8
    assert len({response.json()["subscriptionId"] for response in responses}) == 1
    async with session_manager.get_session() as session:
        rows = await session.execute(
            select(func.count()).select_from(SubscriptionModel).where(SubscriptionModel.user_id == user.user_id)
        )
        assert rows.scalar_one() == 1


async def test_renewing_the_same_plan_appends_and_moves_end_date(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    first = (await client.post("/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=headers)).json()
    second = (await client.post("/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=headers)).json()

    assert second["plan"] == "premium"
    assert len(second["paymentHistory"]) == 2
    assert len({payment["transactionId"] for payment in second["paymentHistory"]}) == 2
    start = datetime.fromisoformat(second["startDate"])
    end = datetime.fromisoformat(second["endDate"])
    assert start >= datetime.fromisoformat(first["startDate"])
    assert end - start == timedelta(days=30)
    assert end >= datetime.fromisoformat(first["endDate"])


async def test_cancel_then_resubscribe_keeps_earlier_payments(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    premium = (await client.post("/api/v1/subscriptions/subscribe", json={"plan": "premium"}, headers=headers)).json()
    await client.put("/api/v1/subscriptions/cancel", headers=headers)
    response = await client.post("/api/v1/subscriptions/subscribe", json={"plan": "enterprise"}, headers=headers)

    body = response.json()
    assert body["status"] == "active"
    assert [payment["transactionId"] for payment in body["paymentHistory"]][0] == (
        premium["paymentHistory"][0]["transactionId"]
    )
    assert [payment["amount"] for payment in body["paymentHistory"]] == [29.99, 99.99]
