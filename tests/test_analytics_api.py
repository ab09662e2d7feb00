# 📄 File: tests/test_analytics_api.py
# 🧪 Purpose (Technical Summary):
# Analytics endpoints: ownership scoping, pond access rules, window validation,
# export shape and per-pond analytics.

from datetime import datetime, timedelta, timezone

from tests.conftest import auth_headers, create_farm, create_pond, create_scan, create_user


def hours_ago(hours: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=hours)


async def farm_with_pond(owner_id: str):
    farm_id = await create_farm(owner_id)
    pond_id = await create_pond(farm_id)
    return farm_id, pond_id


async def test_health_trends_cover_only_the_callers_ponds(client):
    owner = await create_user()
    stranger = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)
    _, foreign_pond = await farm_with_pond(stranger.user_id)
    await create_scan(pond_id, hours_ago(2), health_score=80)
    await create_scan(pond_id, hours_ago(2.5), health_score=90)
    await create_scan(foreign_pond, hours_ago(2), health_score=10)

    response = await client.get("/api/v1/analytics/health-trends", headers=auth_headers(owner.user_id))

    assert response.status_code == 200
    body = response.json()
    assert set(body["period"]) == {"from", "to"}
    assert sum(point["count"] for point in body["trends"]) == 2
    assert all(point["avgHealthScore"] >= 80 for point in body["trends"])


async def test_inactive_ponds_and_old_scans_are_excluded(client):
    owner = await create_user()
    farm_id, pond_id = await farm_with_pond(owner.user_id)
    closed_pond = await create_pond(farm_id, is_active=False)
    await create_scan(pond_id, hours_ago(1), health_score=50)
    await create_scan(pond_id, hours_ago(24 * 40), health_score=50)
    await create_scan(closed_pond, hours_ago(1), health_score=50)

    response = await client.get("/api/v1/analytics/scan-frequency", headers=auth_headers(owner.user_id))

    assert response.json()["totalScans"] == 1


async def test_user_without_farms_gets_empty_results(client):
    user = await create_user()

    response = await client.get("/api/v1/analytics/health-trends", headers=auth_headers(user.user_id))

    assert response.status_code == 200
    assert response.json()["trends"] == []


async def test_scan_frequency_average_uses_window_length(client):
    owner = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)
    for hours in (1, 2, 3):
        await create_scan(pond_id, hours_ago(hours))

    response = await client.get(
        "/api/v1/analytics/scan-frequency", params={"days": 10}, headers=auth_headers(owner.user_id)
    )

    body = response.json()
    assert body["totalScans"] == 3
    assert body["avgDailyScans"] == 0.3
    assert sum(point["count"] for point in body["frequency"]) == 3


async def test_days_must_be_in_range(client):
    user = await create_user()
    headers = auth_headers(user.user_id)

    too_small = await client.get("/api/v1/analytics/health-trends", params={"days": 0}, headers=headers)
    too_large = await client.get("/api/v1/analytics/health-trends", params={"days": 366}, headers=headers)

    assert too_small.status_code == 400
    assert too_large.status_code == 400


async def test_pond_filter_of_another_users_pond_is_forbidden(client):
    owner = await create_user()
    stranger = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)

    response = await client.get(
        "/api/v1/analytics/health-trends", params={"pondId": pond_id}, headers=auth_headers(stranger.user_id)
    )

    assert response.status_code == 403


async def test_admin_may_read_any_pond(client):
    owner = await create_user()
    admin = await create_user(role="admin")
    _, pond_id = await farm_with_pond(owner.user_id)
    await create_scan(pond_id, hours_ago(1), health_score=42)

    response = await client.get(
        "/api/v1/analytics/health-trends",
        params={"pondId": pond_id},
        headers=auth_headers(admin.user_id, role="admin"),
    )

    assert response.status_code == 200
    assert response.json()["trends"][0]["avgHealthScore"] == 42


async def test_missing_or_inactive_pond_is_not_found(client):
    owner = await create_user()
    farm_id = await create_farm(owner.user_id)
    inactive = await create_pond(farm_id, is_active=False)
    headers = auth_headers(owner.user_id)

    missing = await client.get("/api/v1/analytics/scan-frequency", params={"pondId": "nope"}, headers=headers)
    closed = await client.get("/api/v1/analytics/scan-frequency", params={"pondId": inactive}, headers=headers)

    assert missing.status_code == 404
    assert closed.status_code == 404


async def test_export_returns_attachment_with_newest_scan_first(client):
    owner = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)
    older = await create_scan(pond_id, hours_ago(5), health_score=70, metrics={"ph": 7.1})
    newer = await create_scan(pond_id, hours_ago(1), health_score=75, metrics={"ph": 7.3})

    response = await client.get("/api/v1/analytics/export", headers=auth_headers(owner.user_id))

    assert response.status_code == 200
    assert response.headers["Content-Disposition"].startswith("attachment;")
    body = response.json()
    assert body["farms"] == 1
    assert body["ponds"] == 1
    assert body["totalScans"] == 2
    assert set(body["period"]) == {"from", "to"}
    assert [item["id"] for item in body["scans"]] == [newer, older]
    first = body["scans"][0]
    assert first["pond"] == pond_id
    assert first["deviceId"] == "dev-1"
    assert first["healthScore"] == 75
    assert first["metrics"] == {"ph": 7.3}


async def test_pond_analytics_window(client):
    owner = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)
    await create_scan(pond_id, hours_ago(1), metrics={"ph": 7.0, "temp": 20})
    await create_scan(pond_id, hours_ago(2), metrics={"ph": 8.0})
    await create_scan(pond_id, hours_ago(24 * 10), metrics={"ph": 1.0})

    since = hours_ago(24 * 3).isoformat()
    response = await client.get(
        f"/api/v1/ponds/{pond_id}/analytics", params={"from": since}, headers=auth_headers(owner.user_id)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["pond"]["pondId"] == pond_id
    assert body["totalScans"] == 2
    assert body["avgMetrics"] == {"ph": 7.5, "temp": 20.0}
    assert sum(point["count"] for point in body["trend"]) == 2


async def test_pond_analytics_defaults_to_last_thirty_days(client):
    owner = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)
    await create_scan(pond_id, hours_ago(24 * 29))
    await create_scan(pond_id, hours_ago(24 * 31))

    response = await client.get(f"/api/v1/ponds/{pond_id}/analytics", headers=auth_headers(owner.user_id))

    assert response.json()["totalScans"] == 1


async def test_pond_analytics_rejects_inverted_window(client):
    owner = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)

    response = await client.get(
        f"/api/v1/ponds/{pond_id}/analytics",
        params={"from": "2026-02-01T00:00:00Z", "to": "2026-01-01T00:00:00Z"},
        headers=auth_headers(owner.user_id),
    )

    assert response.status_code == 400


async def test_pond_analytics_for_someone_elses_pond(client):
    owner = await create_user()
    stranger = await create_user()
    _, pond_id = await farm_with_pond(owner.user_id)

    response = await client.get(f"/api/v1/ponds/{pond_id}/analytics", headers=auth_headers(stranger.user_id))

    assert response.status_code == 403


async def test_health_endpoint_is_public(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]
