"""
Health endpoint checks against the test engine.
"""

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.api import health

HEALTH_URL = "/api/v1/health/"


async def test_health_reports_database_disk_and_memory(anonymous_client, engine, monkeypatch):
    monkeypatch.setattr(health, "async_engine", engine)

    response = await anonymous_client.get(HEALTH_URL)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    checks = body["checks"]
    assert set(checks) == {"database", "disk", "memory"}
    assert checks["database"]["status"] == "up"
    assert checks["database"]["missing_tables"] == []
    assert checks["database"]["latency_ms"] >= 0
    assert 0 <= checks["disk"]["usage_percent"] <= 100
    assert 0 <= checks["memory"]["usage_percent"] <= 100


async def test_health_lists_missing_tables(anonymous_client, monkeypatch):
    empty_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(health, "async_engine", empty_engine)

    try:
        response = await anonymous_client.get(HEALTH_URL)
    finally:
        await empty_engine.dispose()

    body = response.json()
    assert body["status"] == "degraded"
    assert body["checks"]["database"]["status"] == "degraded"
    assert sorted(body["checks"]["database"]["missing_tables"]) == [
        "bank_accounts",
        "booking_ledger",
        "client_bookings",
    ]


async def test_health_reports_unreachable_database(anonymous_client, monkeypatch):
    async def database_down():
        return {"status": "down"}

    monkeypatch.setattr("app.api.health.routes.check_database", database_down)

    response = await anonymous_client.get(HEALTH_URL)

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["database"] == {"status": "down"}
