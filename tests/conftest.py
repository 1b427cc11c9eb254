"""
Shared test configuration.

Environment is set before the application is imported; every test gets a
fresh in-memory SQLite database behind the get_session dependency.
"""

import base64
import os
import uuid
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENCRYPTION_KEY", base64.b64encode(b"k" * 32).decode("ascii"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app import app
from app.api.bookings.models import ClientBooking
from app.core.config import Config
from app.core.jwt import create_access_token
from app.db.main import get_session



@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def access_token():
    return create_access_token(user_id=str(uuid.uuid4()), username="sales.manager")


@pytest.fixture
async def client(session_factory, access_token):
    """Authenticated client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={Config.ACCESS_TOKEN_COOKIE: access_token},
    ) as ac:
        yield ac


@pytest.fixture
async def anonymous_client(session_factory):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def booking(db_session):
    booking = ClientBooking(
        applicant="Asha Kulkarni",
        project="Skyline Residency",
        wing="A",
        floor="7",
        unit="A-702",
        phone_no="9820012345",
        email="asha@example.com",
        booking_amt=Decimal("500000.00"),
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


@pytest.fixture
def cheque_payload(booking):
    return {
        "clientId": str(booking.id),
        "date": "2024-01-10",
        "amount": 50000,
        "demand": 100000,
        "description": "First slab payment",
        "type": "schedule-payment",
        "method": "cheque",
        "paymentDetails": {
            "chequeNumber": "000123",
            "bankName": "SBI",
            "chequeDate": "2024-01-01",
            "dueDate": "2024-01-15",
        },
        "toAccount": str(uuid.uuid4()),
    }


@pytest.fixture
def make_payload(booking):
    """Build a creation payload for any method/type with valid details."""

    details_by_method = {
        "cheque": {
            "chequeNumber": "000456",
            "bankName": "HDFC",
            "chequeDate": "2024-02-01",
            "dueDate": "2024-02-10",
        },
        "upi": {"transactionId": "UPI-7781", "transactionDate": "2024-02-01"},
        "online-payment": {"transactionId": "PG-1001", "transactionDate": "2024-02-01"},
        "neft": {"referenceNumber": "NEFT-55", "bankName": "ICICI", "transactionDate": "2024-02-01"},
        "rtgs": {"referenceNumber": "RTGS-12", "bankName": "ICICI", "transactionDate": "2024-02-01"},
        "imps": {"referenceNumber": "IMPS-90", "bankName": "ICICI", "transactionDate": "2024-02-01"},
        "bank-transfer": {"referenceNumber": "BT-3", "bankName": "Axis", "transactionDate": "2024-02-01"},
        "cash": {},
        "demand-draft": {},
    }

    def _make(amount=1000, payment_type="schedule-payment", method="cash", date="2024-02-01", **extra):
        payload = {
            "clientId": str(booking.id),
            "date": date,
            "amount": amount,
            "demand": 0,
            "description": f"{payment_type} via {method}",
            "type": payment_type,
            "method": method,
            "paymentDetails": dict(details_by_method[method]),
            "toAccount": "collection-account",
        }
        payload.update(extra)
        return payload

    return _make
