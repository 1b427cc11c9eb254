from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import JSON, Column, DateTime, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel


class ClientBooking(SQLModel, table=True):
    __tablename__ = "client_bookings"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    date: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, server_default=func.now()),
    )

    applicant: str = Field(sa_column=Column(String(150), nullable=False))
    project: str = Field(sa_column=Column(String(150), nullable=False))
    wing: str | None = Field(default=None, sa_column=Column(String(50)))
    floor: str | None = Field(default=None, sa_column=Column(String(20)))
    unit: str | None = Field(default=None, sa_column=Column(String(50)))
    phone_no: str | None = Field(default=None, sa_column=Column(String(20)))
    email: str | None = Field(default=None, sa_column=Column(String(150)))

    booking_amt: Decimal = Field(
        default=Decimal("0.00"), sa_column=Column(Numeric(14, 2), nullable=False)
    )
    status: str = Field(
        default="booked", sa_column=Column(String(30), nullable=False, server_default="booked")
    )

    # ids of ledger entries credited against this booking
    payments: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, server_default=func.now()),
    )
