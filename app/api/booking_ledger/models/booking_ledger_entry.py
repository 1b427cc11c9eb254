from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import false, func
from sqlmodel import Field, SQLModel


class BookingLedgerEntry(SQLModel, table=True):
    __tablename__ = "booking_ledger"
    __table_args__ = (
        Index("idx_booking_ledger_client_date", "client_id", "date"),
        Index("idx_booking_ledger_type_method", "type", "method"),
        Index("idx_booking_ledger_deleted_date", "is_deleted", "date"),
        Index("idx_booking_ledger_created_by_date", "created_by", "date"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    transaction_id: str = Field(
        sa_column=Column("transaction_id", String(40), unique=True, nullable=False)
    )

    client_id: uuid.UUID = Field(nullable=False, index=True)

    date: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
    amount: Decimal = Field(sa_column=Column(Numeric(14, 2), nullable=False))
    demand: Decimal = Field(sa_column=Column(Numeric(14, 2), nullable=False))
    description: str = Field(sa_column=Column(String(500), nullable=False))

    type: str = Field(sa_column=Column(String(30), nullable=False))
    method: str = Field(sa_column=Column(String(30), nullable=False))
    payment_details: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )

    stage_percentage: Decimal | None = Field(
        default=None, sa_column=Column(Numeric(5, 2))
    )

    from_account: str | None = Field(default=None, sa_column=Column(String(150)))
    to_account: str = Field(sa_column=Column(String(100), nullable=False))

    created_by: str = Field(sa_column=Column(String(100), nullable=False))
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, server_default=func.now()),
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(
            DateTime,
            nullable=False,
            server_default=func.now(),
            onupdate=func.now(),
        ),
    )

    is_deleted: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=false(), index=True),
    )
    deleted_by: str | None = Field(default=None, sa_column=Column(String(100)))
    deleted_date: datetime | None = Field(default=None, sa_column=Column(DateTime))
    deletion_reason: str | None = Field(default=None, sa_column=Column(Text))
