from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel


class BankAccount(SQLModel, table=True):
    """Destination account for ledger payments.

    holder_name, account_number, name, branch and ifsc_code hold
    ciphertext; see app.core.security.
    """

    __tablename__ = "bank_accounts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    project_id: uuid.UUID | None = Field(default=None, nullable=True)

    holder_name: str = Field(sa_column=Column(Text, nullable=False))
    account_number: str = Field(sa_column=Column(Text, nullable=False))
    name: str = Field(sa_column=Column(Text, nullable=False))
    branch: str = Field(sa_column=Column(Text, nullable=False))
    ifsc_code: str = Field(sa_column=Column(Text, nullable=False))
    account_type: str = Field(sa_column=Column(String(20), nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, server_default=func.now()),
    )
