from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field


class BankAccountType(str, Enum):
    SAVINGS = "savings"
    CURRENT = "current"


class BankAccountCreateRequest(BaseModel):
    project_id: Annotated[UUID | None, Field(alias="projectId")] = None
    holder_name: Annotated[str, Field(alias="holderName", min_length=1, max_length=150)]
    account_number: Annotated[str, Field(alias="accountNumber", min_length=1, max_length=34)]
    name: Annotated[str, Field(min_length=1, max_length=100)]
    branch: Annotated[str, Field(min_length=1, max_length=100)]
    ifsc_code: Annotated[
        str,
        Field(alias="ifscCode", pattern=r"^[A-Za-z]{4}0[A-Za-z0-9]{6}$"),
    ]
    account_type: Annotated[BankAccountType, Field(alias="accountType")]

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class BankAccountResponse(BaseModel):
    id: UUID
    project_id: Annotated[UUID | None, Field(alias="projectId")] = None
    holder_name: Annotated[str, Field(alias="holderName")]
    account_number: Annotated[str, Field(alias="accountNumber")]
    name: str
    branch: str
    ifsc_code: Annotated[str, Field(alias="ifscCode")]
    account_type: Annotated[str, Field(alias="accountType")]
    created_at: Annotated[datetime, Field(alias="createdAt")]

    model_config = {"populate_by_name": True}


class BankAccountSummary(BaseModel):
    id: UUID
    holder_name: Annotated[str, Field(alias="holderName")]
    name: str
    branch: str
    account_number: Annotated[str, Field(alias="accountNumber")]

    model_config = {"populate_by_name": True}
