from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field


class BookingSummary(BaseModel):
    id: UUID
    applicant: str
    project: str
    unit: str | None = None
    phone_no: Annotated[str | None, Field(alias="phoneNo")] = None
    email: str | None = None

    model_config = {"populate_by_name": True}
