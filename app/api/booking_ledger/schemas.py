from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    ValidationInfo,
    field_validator,
)

from app.api.banks.schemas import BankAccountSummary
from app.api.bookings.schemas import BookingSummary
from app.utils.response import ApiResponse

AMOUNT_CEILING = Decimal("999999999")


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    BANK_TRANSFER = "bank-transfer"
    ONLINE_PAYMENT = "online-payment"
    UPI = "upi"
    DEMAND_DRAFT = "demand-draft"
    NEFT = "neft"
    RTGS = "rtgs"
    IMPS = "imps"


class PaymentType(str, Enum):
    SCHEDULE_PAYMENT = "schedule-payment"
    ADVANCE = "advance"
    PENALTY = "penalty"
    ADJUSTMENT = "adjustment"
    REFUND = "refund"


class ChequeStatus(str, Enum):
    ISSUED = "issued"
    CLEARED = "cleared"
    BOUNCED = "bounced"
    CANCELLED = "cancelled"


def _parse_calendar_date(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.combine(date.fromisoformat(value.strip()), time.min)
    return value


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Accepts "YYYY-MM-DD" or a full ISO timestamp; stored as naive UTC.
LedgerDateTime = Annotated[
    datetime, BeforeValidator(_parse_calendar_date), AfterValidator(_naive_utc)
]

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ---------- Payment detail variants ----------

class PaymentDetailsPayload(BaseModel):
    """Every detail field any method may carry, all optional.

    Requiredness per method is enforced by the variants below.
    """

    reference_number: Annotated[
        str | None, Field(alias="referenceNumber", min_length=1, max_length=50)
    ] = None
    bank_name: Annotated[
        str | None, Field(alias="bankName", min_length=2, max_length=100)
    ] = None
    cheque_number: Annotated[
        str | None, Field(alias="chequeNumber", min_length=1, max_length=20)
    ] = None
    cheque_date: Annotated[LedgerDateTime | None, Field(alias="chequeDate")] = None
    due_date: Annotated[LedgerDateTime | None, Field(alias="dueDate")] = None
    cheque_status: Annotated[ChequeStatus | None, Field(alias="chequeStatus")] = None
    transaction_id: Annotated[
        str | None, Field(alias="transactionId", min_length=1, max_length=100)
    ] = None
    transaction_date: Annotated[
        LedgerDateTime | None, Field(alias="transactionDate")
    ] = None
    notes: Annotated[str | None, Field(max_length=500)] = None

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class _DetailsVariant(BaseModel):
    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class ChequeDetails(_DetailsVariant):
    cheque_number: Annotated[str, Field(alias="chequeNumber", min_length=1, max_length=20)]
    bank_name: Annotated[str, Field(alias="bankName", min_length=2, max_length=100)]
    cheque_date: Annotated[LedgerDateTime, Field(alias="chequeDate")]
    due_date: Annotated[LedgerDateTime, Field(alias="dueDate")]
    cheque_status: Annotated[ChequeStatus | None, Field(alias="chequeStatus")] = None
    notes: Annotated[str | None, Field(max_length=500)] = None

    @field_validator("due_date")
    @classmethod
    def due_date_not_before_cheque_date(cls, value: datetime, info: ValidationInfo) -> datetime:
        cheque_date = info.data.get("cheque_date")
        if cheque_date is not None and value < cheque_date:
            raise ValueError("Due date cannot be before cheque date")
        return value


class OnlineDetails(_DetailsVariant):
    transaction_id: Annotated[str, Field(alias="transactionId", min_length=1, max_length=100)]
    transaction_date: Annotated[LedgerDateTime, Field(alias="transactionDate")]
    reference_number: Annotated[
        str | None, Field(alias="referenceNumber", min_length=1, max_length=50)
    ] = None
    notes: Annotated[str | None, Field(max_length=500)] = None


class BankTransferDetails(_DetailsVariant):
    reference_number: Annotated[
        str, Field(alias="referenceNumber", min_length=1, max_length=50)
    ]
    bank_name: Annotated[str, Field(alias="bankName", min_length=2, max_length=100)]
    transaction_date: Annotated[LedgerDateTime, Field(alias="transactionDate")]
    notes: Annotated[str | None, Field(max_length=500)] = None


class PlainDetails(_DetailsVariant):
    reference_number: Annotated[
        str | None, Field(alias="referenceNumber", min_length=1, max_length=50)
    ] = None
    bank_name: Annotated[
        str | None, Field(alias="bankName", min_length=2, max_length=100)
    ] = None
    notes: Annotated[str | None, Field(max_length=500)] = None


PAYMENT_DETAIL_VARIANTS: dict[PaymentMethod, type[_DetailsVariant]] = {
    PaymentMethod.CHEQUE: ChequeDetails,
    PaymentMethod.UPI: OnlineDetails,
    PaymentMethod.ONLINE_PAYMENT: OnlineDetails,
    PaymentMethod.NEFT: BankTransferDetails,
    PaymentMethod.RTGS: BankTransferDetails,
    PaymentMethod.IMPS: BankTransferDetails,
    PaymentMethod.BANK_TRANSFER: BankTransferDetails,
    PaymentMethod.CASH: PlainDetails,
    PaymentMethod.DEMAND_DRAFT: PlainDetails,
}


# ---------- Requests ----------

class CreatePaymentRequest(BaseModel):
    client_id: Annotated[UUID, Field(alias="clientId")]
    date: LedgerDateTime | None = None
    amount: Annotated[Decimal, Field(gt=0, le=AMOUNT_CEILING, decimal_places=2)]
    demand: Annotated[Decimal, Field(ge=0, le=AMOUNT_CEILING, decimal_places=2)]
    description: Annotated[str, Field(min_length=1, max_length=500)]
    type: PaymentType
    method: PaymentMethod
    payment_details: Annotated[
        PaymentDetailsPayload,
        Field(alias="paymentDetails", default_factory=PaymentDetailsPayload),
    ]
    stage_percentage: Annotated[
        Decimal | None, Field(alias="stagePercentage", ge=0, le=100, decimal_places=2)
    ] = None
    from_account: Annotated[str | None, Field(alias="fromAccount", max_length=150)] = None
    to_account: Annotated[str, Field(alias="toAccount", min_length=1, max_length=100)]
    created_by: Annotated[str | None, Field(alias="createdBy", max_length=100)] = None

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class DeletePaymentRequest(BaseModel):
    reason: Annotated[str | None, Field(max_length=500)] = None
    deleted_by: Annotated[str | None, Field(alias="deletedBy", max_length=100)] = None

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class LedgerFilters(BaseModel):
    client_id: UUID
    from_date: date | None = None
    to_date: date | None = None
    payment_type: PaymentType | None = None
    method: PaymentMethod | None = None
    include_deleted: bool = False


# ---------- Responses ----------

class PaymentEntryResponse(BaseModel):
    id: UUID
    transaction_id: Annotated[str, Field(alias="transactionId")]
    client_id: Annotated[UUID, Field(alias="clientId")]
    date: datetime
    amount: Money
    demand: Money
    description: str
    type: str
    method: str
    payment_details: Annotated[dict, Field(alias="paymentDetails")]
    stage_percentage: Annotated[Money | None, Field(alias="stagePercentage")] = None
    from_account: Annotated[str | None, Field(alias="fromAccount")] = None
    to_account: Annotated[str, Field(alias="toAccount")]
    to_account_details: Annotated[
        BankAccountSummary | None, Field(alias="toAccountDetails")
    ] = None
    created_by: Annotated[str, Field(alias="createdBy")]
    created_at: Annotated[datetime, Field(alias="createdAt")]
    updated_at: Annotated[datetime | None, Field(alias="updatedAt")] = None
    is_deleted: Annotated[bool, Field(alias="isDeleted")]
    deleted_by: Annotated[str | None, Field(alias="deletedBy")] = None
    deleted_date: Annotated[datetime | None, Field(alias="deletedDate")] = None
    deletion_reason: Annotated[str | None, Field(alias="deletionReason")] = None

    model_config = {"populate_by_name": True}


class LedgerSummary(BaseModel):
    total_amount: Annotated[Money, Field(alias="totalAmount")]
    total_payments: Annotated[Money, Field(alias="totalPayments")]
    total_refunds: Annotated[Money, Field(alias="totalRefunds")]
    total_penalties: Annotated[Money, Field(alias="totalPenalties")]

    model_config = {"populate_by_name": True}


class LedgerListResponse(ApiResponse[list[PaymentEntryResponse]]):
    summary: LedgerSummary
    booking: BookingSummary | None = None
