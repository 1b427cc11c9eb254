from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
import time as _time
import uuid

from pydantic import BaseModel, ValidationError

from app.api.banks.helpers import to_bank_summary
from app.api.banks.models import BankAccount
from app.api.booking_ledger.models import BookingLedgerEntry
from app.api.booking_ledger.schemas import (
    PAYMENT_DETAIL_VARIANTS,
    CreatePaymentRequest,
    PaymentEntryResponse,
    PaymentMethod,
    PaymentType,
)
from app.core.errors import ErrorCode
from app.utils.response import ErrorDetail


class SummaryBucket(str, Enum):
    PAYMENTS = "payments"
    REFUNDS = "refunds"
    PENALTIES = "penalties"


PAYMENT_TYPE_BUCKETS: dict[PaymentType, SummaryBucket] = {
    PaymentType.SCHEDULE_PAYMENT: SummaryBucket.PAYMENTS,
    PaymentType.ADVANCE: SummaryBucket.PAYMENTS,
    PaymentType.ADJUSTMENT: SummaryBucket.PAYMENTS,
    PaymentType.REFUND: SummaryBucket.REFUNDS,
    PaymentType.PENALTY: SummaryBucket.PENALTIES,
}


def classify_payment_type(payment_type: PaymentType | str) -> SummaryBucket:
    return PAYMENT_TYPE_BUCKETS[PaymentType(payment_type)]


def types_in_bucket(bucket: SummaryBucket) -> list[str]:
    return [t.value for t, b in PAYMENT_TYPE_BUCKETS.items() if b == bucket]


def generate_transaction_id() -> str:
    return f"TXN-{int(_time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def money(value: Decimal | str | int | float | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))


def day_bounds(
    from_date: date | None, to_date: date | None
) -> tuple[datetime | None, datetime | None]:
    """Inclusive start-of-day / end-of-day bounds for a date range filter."""
    start = datetime.combine(from_date, time.min) if from_date else None
    end = datetime.combine(to_date, time.max) if to_date else None
    return start, end


def parse_enum(enum_cls: type[Enum], value: str | None):
    """Return the enum member for value, or None when it is not recognised."""
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def validate_payment_details(
    method: PaymentMethod, details: dict
) -> tuple[BaseModel | None, list[ErrorDetail]]:
    """Validate a detail bag against the variant declared for method.

    Returns the parsed variant, or every violation named as
    ``paymentDetails.<field>``.
    """
    variant = PAYMENT_DETAIL_VARIANTS[method]
    try:
        return variant.model_validate(details), []
    except ValidationError as exc:
        errors = []
        for err in exc.errors():
            path = ".".join(str(part) for part in err["loc"])
            errors.append(
                ErrorDetail(
                    code=ErrorCode.VALIDATION_ERROR,
                    field=f"paymentDetails.{path}" if path else "paymentDetails",
                    message=_detail_message(method, err),
                )
            )
        return None, errors


def _detail_message(method: PaymentMethod, err: dict) -> str:
    if err["type"] == "missing":
        field = ".".join(str(part) for part in err["loc"])
        return f"{field} is required for {method.value} payments"
    return err["msg"]


def validate_create_payload(
    raw: dict,
) -> tuple[CreatePaymentRequest | None, list[ErrorDetail]]:
    """Validate a creation body in one pass.

    Field errors and the detail rules of the declared method are reported
    together, so a bad amount does not hide a missing cheque date.
    """
    payload = None
    errors: list[ErrorDetail] = []
    try:
        payload = CreatePaymentRequest.model_validate(raw)
    except ValidationError as exc:
        errors = [
            ErrorDetail(
                code=ErrorCode.VALIDATION_ERROR,
                field=".".join(str(part) for part in err["loc"]) or None,
                message=err["msg"],
            )
            for err in exc.errors()
        ]

    if payload is not None:
        method = payload.method
        details = payload.payment_details.model_dump(by_alias=True, exclude_none=True)
    else:
        method = parse_enum(PaymentMethod, raw.get("method"))
        details = raw.get("paymentDetails")
        if details is None:
            details = {}

    if method is not None and isinstance(details, dict):
        _, detail_errors = validate_payment_details(method, details)
        seen = {err.field for err in errors}
        errors.extend(err for err in detail_errors if err.field not in seen)

    return (payload if not errors else None), errors


def to_entry_response(
    entry: BookingLedgerEntry, bank_account: BankAccount | None = None
) -> PaymentEntryResponse:
    return PaymentEntryResponse(
        id=entry.id,
        transactionId=entry.transaction_id,
        clientId=entry.client_id,
        date=entry.date,
        amount=entry.amount,
        demand=entry.demand,
        description=entry.description,
        type=entry.type,
        method=entry.method,
        paymentDetails=entry.payment_details or {},
        stagePercentage=entry.stage_percentage,
        fromAccount=entry.from_account,
        toAccount=entry.to_account,
        toAccountDetails=to_bank_summary(bank_account) if bank_account else None,
        createdBy=entry.created_by,
        createdAt=entry.created_at,
        updatedAt=entry.updated_at,
        isDeleted=entry.is_deleted,
        deletedBy=entry.deleted_by,
        deletedDate=entry.deleted_date,
        deletionReason=entry.deletion_reason,
    )
