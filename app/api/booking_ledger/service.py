from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.api.banks.models import BankAccount
from app.api.banks.service import find_bank_accounts
from app.api.booking_ledger.helpers import (
    SummaryBucket,
    day_bounds,
    generate_transaction_id,
    money,
    types_in_bucket,
    validate_create_payload,
    validate_payment_details,
)
from app.api.booking_ledger.models import BookingLedgerEntry
from app.api.booking_ledger.schemas import (
    CreatePaymentRequest,
    LedgerFilters,
    LedgerSummary,
)
from app.api.bookings.models import ClientBooking
from app.api.bookings.service import attach_payment, find_booking, get_booking
from app.core.exceptions import (
    BookingNotFound,
    PaymentAlreadyDeleted,
    PaymentNotDeleted,
    PaymentNotFound,
    ValidationException,
)
from app.core.messages import ErrorMessage
from app.core.middlewares import logger


def _reject(method: str, client_id, errors: list) -> ValidationException:
    fields = ", ".join(err.field for err in errors if err.field)
    logger.warning("Rejected %s payment for booking %s: %s", method, client_id, fields)
    return ValidationException(
        message=f"{ErrorMessage.VALIDATION_FAILED}: {fields}",
        errors=errors,
    )


def parse_create_request(raw: dict) -> CreatePaymentRequest:
    payload, errors = validate_create_payload(raw)
    if errors:
        raise _reject(str(raw.get("method")), raw.get("clientId"), errors)
    return payload


async def create_payment(
    db: AsyncSession,
    payload: CreatePaymentRequest,
    created_by: str,
) -> BookingLedgerEntry:
    details, errors = validate_payment_details(
        payload.method,
        payload.payment_details.model_dump(by_alias=True, exclude_none=True),
    )
    if errors:
        raise _reject(payload.method.value, payload.client_id, errors)

    booking = await get_booking(db, payload.client_id)

    entry = BookingLedgerEntry(
        id=uuid.uuid4(),
        transaction_id=generate_transaction_id(),
        client_id=booking.id,
        date=payload.date or datetime.utcnow(),
        amount=payload.amount,
        demand=payload.demand,
        description=payload.description,
        type=payload.type.value,
        method=payload.method.value,
        payment_details=details.model_dump(mode="json", by_alias=True, exclude_none=True),
        stage_percentage=payload.stage_percentage,
        from_account=payload.from_account,
        to_account=payload.to_account,
        created_by=created_by,
    )
    db.add(entry)
    try:
        await attach_payment(db, booking.id, entry.id)
    except BookingNotFound:
        await db.rollback()
        raise
    await db.commit()
    await db.refresh(entry)

    logger.info(
        "Payment %s of %s recorded against booking %s",
        entry.transaction_id,
        entry.amount,
        booking.id,
    )
    return entry


def _filter_conditions(filters: LedgerFilters, include_deleted: bool) -> list:
    conditions = [BookingLedgerEntry.client_id == filters.client_id]
    if not include_deleted:
        conditions.append(BookingLedgerEntry.is_deleted.is_(False))

    start, end = day_bounds(filters.from_date, filters.to_date)
    if start is not None:
        conditions.append(BookingLedgerEntry.date >= start)
    if end is not None:
        conditions.append(BookingLedgerEntry.date <= end)

    if filters.payment_type is not None:
        conditions.append(BookingLedgerEntry.type == filters.payment_type.value)
    if filters.method is not None:
        conditions.append(BookingLedgerEntry.method == filters.method.value)
    return conditions


def _bucket_total(bucket: SummaryBucket):
    return func.coalesce(
        func.sum(
            case(
                (BookingLedgerEntry.type.in_(types_in_bucket(bucket)), BookingLedgerEntry.amount),
                else_=0,
            )
        ),
        0,
    )


async def summarize_payments(db: AsyncSession, filters: LedgerFilters) -> LedgerSummary:
    # deleted rows never count, whatever the listing shows
    stmt = select(
        func.coalesce(func.sum(BookingLedgerEntry.amount), 0),
        _bucket_total(SummaryBucket.PAYMENTS),
        _bucket_total(SummaryBucket.REFUNDS),
        _bucket_total(SummaryBucket.PENALTIES),
    ).where(*_filter_conditions(filters, include_deleted=False))

    total_amount, total_payments, total_refunds, total_penalties = (
        await db.execute(stmt)
    ).one()
    return LedgerSummary(
        totalAmount=money(total_amount),
        totalPayments=money(total_payments),
        totalRefunds=money(total_refunds),
        totalPenalties=money(total_penalties),
    )


async def list_payments(
    db: AsyncSession,
    filters: LedgerFilters,
    page: int,
    limit: int,
) -> tuple[list[BookingLedgerEntry], int, LedgerSummary]:
    conditions = _filter_conditions(filters, include_deleted=filters.include_deleted)

    stmt = (
        select(BookingLedgerEntry)
        .where(*conditions)
        .order_by(
            BookingLedgerEntry.date.desc(),
            BookingLedgerEntry.created_at.desc(),
            BookingLedgerEntry.id.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = list((await db.execute(stmt)).scalars().all())

    count_stmt = select(func.count()).select_from(BookingLedgerEntry).where(*conditions)
    total = (await db.execute(count_stmt)).scalar_one()

    summary = await summarize_payments(db, filters)
    return rows, total, summary


async def load_listing_context(
    db: AsyncSession,
    filters: LedgerFilters,
    rows: list[BookingLedgerEntry],
) -> tuple[ClientBooking | None, dict[str, BankAccount]]:
    booking = await find_booking(db, filters.client_id)
    bank_accounts = await find_bank_accounts(db, {row.to_account for row in rows})
    return booking, bank_accounts


async def get_payment(db: AsyncSession, payment_id: uuid.UUID) -> BookingLedgerEntry:
    entry = await db.get(BookingLedgerEntry, payment_id)
    if not entry:
        raise PaymentNotFound()
    return entry


async def soft_delete_payment(
    db: AsyncSession,
    payment_id: uuid.UUID,
    deleted_by: str,
    reason: str | None = None,
) -> BookingLedgerEntry:
    """Move an entry from active to deleted.

    The update only matches an active row, so a concurrent transition on the
    same entry makes this call fail with the conflict instead of overwriting.
    """
    entry = await get_payment(db, payment_id)
    if entry.is_deleted:
        raise PaymentAlreadyDeleted()

    stmt = (
        update(BookingLedgerEntry)
        .where(
            BookingLedgerEntry.id == payment_id,
            BookingLedgerEntry.is_deleted.is_(False),
        )
        .values(
            is_deleted=True,
            deleted_by=deleted_by,
            deleted_date=datetime.utcnow(),
            deletion_reason=reason,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        await db.rollback()
        raise PaymentAlreadyDeleted()

    await db.commit()
    await db.refresh(entry)
    logger.info(
        "Payment %s deleted by %s (%s)",
        entry.transaction_id,
        deleted_by,
        reason or "no reason given",
    )
    return entry


async def restore_payment(db: AsyncSession, payment_id: uuid.UUID) -> BookingLedgerEntry:
    entry = await get_payment(db, payment_id)
    if not entry.is_deleted:
        raise PaymentNotDeleted()

    stmt = (
        update(BookingLedgerEntry)
        .where(
            BookingLedgerEntry.id == payment_id,
            BookingLedgerEntry.is_deleted.is_(True),
        )
        .values(
            is_deleted=False,
            deleted_by=None,
            deleted_date=None,
            deletion_reason=None,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        await db.rollback()
        raise PaymentNotDeleted()

    await db.commit()
    await db.refresh(entry)
    logger.info("Payment %s restored", entry.transaction_id)
    return entry
