from __future__ import annotations

import uuid

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.bookings.models import ClientBooking
from app.core.exceptions import BookingNotFound


async def find_booking(db: AsyncSession, booking_id: uuid.UUID) -> ClientBooking | None:
    return await db.get(ClientBooking, booking_id)


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> ClientBooking:
    booking = await find_booking(db, booking_id)
    if not booking:
        raise BookingNotFound()
    return booking


def _appended_payments(dialect_name: str, payment_id: str):
    if dialect_name == "postgresql":
        return ClientBooking.payments.op("||")(func.jsonb_build_array(payment_id))
    return func.json_insert(ClientBooking.payments, "$[#]", payment_id)


async def attach_payment(
    db: AsyncSession, booking_id: uuid.UUID, payment_id: uuid.UUID
) -> None:
    """Append a ledger entry id to the booking; persisted on the caller's commit.

    The append runs in the database so concurrent payments on one booking
    never overwrite each other's ids.
    """
    dialect_name = db.get_bind().dialect.name
    stmt = (
        update(ClientBooking)
        .where(ClientBooking.id == booking_id)
        .values(payments=_appended_payments(dialect_name, str(payment_id)))
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise BookingNotFound()
