from __future__ import annotations

from app.api.bookings.models import ClientBooking
from app.api.bookings.schemas import BookingSummary


def to_booking_summary(booking: ClientBooking) -> BookingSummary:
    return BookingSummary(
        id=booking.id,
        applicant=booking.applicant,
        project=booking.project,
        unit=booking.unit,
        phoneNo=booking.phone_no,
        email=booking.email,
    )
