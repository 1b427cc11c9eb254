from app.api.bookings.models.client_booking import ClientBooking


__all__ = [
    "ClientBooking",
]
