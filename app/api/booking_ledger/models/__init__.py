from app.api.booking_ledger.models.booking_ledger_entry import BookingLedgerEntry


__all__ = [
    "BookingLedgerEntry",
]
