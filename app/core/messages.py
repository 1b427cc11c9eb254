class ErrorMessage:
    # ---------- Generic ----------
    SERVER_ERROR = "Internal server error"
    DATABASE_FAILURE = "Database operation failed"
    VALIDATION_FAILED = "Validation failed"

    # ---------- Auth ----------
    ACCESS_TOKEN_MISSING = "Access denied. No token provided"
    INVALID_TOKEN = "Invalid token"
    ACCOUNT_LOCKED = (
        "Your account has been locked. Please contact your administrator "
        "or try again later."
    )

    # ---------- Ledger ----------
    BOOKING_NOT_FOUND = "Client booking not found"
    PAYMENT_NOT_FOUND = "Payment not found"
    PAYMENT_ALREADY_DELETED = "Payment is already deleted"
    PAYMENT_NOT_DELETED = "Payment is not deleted"

    # ---------- Bank ----------
    BANK_ACCOUNT_NOT_FOUND = "Bank account not found"
    BANK_ENCRYPTION_FAILED = "Failed to encrypt bank details"


class SuccessMessage:
    PAYMENT_CREATED = "Payment created successfully"
    PAYMENTS_FETCHED = "Payments fetched successfully"
    PAYMENT_DELETED = "Payment deleted successfully"
    PAYMENT_RESTORED = "Payment restored successfully"

    BANK_ACCOUNT_CREATED = "Bank account created successfully"
    BANK_ACCOUNTS_FETCHED = "Bank accounts fetched successfully"
    BANK_ACCOUNT_FETCHED = "Bank account fetched successfully"
