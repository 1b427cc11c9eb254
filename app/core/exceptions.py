# app/core/exceptions.py
from app.core.messages import ErrorMessage
from app.utils.response import ErrorDetail

class GlobalException(Exception):
    status_code: int
    error_code: str
    message: str

    def __init__(
        self,
        message: str | None = None,
        errors: list[ErrorDetail] | None = None,
    ):
        if message:
            self.message = message
        self.errors = errors
        super().__init__(self.message)


class AccessTokenRequired(GlobalException):
    status_code = 401
    error_code = "access_token_required"
    message = ErrorMessage.ACCESS_TOKEN_MISSING


class InvalidToken(GlobalException):
    status_code = 401
    error_code = "invalid_token"
    message = ErrorMessage.INVALID_TOKEN


class AccountLocked(GlobalException):
    status_code = 401
    error_code = "account_locked"
    message = ErrorMessage.ACCOUNT_LOCKED


class ResourceNotFound(GlobalException):
    status_code = 404
    error_code = "not_found"
    message = "Requested resource not found"


class ValidationException(GlobalException):
    status_code = 400
    error_code = "validation_error"
    message = ErrorMessage.VALIDATION_FAILED


class BadRequest(GlobalException):
    status_code = 400
    error_code = "bad_request"
    message = "Bad request"


class BookingNotFound(ResourceNotFound):
    error_code = "booking_not_found"
    message = ErrorMessage.BOOKING_NOT_FOUND


class PaymentNotFound(ResourceNotFound):
    error_code = "payment_not_found"
    message = ErrorMessage.PAYMENT_NOT_FOUND


class BankAccountNotFound(ResourceNotFound):
    error_code = "bank_account_not_found"
    message = ErrorMessage.BANK_ACCOUNT_NOT_FOUND


# Lifecycle conflicts are surfaced as plain bad requests.
class PaymentAlreadyDeleted(BadRequest):
    error_code = "payment_already_deleted"
    message = ErrorMessage.PAYMENT_ALREADY_DELETED


class PaymentNotDeleted(BadRequest):
    error_code = "payment_not_deleted"
    message = ErrorMessage.PAYMENT_NOT_DELETED
