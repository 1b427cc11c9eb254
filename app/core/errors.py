class ErrorCode:
    INTERNAL_SERVER_ERROR = "internal_server_error"
    DATABASE_ERROR = "database_error"
    ACCESS_TOKEN_REQUIRED = "access_token_required"
    INVALID_TOKEN = "invalid_token"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
