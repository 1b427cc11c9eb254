from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import GlobalException
from app.core.errors import ErrorCode
from app.core.messages import ErrorMessage
from app.core.middlewares import logger
from app.utils.response import ErrorDetail, error_response


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


def _field_path(loc: tuple) -> str | None:
    # drop the request part ("body", "query", "path") and join the rest
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts) or None


def validation_error_details(errors) -> list[ErrorDetail]:
    return [
        ErrorDetail(
            code=ErrorCode.VALIDATION_ERROR,
            field=_field_path(tuple(err.get("loc", ()))),
            message=err.get("msg", ErrorMessage.VALIDATION_FAILED),
        )
        for err in errors
    ]


def register_exception_handlers(app: FastAPI):
    # ---------- Custom Domain Errors ----------
    @app.exception_handler(GlobalException)
    async def handle_global_exception(
        request: Request, exc: GlobalException
    ):
        errors = exc.errors or [
            ErrorDetail(
                code=exc.error_code,
                message=exc.message,
            )
        ]
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                message=exc.message,
                errors=errors,
                status_code=exc.status_code,
                trace_id=_trace_id(request),
            ).model_dump(),
        )

    # ---------- Request Validation (400) ----------
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ):
        details = validation_error_details(exc.errors())
        fields = ", ".join(d.field for d in details if d.field)
        message = ErrorMessage.VALIDATION_FAILED
        if fields:
            message = f"{message}: {fields}"
        return JSONResponse(
            status_code=400,
            content=error_response(
                message=message,
                errors=details,
                status_code=400,
                trace_id=_trace_id(request),
            ).model_dump(),
        )

    # ---------- HTTP Errors ----------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                message=str(exc.detail),
                errors=[
                    ErrorDetail(
                        code=ErrorCode.HTTP_ERROR,
                        message=str(exc.detail),
                    )
                ],
                status_code=exc.status_code,
                trace_id=_trace_id(request),
            ).model_dump(),
        )

    # ---------- Database Errors ----------
    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(
        request: Request, exc: SQLAlchemyError
    ):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response(
                message=ErrorMessage.DATABASE_FAILURE,
                errors=[
                    ErrorDetail(
                        code=ErrorCode.DATABASE_ERROR,
                        message=str(exc),
                    )
                ],
                status_code=500,
                trace_id=_trace_id(request),
            ).model_dump(),
        )

    # ---------- Catch-all (500) ----------
    @app.exception_handler(Exception)
    async def handle_unhandled_exception(
        request: Request, exc: Exception
    ):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response(
                message=ErrorMessage.SERVER_ERROR,
                errors=[
                    ErrorDetail(
                        code=ErrorCode.INTERNAL_SERVER_ERROR,
                        message=str(exc),
                    )
                ],
                status_code=500,
                trace_id=_trace_id(request),
            ).model_dump(),
        )
