from __future__ import annotations

from datetime import date
from typing import Any
import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.booking_ledger.helpers import parse_enum, to_entry_response
from app.api.booking_ledger.schemas import (
    DeletePaymentRequest,
    LedgerFilters,
    LedgerListResponse,
    PaymentEntryResponse,
    PaymentMethod,
    PaymentType,
)
from app.api.booking_ledger.service import (
    create_payment,
    list_payments,
    load_listing_context,
    parse_create_request,
    restore_payment,
    soft_delete_payment,
)
from app.api.bookings.helpers import to_booking_summary
from app.core.messages import SuccessMessage
from app.core.request_context import UserContext, actor_name, get_user_context
from app.db.main import get_session
from app.utils.response import ApiResponse, MetaData, build_pagination, success_response

booking_ledger_router = APIRouter()


@booking_ledger_router.post(
    "",
    response_model=ApiResponse[PaymentEntryResponse],
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_ledger_payment(
    raw: dict[str, Any] = Body(...),
    user_ctx: UserContext = Depends(get_user_context),
    session: AsyncSession = Depends(get_session),
):
    payload = parse_create_request(raw)
    entry = await create_payment(
        session,
        payload,
        created_by=actor_name(user_ctx, payload.created_by),
    )
    return success_response(
        to_entry_response(entry),
        message=SuccessMessage.PAYMENT_CREATED,
        status_code=status.HTTP_201_CREATED,
    )


@booking_ledger_router.get(
    "/client/{client_id}",
    response_model=LedgerListResponse,
    response_model_by_alias=True,
)
async def get_ledger_by_client(
    client_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    from_date: date | None = Query(None, alias="fromDate"),
    to_date: date | None = Query(None, alias="toDate"),
    payment_type: str | None = Query(None, alias="type"),
    method: str | None = Query(None),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    user_ctx: UserContext = Depends(get_user_context),
    session: AsyncSession = Depends(get_session),
):
    filters = LedgerFilters(
        client_id=client_id,
        from_date=from_date,
        to_date=to_date,
        payment_type=parse_enum(PaymentType, payment_type),
        method=parse_enum(PaymentMethod, method),
        include_deleted=include_deleted,
    )
    rows, total, summary = await list_payments(session, filters, page=page, limit=limit)
    booking, bank_accounts = await load_listing_context(session, filters, rows)

    return LedgerListResponse(
        success=True,
        statusCode=status.HTTP_200_OK,
        message=SuccessMessage.PAYMENTS_FETCHED,
        data=[to_entry_response(row, bank_accounts.get(row.to_account)) for row in rows],
        meta=MetaData(
            pagination=build_pagination(page, limit, total),
            filters=filters.model_dump(mode="json", exclude={"client_id"}, exclude_none=True),
        ),
        summary=summary,
        booking=to_booking_summary(booking) if booking else None,
    )


@booking_ledger_router.delete(
    "/{payment_id}",
    response_model=ApiResponse[PaymentEntryResponse],
    response_model_by_alias=True,
)
async def delete_ledger_payment(
    payment_id: uuid.UUID,
    payload: DeletePaymentRequest | None = Body(default=None),
    user_ctx: UserContext = Depends(get_user_context),
    session: AsyncSession = Depends(get_session),
):
    payload = payload or DeletePaymentRequest()
    entry = await soft_delete_payment(
        session,
        payment_id,
        deleted_by=actor_name(user_ctx, payload.deleted_by),
        reason=payload.reason,
    )
    return success_response(
        to_entry_response(entry),
        message=SuccessMessage.PAYMENT_DELETED,
    )


@booking_ledger_router.patch(
    "/{payment_id}/restore",
    response_model=ApiResponse[PaymentEntryResponse],
    response_model_by_alias=True,
)
async def restore_ledger_payment(
    payment_id: uuid.UUID,
    user_ctx: UserContext = Depends(get_user_context),
    session: AsyncSession = Depends(get_session),
):
    entry = await restore_payment(session, payment_id)
    return success_response(
        to_entry_response(entry),
        message=SuccessMessage.PAYMENT_RESTORED,
    )
