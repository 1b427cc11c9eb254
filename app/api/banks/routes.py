from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.banks.helpers import to_bank_response
from app.api.banks.schemas import BankAccountCreateRequest, BankAccountResponse
from app.api.banks.service import create_bank_account, get_bank_account, list_bank_accounts
from app.core.messages import SuccessMessage
from app.core.request_context import get_user_context
from app.db.main import get_session
from app.utils.response import ApiResponse, success_response

banks_router = APIRouter(dependencies=[Depends(get_user_context)])


@banks_router.post(
    "",
    response_model=ApiResponse[BankAccountResponse],
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_bank(
    payload: BankAccountCreateRequest,
    session: AsyncSession = Depends(get_session),
):
    account = await create_bank_account(session, payload)
    return success_response(
        to_bank_response(account),
        message=SuccessMessage.BANK_ACCOUNT_CREATED,
        status_code=status.HTTP_201_CREATED,
    )


@banks_router.get(
    "",
    response_model=ApiResponse[list[BankAccountResponse]],
    response_model_by_alias=True,
)
async def get_banks(session: AsyncSession = Depends(get_session)):
    accounts = await list_bank_accounts(session)
    return success_response(
        [to_bank_response(account) for account in accounts],
        message=SuccessMessage.BANK_ACCOUNTS_FETCHED,
    )


@banks_router.get(
    "/{account_id}",
    response_model=ApiResponse[BankAccountResponse],
    response_model_by_alias=True,
)
async def get_bank(
    account_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    account = await get_bank_account(session, account_id)
    return success_response(
        to_bank_response(account),
        message=SuccessMessage.BANK_ACCOUNT_FETCHED,
    )
