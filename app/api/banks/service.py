from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.banks.models import BankAccount
from app.api.banks.schemas import BankAccountCreateRequest
from app.core.exceptions import BankAccountNotFound, GlobalException
from app.core.messages import ErrorMessage
from app.core.middlewares import logger
from app.core.security import encrypt_field


class BankEncryptionFailed(GlobalException):
    status_code = 500
    error_code = "bank_encryption_failed"
    message = ErrorMessage.BANK_ENCRYPTION_FAILED


async def create_bank_account(
    db: AsyncSession, payload: BankAccountCreateRequest
) -> BankAccount:
    try:
        account = BankAccount(
            project_id=payload.project_id,
            holder_name=encrypt_field(payload.holder_name),
            account_number=encrypt_field(payload.account_number),
            name=encrypt_field(payload.name),
            branch=encrypt_field(payload.branch),
            ifsc_code=encrypt_field(payload.ifsc_code.upper()),
            account_type=payload.account_type.value,
        )
    except ValueError as exc:
        logger.error("Bank encryption error: %s", exc)
        raise BankEncryptionFailed() from exc

    db.add(account)
    await db.commit()
    await db.refresh(account)
    logger.info("Bank account %s created", account.id)
    return account


async def list_bank_accounts(db: AsyncSession) -> list[BankAccount]:
    stmt = select(BankAccount).order_by(BankAccount.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_bank_account(db: AsyncSession, account_id: uuid.UUID) -> BankAccount:
    account = await db.get(BankAccount, account_id)
    if not account:
        raise BankAccountNotFound()
    return account


async def find_bank_accounts(
    db: AsyncSession, references: set[str]
) -> dict[str, BankAccount]:
    """Map ledger `to_account` references to bank accounts; unknown ids are skipped."""
    ids: list[uuid.UUID] = []
    for ref in references:
        try:
            ids.append(uuid.UUID(ref))
        except (TypeError, ValueError):
            continue
    if not ids:
        return {}

    stmt = select(BankAccount).where(BankAccount.id.in_(ids))
    result = await db.execute(stmt)
    return {str(account.id): account for account in result.scalars().all()}
