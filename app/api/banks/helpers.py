from __future__ import annotations

from app.api.banks.models import BankAccount
from app.api.banks.schemas import BankAccountResponse, BankAccountSummary
from app.core.security import decrypt_field


def to_bank_response(account: BankAccount) -> BankAccountResponse:
    return BankAccountResponse(
        id=account.id,
        projectId=account.project_id,
        holderName=decrypt_field(account.holder_name),
        accountNumber=decrypt_field(account.account_number),
        name=decrypt_field(account.name),
        branch=decrypt_field(account.branch),
        ifscCode=decrypt_field(account.ifsc_code),
        accountType=account.account_type,
        createdAt=account.created_at,
    )


def to_bank_summary(account: BankAccount) -> BankAccountSummary:
    return BankAccountSummary(
        id=account.id,
        holderName=decrypt_field(account.holder_name),
        name=decrypt_field(account.name),
        branch=decrypt_field(account.branch),
        accountNumber=decrypt_field(account.account_number),
    )
