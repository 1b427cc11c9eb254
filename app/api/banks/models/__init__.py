from app.api.banks.models.bank_account import BankAccount


__all__ = [
    "BankAccount",
]
