"""Test aggregates."""

from .bank_account import (
    AccountOpened,
    BankAccount,
    MoneyDeposited,
    MoneyWithdrawn,
    WithdrawalRejected,
)
from .greeter import Greeter, GreeterCreated, GreetingSent, PersonGreeted

__all__ = [
    "AccountOpened",
    "BankAccount",
    "Greeter",
    "GreeterCreated",
    "GreetingSent",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "PersonGreeted",
    "WithdrawalRejected",
]
