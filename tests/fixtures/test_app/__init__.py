"""Test application package."""

from .aggregates import (
    AccountOpened,
    BankAccount,
    Greeter,
    GreeterCreated,
    GreetingSent,
    MoneyDeposited,
    MoneyWithdrawn,
    PersonGreeted,
    WithdrawalRejected,
)
from .commands import (
    CreateGreeter,
    DepositMoney,
    GreetPerson,
    OpenAccount,
    TransferMoney,
    WithdrawMoney,
)
from .handlers import BankHandler, GreeterHandler

__all__ = [
    "AccountOpened",
    "BankAccount",
    "BankHandler",
    "CreateGreeter",
    "DepositMoney",
    "Greeter",
    "GreeterCreated",
    "GreeterHandler",
    "GreetingSent",
    "GreetPerson",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "OpenAccount",
    "PersonGreeted",
    "TransferMoney",
    "WithdrawalRejected",
    "WithdrawMoney",
]
