"""Bank account aggregate for testing."""

from decimal import Decimal

from pydantic import BaseModel

from vellum.domain import AggregateRoot
from vellum.routing import applies_event


# Events
class AccountOpened(BaseModel):
    owner: str


class MoneyDeposited(BaseModel):
    amount: Decimal


class MoneyWithdrawn(BaseModel):
    amount: Decimal


# Notifications
class WithdrawalRejected(BaseModel):
    requested: Decimal
    balance: Decimal


# Aggregate
class BankAccount(AggregateRoot):
    balance: Decimal = Decimal("0.00")
    owner: str = ""

    def open(self, owner: str) -> None:
        if self.owner:
            raise ValueError("Account already opened")
        self.emit(AccountOpened(owner=owner))

    def deposit(self, amount: Decimal) -> None:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        self.emit(MoneyDeposited(amount=amount))

    def withdraw(self, amount: Decimal) -> bool:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        if amount > self.balance:
            self.notify(WithdrawalRejected(requested=amount, balance=self.balance))
            return False
        self.emit(MoneyWithdrawn(amount=amount))
        return True

    @applies_event
    def apply_opened(self, evt: AccountOpened) -> None:
        self.owner = evt.owner

    @applies_event
    def apply_deposited(self, event: MoneyDeposited) -> None:
        self.balance += event.amount

    @applies_event
    def apply_withdrawn(self, event: MoneyWithdrawn) -> None:
        self.balance -= event.amount
