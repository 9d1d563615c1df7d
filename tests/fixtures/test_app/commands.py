"""Commands of the test application."""

from decimal import Decimal

from vellum.domain import Command, VersionedId


class CreateGreeter(Command):
    salutation: str = "Hi"


class GreetPerson(Command):
    target: VersionedId
    name: str


class OpenAccount(Command):
    owner: str


class DepositMoney(Command):
    target: VersionedId
    amount: Decimal


class WithdrawMoney(Command):
    target: VersionedId
    amount: Decimal


class TransferMoney(Command):
    source: VersionedId
    destination: VersionedId
    amount: Decimal
