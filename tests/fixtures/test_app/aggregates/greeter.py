"""Greeter aggregate: the smallest aggregate that both emits and notifies."""

from pydantic import BaseModel

from vellum.domain import AggregateRoot
from vellum.routing import applies_event


# Events
class GreeterCreated(BaseModel):
    salutation: str


class PersonGreeted(BaseModel):
    message: str


# Notifications
class GreetingSent(BaseModel):
    name: str


# Aggregate
class Greeter(AggregateRoot):
    salutation: str = "Hi"
    greetings: list[str] = []

    def set_up(self, salutation: str) -> None:
        self.emit(GreeterCreated(salutation=salutation))

    def greet_person(self, name: str) -> None:
        self.emit(PersonGreeted(message=f"{self.salutation} {name}"))
        self.notify(GreetingSent(name=name))

    @applies_event
    def apply_created(self, evt: GreeterCreated) -> None:
        self.salutation = evt.salutation

    @applies_event
    def apply_greeted(self, evt: PersonGreeted) -> None:
        self.greetings.append(evt.message)
