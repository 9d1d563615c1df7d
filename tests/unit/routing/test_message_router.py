"""Tests for annotation-based message routing."""

from typing import Any

import pytest
from pydantic import BaseModel

from vellum.domain import AggregateRoot, Command
from vellum.routing import (
    COMMAND,
    EVENT,
    MessageRouter,
    applies_event,
    build_router,
    collect_routes,
    handles_command,
    raise_unhandled,
)


class Base(BaseModel):
    pass


class Derived(Base):
    pass


class Other(BaseModel):
    pass


class Counted(BaseModel):
    pass


class Counter(AggregateRoot):
    count: int = 0

    @applies_event
    def apply_counted(self, evt: Counted) -> None:
        self.count += 1


class DoubleCounter(Counter):
    @applies_event
    def apply_counted(self, evt: Counted) -> None:
        self.count += 2


class Ping(Command):
    pass


class Pong(Command):
    pass


class PingHandler:
    @handles_command
    def ping(self, cmd: Ping, suffix: str) -> str:
        return f"pong{suffix}"


def test_decorator_requires_type_annotation():
    with pytest.raises(ValueError, match="must have a type annotation"):

        @applies_event
        def apply(self, evt) -> None:
            pass


def test_decorator_requires_message_parameter():
    with pytest.raises(ValueError, match="must have at least 2 parameters"):

        @applies_event
        def apply(self) -> None:
            pass


def test_router_dispatches_subclasses_to_base_handler():
    router = MessageRouter(raise_unhandled("handler"))
    received: list[Any] = []
    router.register(Base, lambda instance, message: received.append(message))

    router.route(object(), Derived())

    assert isinstance(received[0], Derived)


def test_router_falls_back_to_default_handler():
    router = MessageRouter(raise_unhandled("handler"))

    with pytest.raises(NotImplementedError, match="object has no handler for Other"):
        router.route(object(), Other())


def test_router_passes_extra_arguments():
    router = build_router(PingHandler, COMMAND, raise_unhandled("handler"))

    assert router.route(PingHandler(), Ping(), "!") == "pong!"
    with pytest.raises(NotImplementedError):
        router.route(PingHandler(), Pong(), "!")


def test_subclass_appliers_override_base_appliers():
    base, derived = Counter(), DoubleCounter()

    base.emit(Counted())
    derived.emit(Counted())

    assert base.count == 1
    assert derived.count == 2


def test_routes_are_collected_per_role():
    assert collect_routes(PingHandler, COMMAND) == {Ping: PingHandler.ping}
    assert collect_routes(PingHandler, EVENT) == {}
    assert collect_routes(DoubleCounter, EVENT) == {Counted: DoubleCounter.apply_counted}
