"""Tests for the session identity map."""

import pytest

from vellum.application import Session
from vellum.domain import IllegalSessionStateError, VersionedId
from tests.fixtures.test_app import Greeter


@pytest.fixture
def session() -> Session:
    return Session()


def test_new_session_is_empty(session):
    assert len(session) == 0
    assert list(session) == []


def test_session_keys_aggregates_by_stable_id(session):
    greeter = Greeter()

    session.track_loaded(greeter)

    assert greeter.id in session
    assert session.get(greeter.id) is greeter
    assert session.get(VersionedId.random().id) is None


def test_session_ignores_version_when_looking_up(session):
    identity = VersionedId.random()
    greeter = Greeter(identity=identity.with_version(4))

    session.track_loaded(greeter)

    assert session.get(identity.with_version(0).id) is greeter


def test_track_new_marks_aggregate_as_new(session):
    loaded = Greeter()
    added = Greeter()

    session.track_loaded(loaded)
    session.track_new(added)

    assert not session.is_new(loaded.id)
    assert session.is_new(added.id)


def test_track_new_keeps_loaded_aggregate_loaded(session):
    greeter = Greeter()

    session.track_loaded(greeter)
    session.track_new(greeter)

    assert not session.is_new(greeter.id)
    assert len(session) == 1


def test_second_instance_for_same_id_is_rejected(session):
    identity = VersionedId.random()
    session.track_new(Greeter(identity=identity))

    with pytest.raises(IllegalSessionStateError):
        session.track_loaded(Greeter(identity=identity))


def test_iteration_follows_insertion_order(session):
    greeters = [Greeter() for _ in range(3)]

    for greeter in greeters:
        session.track_new(greeter)

    assert list(session) == greeters
