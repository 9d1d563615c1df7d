"""Central test fixtures - built around the unified test_app."""

from unittest.mock import AsyncMock

import pytest

from vellum.application import (
    ApplicationBuilder,
    Bus,
    EventStore,
    InMemoryBus,
    InMemoryEventStore,
    Repository,
    UnitOfWork,
)
from vellum.config import VellumSettings
from vellum.domain import Event, VersionedId
from tests.fixtures.test_app import (
    BankHandler,
    Greeter,
    GreeterHandler,
    PersonGreeted,
)

TEST_ID = VersionedId.random().with_version(2)


def greeter_with_history(identity: VersionedId, *names: str) -> Greeter:
    """Build a Greeter that looks freshly loaded, one stored event per name."""
    greeter = Greeter(identity=identity.with_version(0))
    greeter.load_from_history(
        Event(
            aggregate_id=identity.id,
            sequence_number=number,
            data=PersonGreeted(message=f"Hi {name}"),
        )
        for number, name in enumerate(names, start=1)
    )
    return greeter


@pytest.fixture
def test_id() -> VersionedId:
    return TEST_ID


@pytest.fixture
def greeter() -> Greeter:
    """A Greeter at version 2, as if loaded from its event store."""
    return greeter_with_history(TEST_ID, "Erik", "Sjors")


@pytest.fixture
def mock_event_store() -> AsyncMock:
    """Event store double that loads nothing and accepts every version."""
    store = AsyncMock(spec=EventStore)
    store.load_event_source.return_value = None
    return store


@pytest.fixture
def mock_bus() -> AsyncMock:
    return AsyncMock(spec=Bus)


@pytest.fixture
def mock_repository(mock_event_store: AsyncMock, mock_bus: AsyncMock) -> Repository:
    """Repository wired to mock collaborators."""
    return Repository(mock_event_store, mock_bus)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def bus() -> InMemoryBus:
    return InMemoryBus()


@pytest.fixture
def repository(event_store: InMemoryEventStore, bus: InMemoryBus) -> Repository:
    """Repository wired to in-memory collaborators."""
    return Repository(event_store, bus)


@pytest.fixture
def unit_of_work(event_store: InMemoryEventStore, bus: InMemoryBus) -> UnitOfWork:
    return UnitOfWork(event_store, bus)


@pytest.fixture
def settings() -> VellumSettings:
    return VellumSettings(log_level="DEBUG", retry_max_attempts=1, retry_delay=0.0)


@pytest.fixture
def app_builder(
    event_store: InMemoryEventStore,
    bus: InMemoryBus,
    settings: VellumSettings,
) -> ApplicationBuilder:
    """Builder with in-memory collaborators and both test handlers."""
    return (
        ApplicationBuilder()
        .use_event_store(event_store)
        .use_bus(bus)
        .use_settings(settings)
        .register_handler(GreeterHandler())
        .register_handler(BankHandler())
    )


@pytest.fixture
def app(app_builder: ApplicationBuilder):
    return app_builder.build()


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Automatically clear execution context after each test."""
    yield
    from vellum.context import clear_context

    clear_context()
