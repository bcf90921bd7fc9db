import time

import pytest
from fastapi.testclient import TestClient

from bookgraph.events import BOOK_ADDED, BookEventBus
from bookgraph.main import create_app
from bookgraph.settings import Settings
from bookgraph.storage import LibraryStore


@pytest.fixture
def store() -> LibraryStore:
    return LibraryStore()


@pytest.fixture
def bus() -> BookEventBus:
    return BookEventBus()


@pytest.fixture
def context(store, bus) -> dict:
    return {"store": store, "bus": bus}


@pytest.fixture
def app(store, bus):
    return create_app(Settings(), store=store, bus=bus)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan and keeps one event loop for
    # HTTP requests and websocket sessions alike.
    with TestClient(app) as c:
        yield c


def wait_for_subscribers(bus: BookEventBus, count: int, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while bus.subscriber_count(BOOK_ADDED) < count:
        if time.monotonic() > deadline:
            raise AssertionError(
                f"expected {count} subscriber(s), got {bus.subscriber_count(BOOK_ADDED)}"
            )
        time.sleep(0.01)
