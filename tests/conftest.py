"""
Test configuration and fixtures for the bang! URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import os

# Must be set before bang_app.config builds its settings instance
os.environ["STORE_BACKEND"] = "memory"
os.environ["HIT_SCHEDULER"] = "inline"

import pytest
from fastapi.testclient import TestClient

from main import app
from bang_app.exceptions import StoreError
from bang_app.hits.strategies import InlineHitScheduler
from bang_app.services.registry import RedirectRegistry
from bang_app.storage.strategies import InMemoryRecordStore


class FailingRecordStore(InMemoryRecordStore):
    """
    In-memory store whose listed commands raise StoreError.

    Everything else behaves normally, so a test can seed data first and then
    break only the command under test.
    """

    def __init__(self, *failing: str):
        super().__init__()
        self.failing = set(failing)

    def __getattribute__(self, name):
        if name in object.__getattribute__(self, "__dict__").get("failing", ()):
            async def broken(*args, **kwargs):
                raise StoreError(f"{name} failed")
            return broken
        return object.__getattribute__(self, name)


@pytest.fixture
def store():
    """Fresh in-memory store for each test"""
    return InMemoryRecordStore()


@pytest.fixture
def hits():
    """Scheduler that runs increments inline, so counters are deterministic"""
    return InlineHitScheduler()


@pytest.fixture
def registry(store, hits):
    """Registry wired to the in-memory store and inline scheduler"""
    return RedirectRegistry(store=store, hits=hits, max_retries=5)


@pytest.fixture(scope="function")
def client():
    """
    Create a test client.
    The lifespan builds a new in-memory store for every client.
    """
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
