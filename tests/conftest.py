"""Pytest configuration and fixtures"""
import os
import pytest

# Keep the test run independent of the developer's shell
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from core.cart import CartOrchestrator, CartStore, SessionStore
from core.config import AppConfig

TEST_TTL_MS = 1000
TEST_CART_ID = "exp_test"
TEST_API_KEY = "test_api_key"


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store(clock):
    """Session layer with a 1s TTL on the fake clock"""
    return SessionStore(ttl_ms=TEST_TTL_MS, now=clock)


@pytest.fixture
def cart_store():
    return CartStore()


@pytest.fixture
def orchestrator(session_store, cart_store):
    """Orchestrator that always mints the same cart id"""
    return CartOrchestrator(session_store, cart_store, cart_id_factory=lambda: TEST_CART_ID)


@pytest.fixture
def test_config():
    return AppConfig(name="test", port=0, api_key=TEST_API_KEY, session_ttl_ms=TEST_TTL_MS)
