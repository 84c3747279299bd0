"""Tests for API endpoints"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from api.index import create_app
from core.config import load_config
from core.errors import SessionExpired
from tests.conftest import TEST_API_KEY, TEST_CART_ID, TEST_TTL_MS

AUTH = {"x-api-key": TEST_API_KEY}


@pytest.fixture
def app(test_config, orchestrator):
    return create_app(config=test_config, orchestrator=orchestrator, enable_docs=False)


@pytest.fixture
def client(app):
    """Test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def cart(client):
    """A created cart"""
    response = client.post("/api/cart", headers=AUTH)
    assert response.status_code == 200
    return response.json()


def test_health_check(client):
    """Health check needs no API key"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "test"}


def test_create_cart(cart):
    assert cart == {"cart_id": TEST_CART_ID, "items": []}


def test_add_and_get(client, cart):
    client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "X", "quantity": 1}, headers=AUTH)
    response = client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "X", "quantity": 2}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["items"] == [{"sku": "X", "quantity": 3}]

    response = client.get(f"/api/cart/{TEST_CART_ID}", headers=AUTH)
    assert response.json() == {"cart_id": TEST_CART_ID, "items": [{"sku": "X", "quantity": 3}]}


def test_remove_item(client, cart):
    client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "PLAN", "quantity": 1}, headers=AUTH)

    response = client.delete(f"/api/cart/{TEST_CART_ID}/items/PLAN", headers=AUTH)

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_recovery_is_invisible(client, cart, clock):
    client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "PLAN", "quantity": 1}, headers=AUTH)
    clock.advance(TEST_TTL_MS * 2)

    response = client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "DEVICE", "quantity": 1}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["items"] == [
        {"sku": "PLAN", "quantity": 1},
        {"sku": "DEVICE", "quantity": 1},
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"sku": "", "quantity": 1},
        {"sku": "PLAN", "quantity": 0},
        {"sku": "PLAN", "quantity": -1},
        {"sku": "PLAN", "quantity": 1.5},
        {"sku": "PLAN", "quantity": "2"},
        {"sku": "PLAN"},
        {"sku": "PLAN", "quantity": 1, "price": 10},
    ],
)
def test_invalid_body_is_400(client, cart, payload):
    response = client.post(f"/api/cart/{TEST_CART_ID}/items", json=payload, headers=AUTH)

    assert response.status_code == 400
    assert "error" in response.json()


def test_whitespace_sku_is_rejected_by_core(client, cart):
    """The body passes shape checks but the orchestrator refuses it."""
    response = client.post(f"/api/cart/{TEST_CART_ID}/items", json={"sku": "  ", "quantity": 1}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"error": "sku must be a non-empty string"}


def test_unknown_cart_is_404(client):
    response = client.get("/api/cart/missing", headers=AUTH)

    assert response.status_code == 404
    assert response.json() == {"error": "Cart with id missing was not found"}


def test_unknown_sku_is_404(client, cart):
    response = client.delete(f"/api/cart/{TEST_CART_ID}/items/NOPE", headers=AUTH)

    assert response.status_code == 404


def test_recovery_failure_is_409(client, cart, session_store):
    session_store.get_items = AsyncMock(side_effect=SessionExpired("ctx_any"))

    response = client.get(f"/api/cart/{TEST_CART_ID}", headers=AUTH)

    assert response.status_code == 409
    assert response.json() == {"error": f"Cart {TEST_CART_ID} could not be recovered"}


def test_unexpected_error_is_500(app, session_store):
    session_store.create_session = AsyncMock(side_effect=RuntimeError("id generator broke"))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/api/cart", headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}])
def test_missing_or_wrong_api_key_is_401(client, headers):
    response = client.post("/api/cart", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.parametrize("env", ["production", "prod"])
def test_production_profile_requires_api_key(monkeypatch, orchestrator, env):
    """The production profile never serves cart routes without a key."""
    monkeypatch.delenv("API_KEY", raising=False)
    app = create_app(config=load_config(env), orchestrator=orchestrator, enable_docs=False)

    with TestClient(app) as client:
        response = client.post("/api/cart")
        authorized = client.post("/api/cart", headers={"x-api-key": "prod-experience-api-key"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert authorized.status_code == 200


def test_empty_api_key_disables_auth(test_config, orchestrator):
    test_config.api_key = ""
    app = create_app(config=test_config, orchestrator=orchestrator, enable_docs=False)

    with TestClient(app) as client:
        response = client.post("/api/cart")

    assert response.status_code == 200


def test_docs_toggle(test_config, orchestrator):
    with TestClient(create_app(config=test_config, orchestrator=orchestrator)) as client:
        assert client.get("/openapi.json").status_code == 200

    with TestClient(create_app(config=test_config, orchestrator=orchestrator, enable_docs=False)) as client:
        assert client.get("/openapi.json").status_code == 404
