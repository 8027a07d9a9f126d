"""
Pytest configuration for API tests

Fixtures and configuration for FastAPI endpoint testing.
The mint service runs over in-memory repositories; no MongoDB is needed.
"""

import os

import pytest
from fastapi.testclient import TestClient

from api.tests.factories import PRICE, PUBLIC_START, TEST_API_KEY, TEST_OWNER, WaveFactory


# Settings are read at import time
os.environ["ADMIN_API_KEY"] = TEST_API_KEY
os.environ["OWNER_WALLET"] = TEST_OWNER

from api.database.repositories import AsyncInMemoryRegistry, InMemoryStateRepository
from api.dependencies.mint import get_mint_service
from api.main import app
from api.services.mint_service import MintService
from api.tests.mocks import FakeClock
from mint_engine.types import SaleConfig


@pytest.fixture
def clock():
    """Controllable clock, starts in the public phase"""
    return FakeClock(PUBLIC_START)


@pytest.fixture
def sale_config():
    return SaleConfig(max_supply=200, price_per_token=PRICE, max_mint_count=1)


@pytest.fixture
def mint_service(clock, sale_config):
    """Mint service over in-memory state and registry"""
    return MintService(
        repository=InMemoryStateRepository(),
        registry=AsyncInMemoryRegistry(),
        config=sale_config,
        owner=TEST_OWNER,
        clock=clock,
    )


@pytest.fixture
def client(mint_service):
    """Create FastAPI test client"""
    app.dependency_overrides[get_mint_service] = lambda: mint_service
    # Not entered as a context manager: the lifespan would connect to MongoDB
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


# Auth fixtures
@pytest.fixture
def api_key():
    """Get API key from environment"""
    return os.environ["ADMIN_API_KEY"]


@pytest.fixture
def owner_wallet():
    return os.environ["OWNER_WALLET"]


@pytest.fixture
def admin_headers(api_key, owner_wallet):
    """Get admin authentication headers"""
    return {"X-API-Key": api_key, "X-Wallet-Id": owner_wallet}


@pytest.fixture
def open_sale(client, admin_headers):
    """Sale opened with a two-item wave"""

    def _open(supply: int = 2, price: int = PRICE):
        response = client.post("/api/v1/admin/sale/open", headers=admin_headers)
        assert response.status_code == 200, response.text
        response = client.post(
            "/api/v1/admin/waves",
            headers=admin_headers,
            json=WaveFactory.create_wave_request(supply=supply, price=price),
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _open
