"""
Mint Endpoint Tests

Test suite for paid mints, free claims and sale status endpoints.
"""

import copy

import pytest
from fastapi.testclient import TestClient

from api.database.repositories import AsyncInMemoryRegistry, InMemoryStateRepository
from api.dependencies.mint import get_mint_service
from api.main import app
from api.services.mint_service import MintService
from api.tests.assertions import (
    assert_error_code,
    assert_error_response,
    assert_successful_response,
    assert_valid_mint_response,
)
from api.tests.factories import (
    ALLOWLIST_START,
    PRICE,
    PUBLIC_START,
    TEST_OWNER,
    WHITELIST_START,
    MerkleFactory,
    WalletFactory,
    WaveFactory,
)
from api.tests.mocks import FailingRegistry, FlakyStateRepository


def wallet_headers(wallet: str) -> dict:
    return {"X-Wallet-Id": wallet}


@pytest.mark.api
class TestInfoEndpoint:
    """Tests for GET /api/v1/mint/info and /stage"""

    def test_info_before_open(self, client: TestClient):
        response = client.get("/api/v1/mint/info")
        data = assert_successful_response(response, ["stage", "stage_name", "sale_open", "total_minted"])

        assert data["stage"] == 0
        assert data["stage_name"] == "CLOSED"
        assert data["sale_open"] is False
        assert data["wave_supply"] == 0
        assert data["price_per_token"] == PRICE

    def test_info_after_wave(self, client: TestClient, open_sale):
        open_sale(supply=2)
        data = assert_successful_response(client.get("/api/v1/mint/info"))

        assert data["stage_name"] == "PUBLIC"
        assert data["wave_supply"] == 2
        assert data["wave_minted"] == 0
        assert data["max_mint_count"] == 1

    def test_stage_follows_clock(self, client: TestClient, open_sale, clock):
        open_sale()

        clock.now = WHITELIST_START - 1
        assert client.get("/api/v1/mint/stage").json() == {"stage": 5, "stage_name": "NOT_STARTED"}

        clock.now = WHITELIST_START
        assert client.get("/api/v1/mint/stage").json()["stage_name"] == "WHITELIST"

        clock.now = PUBLIC_START - 1
        assert client.get("/api/v1/mint/stage").json()["stage_name"] == "ALLOWLIST"

    def test_stage_no_wave(self, client: TestClient, admin_headers):
        client.post("/api/v1/admin/sale/open", headers=admin_headers)
        assert client.get("/api/v1/mint/stage").json() == {"stage": 1, "stage_name": "NO_WAVE"}


@pytest.mark.api
class TestMintEndpoint:
    """Tests for POST /api/v1/mint"""

    def test_mint_success(self, client: TestClient, open_sale):
        open_sale()
        wallet = WalletFactory.create_key_hash()

        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        data = assert_successful_response(response)
        assert_valid_mint_response(data)

        assert data["wallet"] == wallet
        assert data["item_ids"] == [1]
        assert data["payment"] == PRICE
        assert data["claim"] is False

    def test_mint_with_bech32_address(self, client: TestClient, open_sale):
        open_sale()
        key_hash = WalletFactory.create_key_hash()
        address = WalletFactory.create_testnet_address(key_hash)

        response = client.post("/api/v1/mint", headers=wallet_headers(address), json={"payment": PRICE})
        data = assert_successful_response(response)
        assert data["wallet"] == key_hash

    def test_mint_requires_wallet_header(self, client: TestClient, open_sale):
        open_sale()
        response = client.post("/api/v1/mint", json={"payment": PRICE})
        assert_error_response(response, 401, "X-Wallet-Id")

    def test_mint_invalid_wallet_header(self, client: TestClient, open_sale):
        open_sale()
        response = client.post("/api/v1/mint", headers=wallet_headers("not-a-wallet"), json={"payment": PRICE})
        assert_error_response(response, 400)

    def test_mint_sale_closed(self, client: TestClient):
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        assert_error_code(response, 400, "sale_closed")

    def test_mint_not_started(self, client: TestClient, open_sale, clock):
        open_sale()
        clock.now = WHITELIST_START - 1
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        assert_error_code(response, 400, "not_started_yet")

    def test_wave_supply_scenario(self, client: TestClient, open_sale, admin_headers):
        open_sale(supply=2)
        first, second, third = WalletFactory.create_key_hashes(3)

        for wallet in (first, second):
            response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
            assert_successful_response(response)
        assert client.get("/api/v1/mint/info").json()["wave_minted"] == 2
        assert client.get("/api/v1/mint/stage").json()["stage_name"] == "SOLD_OUT"

        response = client.post("/api/v1/mint", headers=wallet_headers(third), json={"payment": PRICE})
        assert_error_code(response, 409, "wave_cap_exceeded")

        response = client.post(
            "/api/v1/admin/waves",
            headers=admin_headers,
            json={
                "whitelist_start": WHITELIST_START,
                "allowlist_start": ALLOWLIST_START,
                "public_start": PUBLIC_START,
                "supply": 2,
            },
        )
        assert_successful_response(response)
        assert client.get("/api/v1/mint/info").json()["wave_minted"] == 0

        response = client.post("/api/v1/mint", headers=wallet_headers(third), json={"payment": PRICE})
        data = assert_successful_response(response)
        assert data["item_ids"] == [3]
        assert data["total_minted"] == 3

    def test_bad_payment(self, client: TestClient, open_sale):
        open_sale()
        wallet = WalletFactory.create_key_hash()

        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE // 2})
        assert_error_code(response, 402, "bad_payment")

        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        assert_successful_response(response)

    def test_wallet_cap(self, client: TestClient, open_sale):
        open_sale(supply=5)
        wallet = WalletFactory.create_key_hash()

        assert_successful_response(
            client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        )
        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        assert_error_code(response, 409, "wallet_cap_exceeded")

    def test_whitelist_phase_authorization(self, client: TestClient, open_sale, admin_headers, clock):
        open_sale()
        member, outsider = WalletFactory.create_key_hashes(2)
        client.post("/api/v1/admin/whitelist", headers=admin_headers, json={"wallets": [member]})
        clock.now = WHITELIST_START

        response = client.post("/api/v1/mint", headers=wallet_headers(outsider), json={"payment": PRICE})
        detail = assert_error_code(response, 403, "not_authorized")
        assert detail["phase"] == "whitelist"

        response = client.post("/api/v1/mint", headers=wallet_headers(member), json={"payment": PRICE})
        assert_successful_response(response)

    def test_allowlist_phase_merkle_proof(self, client: TestClient, open_sale, admin_headers, clock):
        open_sale()
        wallets = WalletFactory.create_key_hashes(5)
        tree = MerkleFactory.create_tree(wallets)
        response = client.put(
            "/api/v1/admin/merkle-roots/allowlist",
            headers=admin_headers,
            json=MerkleFactory.create_root_request(tree),
        )
        assert_successful_response(response)
        clock.now = ALLOWLIST_START

        wallet = wallets[3]
        response = client.post(
            "/api/v1/mint",
            headers=wallet_headers(wallet),
            json={"payment": PRICE, "proof": tree.hex_proof(wallet)},
        )
        assert_successful_response(response)

        outsider = WalletFactory.create_key_hash()
        response = client.post(
            "/api/v1/mint",
            headers=wallet_headers(outsider),
            json={"payment": PRICE, "proof": tree.hex_proof(wallets[0])},
        )
        detail = assert_error_code(response, 403, "not_authorized")
        assert detail["phase"] == "allowlist"

    def test_malformed_proof_is_not_authorized(self, client: TestClient, open_sale, admin_headers, clock):
        open_sale()
        wallets = WalletFactory.create_key_hashes(3)
        tree = MerkleFactory.create_tree(wallets)
        client.put("/api/v1/admin/merkle-roots/whitelist", headers=admin_headers, json={"root": tree.hex_root})
        clock.now = WHITELIST_START

        response = client.post(
            "/api/v1/mint",
            headers=wallet_headers(wallets[0]),
            json={"payment": PRICE, "proof": ["0x1234", "zz"]},
        )
        assert_error_code(response, 403, "not_authorized")

    def test_invalid_count(self, client: TestClient, open_sale):
        open_sale()
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"count": 0, "payment": 0})
        assert_error_code(response, 400, "invalid_mint_count")

    def test_negative_payment_rejected(self, client: TestClient, open_sale):
        open_sale()
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": -1})
        assert response.status_code == 422

    def test_registry_failure_changes_nothing(self, clock, sale_config, admin_headers):
        repository = InMemoryStateRepository()
        registry = FailingRegistry()
        service = MintService(repository, registry, sale_config, TEST_OWNER, clock=clock)
        app.dependency_overrides[get_mint_service] = lambda: service
        client = TestClient(app, raise_server_exceptions=False)
        try:
            assert_successful_response(client.post("/api/v1/admin/sale/open", headers=admin_headers))
            assert_successful_response(
                client.post("/api/v1/admin/waves", headers=admin_headers, json=WaveFactory.create_wave_request())
            )
            stored = copy.deepcopy(repository.document)
            wallet = WalletFactory.create_key_hash()

            response = client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
            assert response.status_code == 500
            assert registry.calls == 1
            # Counters were reserved, then restored
            assert repository.document == stored

            data = assert_successful_response(client.get("/api/v1/mint/info"))
            assert data["wave_minted"] == 0
            assert data["total_minted"] == 0
        finally:
            app.dependency_overrides.clear()

    def test_state_save_failure_issues_nothing(self, clock, sale_config, admin_headers):
        repository = FlakyStateRepository()
        registry = AsyncInMemoryRegistry()
        service = MintService(repository, registry, sale_config, TEST_OWNER, clock=clock)
        app.dependency_overrides[get_mint_service] = lambda: service
        client = TestClient(app, raise_server_exceptions=False)
        try:
            assert_successful_response(client.post("/api/v1/admin/sale/open", headers=admin_headers))
            assert_successful_response(
                client.post(
                    "/api/v1/admin/waves", headers=admin_headers, json=WaveFactory.create_wave_request(supply=1)
                )
            )
            first, second, third = WalletFactory.create_key_hashes(3)

            repository.fail_next = True
            response = client.post("/api/v1/mint", headers=wallet_headers(first), json={"payment": PRICE})
            assert response.status_code == 500
            assert repository.failures == 1
            assert registry.registry.owners == {}

            data = assert_successful_response(client.get("/api/v1/mint/info"))
            assert data["wave_minted"] == 0

            response = client.post("/api/v1/mint", headers=wallet_headers(second), json={"payment": PRICE})
            data = assert_successful_response(response)
            assert data["wave_minted"] == 1

            response = client.post("/api/v1/mint", headers=wallet_headers(third), json={"payment": PRICE})
            assert_error_code(response, 409, "wave_cap_exceeded")
            assert len(registry.registry.owners) == 1
        finally:
            app.dependency_overrides.clear()


@pytest.mark.api
class TestClaimEndpoint:
    """Tests for POST /api/v1/mint/claim"""

    def test_claim_once(self, client: TestClient, admin_headers):
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/admin/claimlist", headers=admin_headers, json={"wallets": [wallet]})
        assert assert_successful_response(response)["added"] == 1

        response = client.post("/api/v1/mint/claim", headers=wallet_headers(wallet))
        data = assert_successful_response(response)
        assert_valid_mint_response(data)
        assert data["claim"] is True
        assert data["payment"] == 0

        item = assert_successful_response(client.get(f"/api/v1/mint/items/{data['item_ids'][0]}"))
        assert item["owner"] == wallet

        response = client.post("/api/v1/mint/claim", headers=wallet_headers(wallet))
        assert_error_code(response, 409, "already_claimed")

    def test_claim_not_in_list(self, client: TestClient):
        wallet = WalletFactory.create_key_hash()
        response = client.post("/api/v1/mint/claim", headers=wallet_headers(wallet))
        assert_error_code(response, 403, "not_in_claim_list")


@pytest.mark.api
class TestWalletAndItemEndpoints:
    """Tests for GET /api/v1/mint/wallets/{wallet} and /items/{item_id}"""

    def test_wallet_status(self, client: TestClient, open_sale, admin_headers):
        open_sale()
        wallet = WalletFactory.create_key_hash()
        client.post("/api/v1/admin/allowlist", headers=admin_headers, json={"wallets": [wallet]})

        data = assert_successful_response(client.get(f"/api/v1/mint/wallets/{wallet}"))
        assert data["wallet"] == wallet
        assert data["whitelisted"] is False
        assert data["allowlisted"] is True
        assert data["wallet_stage"] == 1
        assert data["wallet_stage_name"] == "ALLOWLIST"
        assert data["available_to_mint"] == 1
        assert data["has_minted"] is False
        assert data["balance"] == 0

        client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})
        data = assert_successful_response(client.get(f"/api/v1/mint/wallets/{wallet}"))
        assert data["available_to_mint"] == 0
        assert data["minted"] == 1
        assert data["has_minted"] is True
        assert data["balance"] == 1

    def test_wallet_status_with_proof(self, client: TestClient, admin_headers):
        wallets = WalletFactory.create_key_hashes(4)
        tree = MerkleFactory.create_tree(wallets)
        client.put("/api/v1/admin/merkle-roots/whitelist", headers=admin_headers, json={"root": tree.hex_root})

        wallet = wallets[2]
        response = client.get(f"/api/v1/mint/wallets/{wallet}", params={"proof": tree.hex_proof(wallet)})
        data = assert_successful_response(response)
        assert data["whitelisted"] is True
        assert data["wallet_stage_name"] == "WHITELIST"

    def test_wallet_status_invalid_wallet(self, client: TestClient):
        response = client.get("/api/v1/mint/wallets/bogus")
        assert_error_code(response, 400, "invalid_wallet")

    def test_item_not_found(self, client: TestClient):
        assert_error_response(client.get("/api/v1/mint/items/42"), 404, "not found")

    def test_item_token_uri(self, client: TestClient, open_sale, admin_headers):
        open_sale()
        client.put("/api/v1/admin/base-uri", headers=admin_headers, json={"uri": "ipfs://collection/"})
        wallet = WalletFactory.create_key_hash()
        client.post("/api/v1/mint", headers=wallet_headers(wallet), json={"payment": PRICE})

        data = assert_successful_response(client.get("/api/v1/mint/items/1"))
        assert data == {"item_id": 1, "owner": wallet, "token_uri": "ipfs://collection/1"}
