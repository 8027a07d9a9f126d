"""
Admin Endpoints

Administrative endpoints configuring the sale: opening it, installing waves,
managing lists and Merkle roots, resetting minters and transferring ownership.
Protected by the admin API key; the engine additionally requires the owner wallet.
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends

from api.dependencies.admin import require_admin
from api.dependencies.mint import get_mint_service
from api.schemas.mint import (
    AdminActionResponse,
    BaseUriRequest,
    ErrorResponse,
    MerkleRootRequest,
    OwnershipRequest,
    SaleStartRequest,
    WalletListRequest,
    WalletListResponse,
    WaveRequest,
    WaveResponse,
)
from api.services.mint_service import MintService
from api.utils.errors import to_http_exception
from mint_engine.errors import InvalidWalletError, MintError
from mint_engine.types import Wave


logger = logging.getLogger(__name__)

router = APIRouter()

ADMIN_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid configuration or wallet"},
    401: {"model": ErrorResponse, "description": "Invalid or missing API key"},
    403: {"model": ErrorResponse, "description": "Caller is not the owner"},
}


def _wave_response(wave: Wave) -> WaveResponse:
    return WaveResponse(
        whitelist_start=wave.whitelist_start,
        allowlist_start=wave.allowlist_start,
        public_start=wave.public_start,
        supply=wave.supply,
        price=wave.price,
    )


# ============================================================================
# Sale Configuration Endpoints
# ============================================================================


@router.post("/sale/open", response_model=AdminActionResponse, summary="Open sale", responses=ADMIN_RESPONSES)
async def set_sale_open(
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> AdminActionResponse:
    """Open the sale. Irreversible; repeated calls have no further effect."""
    try:
        await service.set_sale_open(caller)
    except MintError as e:
        raise to_http_exception(e)
    return AdminActionResponse(message="Sale is open")


@router.post("/waves", response_model=WaveResponse, summary="Start wave", responses=ADMIN_RESPONSES)
async def start_wave(
    request: WaveRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> WaveResponse:
    """
    Install a new wave, replacing the current one.

    Resets the wave counter; per-wallet counters are kept until minters are cleared.
    """
    try:
        wave = await service.start_wave(
            caller,
            request.whitelist_start,
            request.allowlist_start,
            request.public_start,
            request.supply,
            request.price,
        )
    except MintError as e:
        raise to_http_exception(e)
    logger.info(f"Wave started by {caller}: supply={wave.supply}")
    return _wave_response(wave)


@router.post(
    "/sale-start", response_model=WaveResponse, summary="Set sale start", responses=ADMIN_RESPONSES
)
async def set_sale_start(
    request: SaleStartRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> WaveResponse:
    """Install a new wave using the deployment's default wave supply."""
    try:
        wave = await service.set_sale_start(
            caller, request.whitelist_start, request.allowlist_start, request.public_start
        )
    except MintError as e:
        raise to_http_exception(e)
    return _wave_response(wave)


# ============================================================================
# List Management Endpoints
# ============================================================================


@router.post("/whitelist", response_model=WalletListResponse, summary="Add to whitelist", responses=ADMIN_RESPONSES)
async def set_whitelist(
    request: WalletListRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> WalletListResponse:
    try:
        added = await service.set_whitelist(caller, request.wallets)
    except (MintError, InvalidWalletError) as e:
        raise to_http_exception(e)
    return WalletListResponse(added=added)


@router.post("/allowlist", response_model=WalletListResponse, summary="Add to allowlist", responses=ADMIN_RESPONSES)
async def set_allowlist(
    request: WalletListRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> WalletListResponse:
    try:
        added = await service.set_allowlist(caller, request.wallets)
    except (MintError, InvalidWalletError) as e:
        raise to_http_exception(e)
    return WalletListResponse(added=added)


@router.post("/claimlist", response_model=WalletListResponse, summary="Add to claim list", responses=ADMIN_RESPONSES)
async def add_to_claimlist(
    request: WalletListRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> WalletListResponse:
    try:
        added = await service.add_to_claimlist(caller, request.wallets)
    except (MintError, InvalidWalletError) as e:
        raise to_http_exception(e)
    return WalletListResponse(added=added)


@router.put(
    "/merkle-roots/{phase}", response_model=AdminActionResponse, summary="Set Merkle root", responses=ADMIN_RESPONSES
)
async def set_merkle_root(
    phase: Literal["whitelist", "allowlist"],
    request: MerkleRootRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> AdminActionResponse:
    """
    Replace the Merkle root of a phase.

    No history is kept: proofs built for the previous root stop working.
    """
    try:
        await service.set_merkle_root(caller, phase, request.root)
    except MintError as e:
        raise to_http_exception(e)
    return AdminActionResponse(message=f"{phase} root {'cleared' if request.root is None else 'set'}")


@router.post("/minters/clear", response_model=AdminActionResponse, summary="Clear minters", responses=ADMIN_RESPONSES)
async def clear_minters(
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> AdminActionResponse:
    """Reset every wallet's mint counter. Supply counters and issued items are untouched."""
    try:
        generation = await service.clear_minters(caller)
    except MintError as e:
        raise to_http_exception(e)
    return AdminActionResponse(message=f"Minters cleared (generation {generation})")


# ============================================================================
# Ownership Endpoints
# ============================================================================


@router.post("/ownership", response_model=AdminActionResponse, summary="Transfer ownership", responses=ADMIN_RESPONSES)
async def transfer_ownership(
    request: OwnershipRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> AdminActionResponse:
    try:
        new_owner = await service.transfer_ownership(caller, request.new_owner)
    except (MintError, InvalidWalletError) as e:
        raise to_http_exception(e)
    return AdminActionResponse(message=f"Ownership transferred to {new_owner}")


@router.put("/base-uri", response_model=AdminActionResponse, summary="Set base URI", responses=ADMIN_RESPONSES)
async def set_base_uri(
    request: BaseUriRequest,
    caller: str = Depends(require_admin),
    service: MintService = Depends(get_mint_service),
) -> AdminActionResponse:
    try:
        await service.set_base_uri(caller, request.uri)
    except MintError as e:
        raise to_http_exception(e)
    return AdminActionResponse(message="Base URI set")
