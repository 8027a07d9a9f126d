"""
Mint Endpoints

FastAPI endpoints for paid mints, free claims and sale status queries.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from api.dependencies.auth import get_caller_wallet
from api.dependencies.mint import get_mint_service
from api.schemas.mint import (
    ErrorResponse,
    InfoResponse,
    ItemResponse,
    MintRequest,
    MintResponse,
    StageResponse,
    WalletStatusResponse,
)
from api.services.mint_service import MintService
from api.utils.errors import to_http_exception
from mint_engine.errors import InvalidWalletError, MintError
from mint_engine.types import MintReceipt, WalletStage


logger = logging.getLogger(__name__)

router = APIRouter()


def _receipt_response(receipt: MintReceipt) -> MintResponse:
    return MintResponse(
        wallet=receipt.wallet,
        item_ids=receipt.item_ids,
        count=receipt.count,
        payment=receipt.payment,
        wave_minted=receipt.wave_minted,
        total_minted=receipt.total_minted,
        claim=receipt.claim,
    )


# ============================================================================
# Status Endpoints
# ============================================================================


@router.get(
    "/info",
    response_model=InfoResponse,
    summary="Sale info",
    description="Current stage, counters, wallet cap and price of the active wave.",
)
async def get_info(service: MintService = Depends(get_mint_service)) -> InfoResponse:
    info = await service.info()
    return InfoResponse(
        stage=int(info.stage),
        stage_name=info.stage.name,
        sale_open=info.sale_open,
        total_minted=info.total_minted,
        wave_supply=info.wave_supply,
        wave_minted=info.wave_minted,
        max_mint_count=info.max_mint_count,
        price_per_token=info.price_per_token,
    )


@router.get("/stage", response_model=StageResponse, summary="Current stage")
async def get_stage(service: MintService = Depends(get_mint_service)) -> StageResponse:
    stage = await service.stage()
    return StageResponse(stage=int(stage), stage_name=stage.name)


@router.get(
    "/wallets/{wallet}",
    response_model=WalletStatusResponse,
    summary="Wallet status",
    description="Whitelist/allowlist membership, earliest phase and remaining mint allowance of a wallet.",
    responses={400: {"model": ErrorResponse, "description": "Malformed wallet"}},
)
async def get_wallet_status(
    wallet: str = Path(..., description="Payment key hash or address"),
    proof: list[str] = Query(default=[], description="Optional Merkle proof (hex) to check membership"),
    service: MintService = Depends(get_mint_service),
) -> WalletStatusResponse:
    """
    Wallet status for display purposes.

    The wallet stage is informational; minting re-checks authorization
    against the phase active at call time.
    """
    try:
        status = await service.wallet_status(wallet, proof)
    except InvalidWalletError as e:
        raise to_http_exception(e)
    return WalletStatusResponse(
        **{k: v for k, v in status.items() if k != "wallet_stage"},
        wallet_stage=int(status["wallet_stage"]),
        wallet_stage_name=WalletStage(status["wallet_stage"]).name,
    )


@router.get(
    "/items/{item_id}",
    response_model=ItemResponse,
    summary="Item owner",
    responses={404: {"model": ErrorResponse, "description": "Item not found"}},
)
async def get_item(
    item_id: int = Path(..., ge=1),
    service: MintService = Depends(get_mint_service),
) -> ItemResponse:
    item = await service.item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
    return ItemResponse(**item)


# ============================================================================
# Mint Endpoints
# ============================================================================


@router.post(
    "",
    response_model=MintResponse,
    summary="Mint items",
    description="Mint items in the current phase, paying exactly count * price.",
    responses={
        400: {"model": ErrorResponse, "description": "Sale closed, not started or invalid count"},
        402: {"model": ErrorResponse, "description": "Incorrect payment"},
        403: {"model": ErrorResponse, "description": "Wallet not authorized for the current phase"},
        409: {"model": ErrorResponse, "description": "Wallet or wave cap exceeded"},
    },
)
async def mint(
    request: MintRequest,
    caller: str = Depends(get_caller_wallet),
    service: MintService = Depends(get_mint_service),
) -> MintResponse:
    """
    Mint items for the calling wallet.

    **Checks, in order:**
    - Sale open
    - Wave started
    - Whitelist / allowlist authorization for the active phase
    - Wallet cap
    - Wave supply
    - Exact payment

    A rejected request changes nothing.
    """
    try:
        receipt = await service.mint(caller, request.count, request.payment, request.proof)
    except MintError as e:
        raise to_http_exception(e)
    return _receipt_response(receipt)


@router.post(
    "/claim",
    response_model=MintResponse,
    summary="Claim free item",
    description="Claim the single free item granted to claim list members.",
    responses={
        403: {"model": ErrorResponse, "description": "Wallet not in claim list"},
        409: {"model": ErrorResponse, "description": "Already claimed or supply exhausted"},
    },
)
async def claim(
    caller: str = Depends(get_caller_wallet),
    service: MintService = Depends(get_mint_service),
) -> MintResponse:
    try:
        receipt = await service.claim(caller)
    except MintError as e:
        raise to_http_exception(e)
    return _receipt_response(receipt)
