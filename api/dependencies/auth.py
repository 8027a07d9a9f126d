"""
Caller Identification

FastAPI dependency resolving the calling wallet. Signature verification happens
upstream of this service; the engine trusts the X-Wallet-Id header.
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from mint_engine.errors import InvalidWalletError
from mint_engine.wallets import normalize_wallet


async def get_caller_wallet(
    x_wallet_id: Annotated[str | None, Header(description="Payment key hash or address of the caller")] = None,
) -> str:
    """
    Resolve the caller wallet from the X-Wallet-Id header

    Returns:
        str: Normalized payment key hash

    Raises:
        HTTPException: 401 if missing, 400 if malformed
    """
    if not x_wallet_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Wallet-Id header")
    try:
        return normalize_wallet(x_wallet_id)
    except InvalidWalletError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
