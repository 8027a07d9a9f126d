"""
Admin Authentication

Protects administrative endpoints that configure the sale.
Requests need the ADMIN_API_KEY and must come from the engine owner wallet;
ownership itself is checked by the engine.
"""

from typing import Annotated

from fastapi import Depends

from api.dependencies.auth import get_caller_wallet
from api.utils.security import get_api_key


async def require_admin(
    api_key: Annotated[str, Depends(get_api_key)],
    caller: Annotated[str, Depends(get_caller_wallet)],
) -> str:
    """
    Require admin API key and a caller wallet

    Args:
        api_key: Validated admin API key
        caller: Normalized caller wallet

    Returns:
        str: The caller wallet, passed to the engine for the owner check
    """
    return caller
