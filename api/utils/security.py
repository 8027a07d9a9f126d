"""
Admin API Key

The admin key is configured through ADMIN_API_KEY and sent in the x-api-key header.
"""

import hashlib
import secrets
from typing import Annotated

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from api.config import settings


admin_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


def _digest(value: str) -> bytes:
    # Fixed-length digests keep compare_digest independent of key length
    return hashlib.sha256(value.encode()).digest()


def is_admin_key(candidate: str | None) -> bool:
    if not candidate:
        return False
    return secrets.compare_digest(_digest(candidate), _digest(settings.admin_api_key))


def get_api_key(api_key: Annotated[str | None, Security(admin_key_header)]) -> str:
    """
    FastAPI dependency validating the admin API key

    Raises:
        HTTPException: 401 if the key is missing or does not match
    """
    if not is_admin_key(api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API Key")
    return api_key
