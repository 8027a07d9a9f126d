"""
Engine Error Mapping

Translates engine rejections into HTTP errors with a stable error code.
"""

from fastapi import HTTPException, status

from mint_engine.errors import InvalidWalletError, MintError


def to_http_exception(error: MintError | InvalidWalletError) -> HTTPException:
    """
    Map an engine error to an HTTPException

    Args:
        error: MintError or InvalidWalletError raised by the engine

    Returns:
        HTTPException with {"code", "message"} detail
    """
    if isinstance(error, MintError):
        return HTTPException(status_code=error.http_status, detail=error.to_dict())
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": "invalid_wallet", "message": str(error)},
    )
