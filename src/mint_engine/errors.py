"""
Mint Engine Errors

Every rejection is a caller-input fault reported synchronously. A raised error
means no state was changed.
"""

from typing import Optional


class MintError(Exception):
    """Base exception for rejected mint engine operations"""

    code = "mint_error"
    http_status = 400
    default_message = "Mint rejected"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class SaleClosed(MintError):
    code = "sale_closed"
    default_message = "Sale is closed"


class NotStartedYet(MintError):
    code = "not_started_yet"
    default_message = "Sale not started yet"


class NotAuthorized(MintError):
    """Wallet is not in the list required by the current phase"""

    code = "not_authorized"
    http_status = 403

    def __init__(self, phase: str, message: Optional[str] = None):
        self.phase = phase
        super().__init__(message or f"Wallet is not in {phase}")

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "phase": self.phase}


class WalletCapExceeded(MintError):
    code = "wallet_cap_exceeded"
    http_status = 409
    default_message = "Available token mint count exceeded"


class WaveCapExceeded(MintError):
    code = "wave_cap_exceeded"
    http_status = 409
    default_message = "Purchase would exceed wave max tokens"


class MaxSupplyExceeded(WaveCapExceeded):
    code = "max_supply_exceeded"
    default_message = "Purchase would exceed max supply"


class BadPayment(MintError):
    code = "bad_payment"
    http_status = 402
    default_message = "Payment value sent is not correct"


class NotInClaimList(MintError):
    code = "not_in_claim_list"
    http_status = 403
    default_message = "Wallet is not in claim list"


class AlreadyClaimed(MintError):
    code = "already_claimed"
    http_status = 409
    default_message = "Wallet already claimed"


class InvalidMintCount(MintError):
    code = "invalid_mint_count"
    default_message = "Mint count must be at least 1"


class AdminError(MintError):
    """Base exception for rejected administrative operations"""

    code = "admin_error"


class NotOwner(AdminError):
    code = "not_owner"
    http_status = 403
    default_message = "Caller is not the owner"


class InvalidWaveConfig(AdminError):
    code = "invalid_wave_config"
    default_message = "Wave phases must satisfy 0 < whitelist < allowlist < public"


class InvalidMerkleRoot(AdminError):
    code = "invalid_merkle_root"
    default_message = "Merkle root must be 32 bytes"


class InvalidWalletError(ValueError):
    """Wallet identifier is neither a payment key hash nor a Cardano address"""

    pass
