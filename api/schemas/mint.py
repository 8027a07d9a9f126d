"""
Mint Schemas

Pydantic models for mint, claim and sale status requests and responses.
"""

from pydantic import BaseModel, Field


# ============================================================================
# Mint Request Schemas
# ============================================================================


class MintRequest(BaseModel):
    """Paid mint request"""

    count: int = Field(1, description="Number of items to mint")
    payment: int = Field(ge=0, description="Amount paid in lovelace, must equal count * price")
    proof: list[str] = Field(
        default_factory=list, description="Merkle proof (hex) for the whitelist or allowlist phase"
    )


# ============================================================================
# Mint Response Schemas
# ============================================================================


class MintResponse(BaseModel):
    """Result of a successful mint or claim"""

    success: bool = True
    wallet: str = Field(description="Payment key hash of the receiving wallet")
    item_ids: list[int] = Field(description="Issued item ids")
    count: int
    payment: int = Field(description="Amount charged in lovelace")
    wave_minted: int = Field(description="Items minted in the current wave after this call")
    total_minted: int = Field(description="Items minted in the collection after this call")
    claim: bool = Field(False, description="Whether this was a free claim")


class InfoResponse(BaseModel):
    """Sale status summary"""

    stage: int = Field(description="Numeric stage code")
    stage_name: str = Field(description="Stage name (CLOSED, NO_WAVE, WHITELIST, ...)")
    sale_open: bool
    total_minted: int
    wave_supply: int
    wave_minted: int
    max_mint_count: int
    price_per_token: int


class StageResponse(BaseModel):
    stage: int
    stage_name: str


class WalletStatusResponse(BaseModel):
    """Authorization and consumption status of one wallet"""

    wallet: str
    whitelisted: bool
    allowlisted: bool
    wallet_stage: int = Field(description="0=whitelist, 1=allowlist, 2=public")
    wallet_stage_name: str
    available_to_mint: int
    minted: int = Field(description="Items minted since the last minter reset")
    has_minted: bool
    in_claim_list: bool
    has_claimed: bool
    balance: int = Field(description="Items currently owned by the wallet in the registry")


class ItemResponse(BaseModel):
    item_id: int
    owner: str
    token_uri: str


# ============================================================================
# Admin Schemas
# ============================================================================


class SaleStartRequest(BaseModel):
    """Wave phase boundaries (POSIX seconds)"""

    whitelist_start: int = Field(ge=0)
    allowlist_start: int = Field(ge=0)
    public_start: int = Field(ge=0)


class WaveRequest(SaleStartRequest):
    """New wave with its own supply and optional price"""

    supply: int = Field(ge=0, description="Items available in this wave")
    price: int | None = Field(None, ge=0, description="Price per item, defaults to the deployment price")


class WaveResponse(BaseModel):
    success: bool = True
    whitelist_start: int
    allowlist_start: int
    public_start: int
    supply: int
    price: int


class WalletListRequest(BaseModel):
    wallets: list[str] = Field(description="Payment key hashes or addresses")


class WalletListResponse(BaseModel):
    success: bool = True
    added: int = Field(description="Wallets not previously present")


class MerkleRootRequest(BaseModel):
    root: str | None = Field(None, description="32-byte root (hex), null to clear")


class OwnershipRequest(BaseModel):
    new_owner: str


class BaseUriRequest(BaseModel):
    uri: str


class AdminActionResponse(BaseModel):
    success: bool = True
    message: str


class ErrorDetail(BaseModel):
    code: str
    message: str
    phase: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response"""

    detail: ErrorDetail | str
