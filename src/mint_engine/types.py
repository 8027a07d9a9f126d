"""
Mint Engine Types

Plain data types shared by the stage engine, the ledgers and the controller.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import FrozenSet, List


################################################
# Stages
################################################
class Stage(IntEnum):
    """
    Reporting stage of the sale

    - CLOSED: sale has not been opened by the owner
    - NO_WAVE: sale open, no wave configured yet
    - WHITELIST / ALLOWLIST / PUBLIC: active phase of the current wave
    - NOT_STARTED: wave configured but its whitelist phase has not begun
    - SOLD_OUT: current wave supply exhausted
    """

    CLOSED = 0
    NO_WAVE = 1
    WHITELIST = 2
    ALLOWLIST = 3
    PUBLIC = 4
    NOT_STARTED = 5
    SOLD_OUT = 6


class Phase(IntEnum):
    """Time-only phase of a wave, ignoring supply"""

    NOT_STARTED = 0
    WHITELIST = 1
    ALLOWLIST = 2
    PUBLIC = 3


class WalletStage(IntEnum):
    """Earliest phase a wallet is authorized for (status reporting only)"""

    WHITELIST = 0
    ALLOWLIST = 1
    PUBLIC = 2


class MintProfile(str, Enum):
    """
    Deployment profile for per-wallet consumption

    - CAPPED: each wallet may mint up to max_mint_count items
    - SINGLE_CLAIM: each wallet may mint exactly one item
    """

    CAPPED = "capped"
    SINGLE_CLAIM = "single_claim"


AUTH_EXPLICIT = "explicit"
AUTH_MERKLE = "merkle"

NO_WAVE_TIMESTAMP = 0


################################################
# Configuration
################################################
@dataclass(frozen=True)
class Wave:
    whitelist_start: int  # POSIX seconds
    allowlist_start: int
    public_start: int
    supply: int
    price: int  # smallest currency unit per item

    @property
    def configured(self) -> bool:
        return self.whitelist_start != NO_WAVE_TIMESTAMP


@dataclass(frozen=True)
class SaleConfig:
    """Deployment-wide parameters fixed when the engine is created"""

    max_supply: int = 200
    default_wave_supply: int = 50
    price_per_token: int = 1_000_000
    max_mint_count: int = 1
    profile: MintProfile = MintProfile.CAPPED
    authorization_modes: FrozenSet[str] = frozenset({AUTH_EXPLICIT, AUTH_MERKLE})
    validate_wave_order: bool = True


################################################
# Results
################################################
@dataclass(frozen=True)
class MintInfo:
    stage: Stage
    sale_open: bool
    total_minted: int
    wave_supply: int
    wave_minted: int
    max_mint_count: int
    price_per_token: int


@dataclass(frozen=True)
class MintPlan:
    """
    Validated, not yet committed mint request.

    Produced by the controller from a single state snapshot; committing it is the
    only way counters change.
    """

    wallet: str
    count: int
    payment: int
    wave_id: int
    claim: bool = False


@dataclass(frozen=True)
class MintReceipt:
    wallet: str
    item_ids: List[int] = field(default_factory=list)
    payment: int = 0
    wave_minted: int = 0
    total_minted: int = 0
    claim: bool = False

    @property
    def count(self) -> int:
        return len(self.item_ids)

