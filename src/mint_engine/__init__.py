"""
Mint Engine

Time-gated, capacity-bounded distribution engine for a fixed-supply item
collection. Pure business logic: persistence and transport live in the API layer.
"""

from .controller import MintController
from .merkle import MerkleTree
from .registry import InMemoryRegistry, Registry
from .state import EngineState
from .types import MintInfo, MintProfile, MintReceipt, Phase, SaleConfig, Stage, WalletStage, Wave


__all__ = [
    "MintController",
    "EngineState",
    "MerkleTree",
    "Registry",
    "InMemoryRegistry",
    "SaleConfig",
    "Wave",
    "Stage",
    "Phase",
    "WalletStage",
    "MintProfile",
    "MintInfo",
    "MintReceipt",
]
