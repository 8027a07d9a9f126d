"""
Engine State

Aggregate of everything the engine persists: sale flag, active wave and its
counters, Merkle roots, wallet ledger and claim list.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mint_engine.ledger import ClaimList, WalletLedger
from mint_engine.types import MintProfile, SaleConfig, Wave


STATE_VERSION = 1


@dataclass
class EngineState:
    config: SaleConfig
    owner: str
    sale_open: bool = False
    wave: Optional[Wave] = None
    wave_id: int = 0  # bumped on every installed wave
    wave_minted: int = 0
    total_minted: int = 0
    whitelist_root: Optional[bytes] = None
    allowlist_root: Optional[bytes] = None
    base_uri: str = ""
    ledger: WalletLedger = field(default_factory=WalletLedger)
    claims: ClaimList = field(default_factory=ClaimList)

    @property
    def wave_configured(self) -> bool:
        return self.wave is not None and self.wave.configured

    @property
    def wave_remaining(self) -> int:
        if self.wave is None:
            return 0
        return max(self.wave.supply - self.wave_minted, 0)

    @property
    def supply_remaining(self) -> int:
        return max(self.config.max_supply - self.total_minted, 0)

    def to_document(self) -> Dict[str, Any]:
        """
        Serialize to a JSON/BSON compatible dict

        Only the current ledger generation is written; older generations are
        unreachable after clear_minters().
        """
        return {
            "version": STATE_VERSION,
            "config": {
                "max_supply": self.config.max_supply,
                "default_wave_supply": self.config.default_wave_supply,
                "price_per_token": str(self.config.price_per_token),
                "max_mint_count": self.config.max_mint_count,
                "profile": self.config.profile.value,
                "authorization_modes": sorted(self.config.authorization_modes),
                "validate_wave_order": self.config.validate_wave_order,
            },
            "owner": self.owner,
            "sale_open": self.sale_open,
            "wave": None
            if self.wave is None
            else {
                "whitelist_start": self.wave.whitelist_start,
                "allowlist_start": self.wave.allowlist_start,
                "public_start": self.wave.public_start,
                "supply": self.wave.supply,
                # Prices may exceed 64-bit BSON integers
                "price": str(self.wave.price),
            },
            "wave_id": self.wave_id,
            "wave_minted": self.wave_minted,
            "total_minted": self.total_minted,
            "whitelist_root": self.whitelist_root.hex() if self.whitelist_root else None,
            "allowlist_root": self.allowlist_root.hex() if self.allowlist_root else None,
            "base_uri": self.base_uri,
            "ledger": {
                "generation": self.ledger.generation,
                "minted": self.ledger.current_counters(),
                "whitelist": sorted(self.ledger.whitelist),
                "allowlist": sorted(self.ledger.allowlist),
            },
            "claims": {
                "members": sorted(self.claims.members),
                "claimed": sorted(self.claims.claimed),
            },
        }

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "EngineState":
        config_data = data["config"]
        config = SaleConfig(
            max_supply=config_data["max_supply"],
            default_wave_supply=config_data["default_wave_supply"],
            price_per_token=int(config_data["price_per_token"]),
            max_mint_count=config_data["max_mint_count"],
            profile=MintProfile(config_data["profile"]),
            authorization_modes=frozenset(config_data["authorization_modes"]),
            validate_wave_order=config_data["validate_wave_order"],
        )

        wave_data = data.get("wave")
        wave = None
        if wave_data is not None:
            wave = Wave(
                whitelist_start=wave_data["whitelist_start"],
                allowlist_start=wave_data["allowlist_start"],
                public_start=wave_data["public_start"],
                supply=wave_data["supply"],
                price=int(wave_data["price"]),
            )

        ledger_data = data.get("ledger", {})
        generation = ledger_data.get("generation", 0)
        ledger = WalletLedger(
            generation=generation,
            minted={(generation, w): c for w, c in ledger_data.get("minted", {}).items()},
            whitelist=ledger_data.get("whitelist", []),
            allowlist=ledger_data.get("allowlist", []),
        )

        claims_data = data.get("claims", {})
        claims = ClaimList(
            members=claims_data.get("members", []),
            claimed=claims_data.get("claimed", []),
        )

        whitelist_root = data.get("whitelist_root")
        allowlist_root = data.get("allowlist_root")

        return cls(
            config=config,
            owner=data["owner"],
            sale_open=data.get("sale_open", False),
            wave=wave,
            wave_id=data.get("wave_id", 0),
            wave_minted=data.get("wave_minted", 0),
            total_minted=data.get("total_minted", 0),
            whitelist_root=bytes.fromhex(whitelist_root) if whitelist_root else None,
            allowlist_root=bytes.fromhex(allowlist_root) if allowlist_root else None,
            base_uri=data.get("base_uri", ""),
            ledger=ledger,
            claims=claims,
        )
