"""
Wallet Ledger and Claim List

Per-wallet consumption counters, explicit list membership and the one-time free
claim set. Counters are keyed by (generation, wallet) so clearing every wallet
is a single generation bump.
"""

from typing import Dict, Iterable, Set, Tuple

from mint_engine.wallets import normalize_wallets


class WalletLedger:
    """Per-wallet mint counters and explicit whitelist / allowlist membership"""

    def __init__(
        self,
        generation: int = 0,
        minted: Dict[Tuple[int, str], int] = None,
        whitelist: Iterable[str] = (),
        allowlist: Iterable[str] = (),
    ):
        self.generation = generation
        self.minted: Dict[Tuple[int, str], int] = dict(minted or {})
        self.whitelist: Set[str] = set(whitelist)
        self.allowlist: Set[str] = set(allowlist)

    # Counters
    def minted_count(self, wallet: str) -> int:
        return self.minted.get((self.generation, wallet), 0)

    def has_minted(self, wallet: str) -> bool:
        return self.minted_count(wallet) > 0

    def record(self, wallet: str, count: int) -> int:
        key = (self.generation, wallet)
        self.minted[key] = self.minted.get(key, 0) + count
        return self.minted[key]

    def clear_minters(self) -> int:
        """Reset every wallet's consumption by starting a new generation"""
        self.generation += 1
        return self.generation

    def current_counters(self) -> Dict[str, int]:
        return {
            wallet: count
            for (generation, wallet), count in self.minted.items()
            if generation == self.generation and count > 0
        }

    # Explicit lists
    def set_whitelist(self, wallets: Iterable[str]) -> int:
        """Add wallets to the whitelist, returns number of new entries"""
        before = len(self.whitelist)
        self.whitelist.update(normalize_wallets(wallets))
        return len(self.whitelist) - before

    def set_allowlist(self, wallets: Iterable[str]) -> int:
        before = len(self.allowlist)
        self.allowlist.update(normalize_wallets(wallets))
        return len(self.allowlist) - before


class ClaimList:
    """Wallets entitled to one free, payment-exempt item"""

    def __init__(self, members: Iterable[str] = (), claimed: Iterable[str] = ()):
        self.members: Set[str] = set(members)
        self.claimed: Set[str] = set(claimed)

    def add(self, wallets: Iterable[str]) -> int:
        before = len(self.members)
        self.members.update(normalize_wallets(wallets))
        return len(self.members) - before

    def is_member(self, wallet: str) -> bool:
        return wallet in self.members

    def has_claimed(self, wallet: str) -> bool:
        return wallet in self.claimed

    def consume(self, wallet: str) -> None:
        self.claimed.add(wallet)
