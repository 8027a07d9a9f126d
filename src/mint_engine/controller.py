"""
Mint Controller

Orchestrates claim requests against the engine state: resolves the phase,
authorizes the caller, checks counters and payment, asks the registry to issue
items and only then commits counter updates.

Every operation reads the clock once. Validation never mutates state, so a
rejected request leaves the state exactly as it was.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional, Sequence

from mint_engine import errors, merkle
from mint_engine.authorizers import build_authorizer
from mint_engine.registry import Registry
from mint_engine.stage import compute_phase, compute_stage
from mint_engine.state import EngineState
from mint_engine.types import (
    MintInfo,
    MintPlan,
    MintProfile,
    MintReceipt,
    Phase,
    SaleConfig,
    Stage,
    WalletStage,
    Wave,
)
from mint_engine.wallets import normalize_wallet


logger = logging.getLogger(__name__)


def system_clock() -> int:
    return int(time.time())


def _root_hex(root: Optional[bytes]) -> str:
    return root.hex() if root else "none"


class MintController:
    """Entry points for minting, claiming, administration and status queries"""

    def __init__(
        self,
        state: EngineState,
        registry: Optional[Registry] = None,
        clock: Callable[[], int] = system_clock,
    ):
        """
        Initialize controller

        Args:
            state: Engine state, mutated in place on successful operations
            registry: Item registry used by mint() and claim(). Hosts that issue
                items themselves use prepare_*(), apply() and receipt() and may omit it.
            clock: Returns current time in POSIX seconds
        """
        self.state = state
        self.registry = registry
        self.clock = clock

    @classmethod
    def create(
        cls,
        owner: str,
        registry: Registry,
        config: SaleConfig = SaleConfig(),
        clock: Callable[[], int] = system_clock,
    ) -> "MintController":
        """Create a controller over fresh state owned by owner"""
        state = EngineState(config=config, owner=normalize_wallet(owner))
        return cls(state, registry, clock)

    @property
    def config(self) -> SaleConfig:
        return self.state.config

    def _now(self, now: Optional[int]) -> int:
        return self.clock() if now is None else now

    # ============================================================================
    # Administration
    # ============================================================================

    def _require_owner(self, caller: str) -> str:
        if normalize_wallet(caller) != self.state.owner:
            raise errors.NotOwner()
        return self.state.owner

    def set_sale_open(self, caller: str) -> bool:
        """Open the sale. One-way; calling again has no further effect."""
        self._require_owner(caller)
        if not self.state.sale_open:
            self.state.sale_open = True
            logger.info("Sale opened")
        return self.state.sale_open

    def _validate_wave(self, wave: Wave) -> None:
        if wave.supply < 0 or wave.price < 0:
            raise errors.InvalidWaveConfig("Wave supply and price must be non-negative")
        if not self.config.validate_wave_order:
            return
        if not 0 < wave.whitelist_start < wave.allowlist_start < wave.public_start:
            raise errors.InvalidWaveConfig()

    def start_wave(
        self,
        caller: str,
        whitelist_start: int,
        allowlist_start: int,
        public_start: int,
        supply: int,
        price: Optional[int] = None,
    ) -> Wave:
        """
        Install a new wave, replacing the current one

        Resets the wave counter. Per-wallet counters are kept; use
        clear_minters() to reset them.

        Args:
            caller: Owner wallet
            whitelist_start: Start of the whitelist phase (POSIX seconds)
            allowlist_start: Start of the allowlist phase
            public_start: Start of the public phase
            supply: Items available in this wave
            price: Price per item, defaults to the deployment price

        Returns:
            Wave: The installed wave

        Raises:
            NotOwner: If caller is not the owner
            InvalidWaveConfig: If phase boundaries are out of order
        """
        self._require_owner(caller)
        wave = Wave(
            whitelist_start=whitelist_start,
            allowlist_start=allowlist_start,
            public_start=public_start,
            supply=supply,
            price=self.config.price_per_token if price is None else price,
        )
        self._validate_wave(wave)

        self.state.wave = wave
        self.state.wave_id += 1
        self.state.wave_minted = 0
        logger.info(
            f"Wave {self.state.wave_id} started: whitelist={whitelist_start} "
            f"allowlist={allowlist_start} public={public_start} supply={supply} price={wave.price}"
        )
        return wave

    def set_sale_start(
        self, caller: str, whitelist_start: int, allowlist_start: int, public_start: int
    ) -> Wave:
        """Install a wave with the deployment's default wave supply"""
        return self.start_wave(
            caller, whitelist_start, allowlist_start, public_start, self.config.default_wave_supply
        )

    def set_whitelist(self, caller: str, wallets: Iterable[str]) -> int:
        self._require_owner(caller)
        added = self.state.ledger.set_whitelist(wallets)
        logger.info(f"Whitelist: {added} wallets added ({len(self.state.ledger.whitelist)} total)")
        return added

    def set_allowlist(self, caller: str, wallets: Iterable[str]) -> int:
        self._require_owner(caller)
        added = self.state.ledger.set_allowlist(wallets)
        logger.info(f"Allowlist: {added} wallets added ({len(self.state.ledger.allowlist)} total)")
        return added

    def _coerce_root(self, root) -> Optional[bytes]:
        if root is None:
            return None
        value = merkle.to_hash(root)
        if value is None:
            raise errors.InvalidMerkleRoot()
        return value

    def set_merkle_root_whitelist(self, caller: str, root) -> None:
        """Replace the whitelist root. Proofs against the previous root stop working."""
        self._require_owner(caller)
        self.state.whitelist_root = self._coerce_root(root)
        logger.info(f"Whitelist merkle root set: {_root_hex(self.state.whitelist_root)}")

    def set_merkle_root_allowlist(self, caller: str, root) -> None:
        self._require_owner(caller)
        self.state.allowlist_root = self._coerce_root(root)
        logger.info(f"Allowlist merkle root set: {_root_hex(self.state.allowlist_root)}")

    def add_to_claimlist(self, caller: str, wallets: Iterable[str]) -> int:
        self._require_owner(caller)
        added = self.state.claims.add(wallets)
        logger.info(f"Claim list: {added} wallets added ({len(self.state.claims.members)} total)")
        return added

    def clear_minters(self, caller: str) -> int:
        """
        Reset every wallet's consumption counter

        Supply counters and issued items are untouched.
        """
        self._require_owner(caller)
        generation = self.state.ledger.clear_minters()
        logger.info(f"Minters cleared, ledger generation {generation}")
        return generation

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        self._require_owner(caller)
        previous = self.state.owner
        self.state.owner = normalize_wallet(new_owner)
        logger.info(f"Ownership transferred from {previous} to {self.state.owner}")
        return self.state.owner

    def set_base_uri(self, caller: str, uri: str) -> None:
        self._require_owner(caller)
        self.state.base_uri = uri
        logger.info(f"Base URI set: {uri}")

    # ============================================================================
    # Status
    # ============================================================================

    def stage(self, now: Optional[int] = None) -> Stage:
        return compute_stage(self._now(now), self.state)

    def phase(self, now: Optional[int] = None) -> Phase:
        return compute_phase(self._now(now), self.state.wave)

    def info(self, now: Optional[int] = None) -> MintInfo:
        wave = self.state.wave
        return MintInfo(
            stage=self.stage(now),
            sale_open=self.state.sale_open,
            total_minted=self.state.total_minted,
            wave_supply=wave.supply if wave is not None else 0,
            wave_minted=self.state.wave_minted,
            max_mint_count=self.config.max_mint_count,
            price_per_token=wave.price if wave is not None else self.config.price_per_token,
        )

    def is_wallet_whitelisted(self, wallet: str, proof: Optional[Sequence] = None) -> bool:
        authorizer = build_authorizer(
            self.config.authorization_modes, self.state.ledger.whitelist, self.state.whitelist_root
        )
        return authorizer.authorize(normalize_wallet(wallet), proof)

    def is_wallet_allowlisted(self, wallet: str, proof: Optional[Sequence] = None) -> bool:
        authorizer = build_authorizer(
            self.config.authorization_modes, self.state.ledger.allowlist, self.state.allowlist_root
        )
        return authorizer.authorize(normalize_wallet(wallet), proof)

    def get_wallet_stage(self, wallet: str, proof: Optional[Sequence] = None) -> WalletStage:
        """
        Earliest phase the wallet may mint in. For display only; minting
        re-checks authorization against the phase at call time.
        """
        if self.is_wallet_whitelisted(wallet, proof):
            return WalletStage.WHITELIST
        if self.is_wallet_allowlisted(wallet, proof):
            return WalletStage.ALLOWLIST
        return WalletStage.PUBLIC

    def mint_records(self, wallet: str) -> bool:
        return self.state.ledger.has_minted(normalize_wallet(wallet))

    def minted_count(self, wallet: str) -> int:
        return self.state.ledger.minted_count(normalize_wallet(wallet))

    def available_to_mint(self, wallet: str) -> int:
        if not self.state.sale_open or not self.state.wave_configured:
            return 0
        wallet = normalize_wallet(wallet)
        if self.config.profile == MintProfile.SINGLE_CLAIM:
            return 0 if self.state.ledger.has_minted(wallet) else 1
        return max(self.config.max_mint_count - self.state.ledger.minted_count(wallet), 0)

    def _require_registry(self) -> Registry:
        if self.registry is None:
            raise RuntimeError("No registry configured for this controller")
        return self.registry

    def owner_of(self, item_id: int) -> Optional[str]:
        return self._require_registry().owner_of(item_id)

    def token_uri(self, item_id: int) -> Optional[str]:
        if self.owner_of(item_id) is None:
            return None
        return f"{self.state.base_uri}{item_id}"

    # ============================================================================
    # Minting
    # ============================================================================

    def _check_wallet_cap(self, wallet: str, count: int) -> None:
        ledger = self.state.ledger
        if self.config.profile == MintProfile.SINGLE_CLAIM:
            if count != 1 or ledger.has_minted(wallet):
                raise errors.WalletCapExceeded("Already minted")
            return
        if ledger.minted_count(wallet) + count > self.config.max_mint_count:
            raise errors.WalletCapExceeded()

    def prepare_mint(
        self,
        caller: str,
        count: int,
        payment: int,
        proof: Optional[Sequence] = None,
        now: Optional[int] = None,
    ) -> MintPlan:
        """
        Validate a paid mint request without changing state

        Checks run in a fixed order and the first failure is raised.

        Args:
            caller: Minting wallet
            count: Number of items requested
            payment: Amount paid, must equal count * wave price
            proof: Merkle proof for the current phase, if any
            now: Time of the request, read from the clock if omitted

        Returns:
            MintPlan: Plan to pass to apply() or commit()

        Raises:
            MintError: The first failing check
        """
        wallet = normalize_wallet(caller)
        now = self._now(now)
        state = self.state
        try:
            if not state.sale_open:
                raise errors.SaleClosed()
            if count < 1:
                raise errors.InvalidMintCount()

            phase = compute_phase(now, state.wave)
            if phase == Phase.NOT_STARTED:
                raise errors.NotStartedYet()

            if phase == Phase.WHITELIST and not self.is_wallet_whitelisted(wallet, proof):
                raise errors.NotAuthorized("whitelist")
            if phase == Phase.ALLOWLIST and not self.is_wallet_allowlisted(wallet, proof):
                raise errors.NotAuthorized("allowlist")

            self._check_wallet_cap(wallet, count)

            if state.wave_minted + count > state.wave.supply:
                raise errors.WaveCapExceeded()
            if state.total_minted + count > self.config.max_supply:
                raise errors.MaxSupplyExceeded()

            if payment != count * state.wave.price:
                raise errors.BadPayment()
        except errors.MintError as e:
            logger.warning(f"Mint rejected for {wallet}: {e.code} ({e.message})")
            raise

        return MintPlan(wallet=wallet, count=count, payment=payment, wave_id=state.wave_id)

    def prepare_claim(self, caller: str) -> MintPlan:
        """Validate a free claim request without changing state"""
        wallet = normalize_wallet(caller)
        claims = self.state.claims
        try:
            if not claims.is_member(wallet):
                raise errors.NotInClaimList()
            if claims.has_claimed(wallet):
                raise errors.AlreadyClaimed()
            if self.state.total_minted + 1 > self.config.max_supply:
                raise errors.MaxSupplyExceeded()
        except errors.MintError as e:
            logger.warning(f"Claim rejected for {wallet}: {e.code} ({e.message})")
            raise

        return MintPlan(wallet=wallet, count=1, payment=0, wave_id=self.state.wave_id, claim=True)

    def _recheck(self, plan: MintPlan) -> None:
        state = self.state
        if plan.claim:
            if state.claims.has_claimed(plan.wallet):
                raise errors.AlreadyClaimed()
        else:
            self._check_wallet_cap(plan.wallet, plan.count)
            if state.wave_minted + plan.count > state.wave.supply:
                raise errors.WaveCapExceeded()
        if state.total_minted + plan.count > self.config.max_supply:
            raise errors.MaxSupplyExceeded()

    def apply(self, plan: MintPlan) -> None:
        """
        Record a validated plan in the counters

        Caps are checked again against the live counters, so plans prepared from
        the same state cannot together exceed them.

        Raises:
            RuntimeError: If the plan was built for another wave
            MintError: If a cap no longer admits the plan
        """
        state = self.state
        if plan.wave_id != state.wave_id:
            raise RuntimeError(f"Stale mint plan for wave {plan.wave_id}, current wave {state.wave_id}")
        try:
            self._recheck(plan)
        except errors.MintError as e:
            logger.warning(f"Plan rejected for {plan.wallet}: {e.code} ({e.message})")
            raise

        if plan.claim:
            state.claims.consume(plan.wallet)
        else:
            state.ledger.record(plan.wallet, plan.count)
            state.wave_minted += plan.count
        state.total_minted += plan.count

    def receipt(self, plan: MintPlan, item_ids: List[int]) -> MintReceipt:
        """Receipt for an applied plan and the items issued for it"""
        if len(item_ids) != plan.count:
            raise RuntimeError(f"Registry issued {len(item_ids)} items, expected {plan.count}")
        state = self.state
        logger.info(
            f"{'Claimed' if plan.claim else 'Minted'} {plan.count} item(s) {item_ids} "
            f"for {plan.wallet} (wave {state.wave_minted}, total {state.total_minted})"
        )
        return MintReceipt(
            wallet=plan.wallet,
            item_ids=list(item_ids),
            payment=plan.payment,
            wave_minted=state.wave_minted,
            total_minted=state.total_minted,
            claim=plan.claim,
        )

    def commit(self, plan: MintPlan, item_ids: List[int]) -> MintReceipt:
        """
        Apply a validated plan after the registry issued its items

        Raises:
            RuntimeError: If the plan is stale or the item count does not match
            MintError: If a cap no longer admits the plan
        """
        if len(item_ids) != plan.count:
            raise RuntimeError(f"Registry issued {len(item_ids)} items, expected {plan.count}")
        self.apply(plan)
        return self.receipt(plan, item_ids)

    def mint(
        self,
        caller: str,
        count: int,
        payment: int,
        proof: Optional[Sequence] = None,
        now: Optional[int] = None,
    ) -> MintReceipt:
        plan = self.prepare_mint(caller, count, payment, proof, now)
        item_ids = self._require_registry().issue(plan.wallet, plan.count)
        return self.commit(plan, item_ids)

    def claim(self, caller: str) -> MintReceipt:
        plan = self.prepare_claim(caller)
        item_ids = self._require_registry().issue(plan.wallet, plan.count)
        return self.commit(plan, item_ids)
