"""
Mint Service

Business logic layer hosting the mint engine behind the API.
Serializes every mutating call, loads the durable state, runs the controller,
saves the updated counters and then issues items through the registry.
"""

import asyncio
import copy
import logging
from typing import Any, Callable, Sequence

from api.database.repositories import AsyncRegistry, StateRepository
from mint_engine.controller import MintController, system_clock
from mint_engine.state import EngineState
from mint_engine.types import MintInfo, MintPlan, MintReceipt, SaleConfig, Stage, Wave
from mint_engine.wallets import normalize_wallet


logger = logging.getLogger(__name__)


class MintService:
    """
    Service for mint engine operations

    Each mutating call holds one lock from state load to state save, so calls are
    applied one at a time in arrival order. Rejected calls never save.
    """

    def __init__(
        self,
        repository: StateRepository,
        registry: AsyncRegistry,
        config: SaleConfig,
        owner: str,
        clock: Callable[[], int] = system_clock,
    ):
        """
        Initialize mint service

        Args:
            repository: Durable store for the engine state
            registry: Item registry issuing and resolving items
            config: Deployment parameters used when no state exists yet
            owner: Initial owner wallet used when no state exists yet
            clock: Returns current time in POSIX seconds
        """
        self.repository = repository
        self.registry = registry
        self.config = config
        self.owner = normalize_wallet(owner)
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _load(self) -> EngineState:
        state = await self.repository.load()
        if state is None:
            logger.info(f"No stored state, starting new collection owned by {self.owner}")
            state = EngineState(config=self.config, owner=self.owner)
        return state

    def _controller(self, state: EngineState) -> MintController:
        return MintController(state, clock=self.clock)

    async def _apply(self, operation: str, *args: Any) -> Any:
        """Run one administrative controller operation and persist on success"""
        async with self._lock:
            state = await self._load()
            result = getattr(self._controller(state), operation)(*args)
            await self.repository.save(state)
            return result

    # ============================================================================
    # Minting
    # ============================================================================

    async def _issue(self, state: EngineState, controller: MintController, plan: MintPlan) -> MintReceipt:
        """
        Persist the plan's counters, then issue its items

        Counters are saved before the registry is called, so a failed save issues
        nothing. If issuance fails the previous state is saved back.
        """
        previous = copy.deepcopy(state.to_document())
        controller.apply(plan)
        await self.repository.save(state)
        try:
            item_ids = await self.registry.issue(plan.wallet, plan.count)
        except Exception:
            logger.error(f"Issuing {plan.count} item(s) for {plan.wallet} failed, restoring counters")
            await self.repository.save(EngineState.from_document(previous))
            raise
        return controller.receipt(plan, item_ids)

    async def mint(
        self, caller: str, count: int, payment: int, proof: Sequence[str] | None = None
    ) -> MintReceipt:
        """
        Paid mint

        Args:
            caller: Minting wallet
            count: Number of items
            payment: Amount paid
            proof: Merkle proof for the current phase

        Returns:
            MintReceipt with the issued item ids

        Raises:
            MintError: If any check fails; nothing is issued or saved
        """
        async with self._lock:
            state = await self._load()
            controller = self._controller(state)
            plan = controller.prepare_mint(caller, count, payment, proof, now=self.clock())
            return await self._issue(state, controller, plan)

    async def claim(self, caller: str) -> MintReceipt:
        async with self._lock:
            state = await self._load()
            controller = self._controller(state)
            plan = controller.prepare_claim(caller)
            return await self._issue(state, controller, plan)

    # ============================================================================
    # Administration
    # ============================================================================

    async def set_sale_open(self, caller: str) -> bool:
        return await self._apply("set_sale_open", caller)

    async def start_wave(
        self,
        caller: str,
        whitelist_start: int,
        allowlist_start: int,
        public_start: int,
        supply: int,
        price: int | None = None,
    ) -> Wave:
        return await self._apply(
            "start_wave", caller, whitelist_start, allowlist_start, public_start, supply, price
        )

    async def set_sale_start(
        self, caller: str, whitelist_start: int, allowlist_start: int, public_start: int
    ) -> Wave:
        return await self._apply("set_sale_start", caller, whitelist_start, allowlist_start, public_start)

    async def set_whitelist(self, caller: str, wallets: list[str]) -> int:
        return await self._apply("set_whitelist", caller, wallets)

    async def set_allowlist(self, caller: str, wallets: list[str]) -> int:
        return await self._apply("set_allowlist", caller, wallets)

    async def add_to_claimlist(self, caller: str, wallets: list[str]) -> int:
        return await self._apply("add_to_claimlist", caller, wallets)

    async def set_merkle_root(self, caller: str, phase: str, root: str | None) -> None:
        operation = "set_merkle_root_whitelist" if phase == "whitelist" else "set_merkle_root_allowlist"
        return await self._apply(operation, caller, root)

    async def clear_minters(self, caller: str) -> int:
        return await self._apply("clear_minters", caller)

    async def transfer_ownership(self, caller: str, new_owner: str) -> str:
        return await self._apply("transfer_ownership", caller, new_owner)

    async def set_base_uri(self, caller: str, uri: str) -> None:
        return await self._apply("set_base_uri", caller, uri)

    # ============================================================================
    # Status
    # ============================================================================

    async def info(self) -> MintInfo:
        state = await self._load()
        return self._controller(state).info()

    async def stage(self) -> Stage:
        state = await self._load()
        return self._controller(state).stage()

    async def wallet_status(self, wallet: str, proof: Sequence[str] | None = None) -> dict[str, Any]:
        """Authorization and consumption summary for one wallet"""
        state = await self._load()
        controller = self._controller(state)
        wallet = normalize_wallet(wallet)
        return {
            "wallet": wallet,
            "whitelisted": controller.is_wallet_whitelisted(wallet, proof),
            "allowlisted": controller.is_wallet_allowlisted(wallet, proof),
            "wallet_stage": controller.get_wallet_stage(wallet, proof),
            "available_to_mint": controller.available_to_mint(wallet),
            "minted": controller.minted_count(wallet),
            "has_minted": controller.mint_records(wallet),
            "in_claim_list": state.claims.is_member(wallet),
            "has_claimed": state.claims.has_claimed(wallet),
            "balance": await self.registry.balance_of(wallet),
        }

    async def item(self, item_id: int) -> dict[str, Any] | None:
        owner = await self.registry.owner_of(item_id)
        if owner is None:
            return None
        state = await self._load()
        return {"item_id": item_id, "owner": owner, "token_uri": f"{state.base_uri}{item_id}"}
