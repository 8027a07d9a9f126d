"""
Stage Engine

Derives the active phase and the reporting stage from a single time reading and
the engine state. Pure functions: nothing here mutates state.
"""

from typing import Optional

from mint_engine.state import EngineState
from mint_engine.types import Phase, Stage, Wave


def compute_phase(now: int, wave: Optional[Wave]) -> Phase:
    """
    Time-only phase of a wave

    Args:
        now: Current time (POSIX seconds), read once by the caller
        wave: Active wave, if any

    Returns:
        Phase: NOT_STARTED before whitelist_start or when no wave is configured
    """
    if wave is None or not wave.configured or now < wave.whitelist_start:
        return Phase.NOT_STARTED
    if now < wave.allowlist_start:
        return Phase.WHITELIST
    if now < wave.public_start:
        return Phase.ALLOWLIST
    return Phase.PUBLIC


_PHASE_STAGES = {
    Phase.NOT_STARTED: Stage.NOT_STARTED,
    Phase.WHITELIST: Stage.WHITELIST,
    Phase.ALLOWLIST: Stage.ALLOWLIST,
    Phase.PUBLIC: Stage.PUBLIC,
}


def compute_stage(now: int, state: EngineState) -> Stage:
    """
    Reporting stage

    SOLD_OUT takes precedence over the time phase once the wave supply is
    exhausted; installing a new wave resets it.
    """
    if not state.sale_open:
        return Stage.CLOSED
    if not state.wave_configured:
        return Stage.NO_WAVE
    if state.wave_minted >= state.wave.supply:
        return Stage.SOLD_OUT
    return _PHASE_STAGES[compute_phase(now, state.wave)]
