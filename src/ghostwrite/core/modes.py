"""Mode derivation.

The mode is a pure function of three facts: whether the grammar engine loaded,
whether the transform service is connected, and how many credits remain.
"""

from __future__ import annotations

from .types import CapabilityState, Mode


def derive_mode(
    *,
    grammar_loaded: bool,
    connected: bool,
    credits: int,
    metered: bool = True,
) -> Mode:
    """Return the mode implied by the given capability facts.

    - ``ERROR`` whenever the grammar engine is not loaded.
    - ``AI_READY`` when the service is connected and has credits left
      (unmetered services only need to be connected).
    - ``BASIC_ONLY`` otherwise.
    """
    if not grammar_loaded:
        return Mode.ERROR
    if connected and (credits > 0 or not metered):
        return Mode.AI_READY
    return Mode.BASIC_ONLY


def derive_mode_for(state: CapabilityState) -> Mode:
    """Convenience wrapper over :func:`derive_mode` for a full snapshot."""
    return derive_mode(
        grammar_loaded=state.grammar.loaded,
        connected=state.remote.connected,
        credits=state.remote.credits,
        metered=state.remote.metered,
    )
