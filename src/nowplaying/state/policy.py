"""Staleness and tamper-suppression predicates.

Pure functions of a snapshot (or snapshot map), a clock reading and a TTL.
They hold no state and perform no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from nowplaying._constants import DEFAULT_STALE_TTL_MS, DEFAULT_TAMPER_TTL_MS
from nowplaying.models.source import SourceKey, SourceState

DEFAULT_TRUSTED_SOURCES: tuple[SourceKey, ...] = (SourceKey.YTMUSIC, SourceKey.YOUTUBE)


def age_ms(state: SourceState, now_ms: int) -> float:
    """Milliseconds since the last write; infinite for a never-written source."""
    if not state.ts:
        return math.inf
    return now_ms - state.ts


def is_fresh(state: SourceState, now_ms: int, stale_ttl_ms: int = DEFAULT_STALE_TTL_MS) -> bool:
    return age_ms(state, now_ms) <= stale_ttl_ms


def is_tamper_active(
    states: Mapping[SourceKey, SourceState],
    now_ms: int,
    trusted_keys: Iterable[SourceKey] = DEFAULT_TRUSTED_SOURCES,
    tamper_ttl_ms: int = DEFAULT_TAMPER_TTL_MS,
) -> bool:
    """True iff any trusted source was written within *tamper_ttl_ms*.

    While active, the MPRIS source is hidden and excluded from arbitration
    and commands are not forwarded to the local bridge.
    """
    for key in trusted_keys:
        state = states.get(key)
        if state is not None and age_ms(state, now_ms) <= tamper_ttl_ms:
            return True
    return False
