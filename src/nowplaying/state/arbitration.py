"""Arbitration: choose the canonical now-playing snapshot.

Given a consistent snapshot of the store, :func:`pick_active` returns
exactly one of:

* a fresh, playing source (most recently written wins), reason ``playing``
* the most recently written fresh source, reason ``paused``
* nothing, reason ``none``

It never raises. Writes sharing a millisecond are ordered by the store's
write counter (``seq``); remaining ties keep store key order because
``sorted`` is stable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from nowplaying._constants import DEFAULT_STALE_TTL_MS, DEFAULT_TAMPER_TTL_MS
from nowplaying.labels import source_info
from nowplaying.models.source import SourceKey, SourceState
from nowplaying.models.view import ArbitrationReason, NowPlayingView
from nowplaying.state.policy import DEFAULT_TRUSTED_SOURCES, is_fresh, is_tamper_active
from nowplaying.state.store import StateStore


@dataclass(frozen=True)
class Arbitration:
    active: SourceState | None
    stale: bool
    reason: ArbitrationReason


def _newest(states: list[SourceState]) -> SourceState:
    return sorted(states, key=lambda s: (s.ts, s.seq), reverse=True)[0]


def pick_active(
    states: Mapping[SourceKey, SourceState],
    now_ms: int,
    *,
    stale_ttl_ms: int = DEFAULT_STALE_TTL_MS,
    tamper_ttl_ms: int = DEFAULT_TAMPER_TTL_MS,
    trusted_keys: Iterable[SourceKey] = DEFAULT_TRUSTED_SOURCES,
) -> Arbitration:
    suppress_bridge = is_tamper_active(states, now_ms, trusted_keys, tamper_ttl_ms)

    candidates = [
        state for key, state in states.items() if not (suppress_bridge and key == SourceKey.MPRIS)
    ]
    fresh = [state for state in candidates if is_fresh(state, now_ms, stale_ttl_ms)]

    playing = [state for state in fresh if state.playing]
    if playing:
        return Arbitration(active=_newest(playing), stale=False, reason="playing")
    if fresh:
        return Arbitration(active=_newest(fresh), stale=False, reason="paused")
    return Arbitration(active=None, stale=True, reason="none")


def build_view(
    states: Mapping[SourceKey, SourceState],
    now_ms: int,
    *,
    stale_ttl_ms: int = DEFAULT_STALE_TTL_MS,
    tamper_ttl_ms: int = DEFAULT_TAMPER_TTL_MS,
    trusted_keys: Iterable[SourceKey] = DEFAULT_TRUSTED_SOURCES,
) -> NowPlayingView:
    """Client-facing view of *states*; ``mpris`` is hidden while suppressed."""
    trusted = tuple(trusted_keys)
    picked = pick_active(
        states,
        now_ms,
        stale_ttl_ms=stale_ttl_ms,
        tamper_ttl_ms=tamper_ttl_ms,
        trusted_keys=trusted,
    )
    suppress_bridge = is_tamper_active(states, now_ms, trusted, tamper_ttl_ms)
    visible = {key: state for key, state in states.items() if not (suppress_bridge and key == SourceKey.MPRIS)}
    return NowPlayingView(
        active=picked.active,
        stale=picked.stale,
        reason=picked.reason,
        ts=now_ms,
        states=visible,
        active_source=source_info(picked.active),
    )


class ArbitrationEngine:
    """Binds :func:`pick_active` to a store, a clock and configured TTLs."""

    def __init__(
        self,
        store: StateStore,
        *,
        stale_ttl_ms: int = DEFAULT_STALE_TTL_MS,
        tamper_ttl_ms: int = DEFAULT_TAMPER_TTL_MS,
        trusted_keys: Iterable[SourceKey] = DEFAULT_TRUSTED_SOURCES,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._store = store
        self._stale_ttl_ms = stale_ttl_ms
        self._tamper_ttl_ms = tamper_ttl_ms
        self._trusted_keys = tuple(trusted_keys)
        self._clock = clock or store.clock

    def is_bridge_suppressed(self, now_ms: int | None = None) -> bool:
        now = self._clock() if now_ms is None else now_ms
        return is_tamper_active(self._store.snapshot(), now, self._trusted_keys, self._tamper_ttl_ms)

    def pick_active(self, now_ms: int | None = None) -> Arbitration:
        now = self._clock() if now_ms is None else now_ms
        return pick_active(
            self._store.snapshot(),
            now,
            stale_ttl_ms=self._stale_ttl_ms,
            tamper_ttl_ms=self._tamper_ttl_ms,
            trusted_keys=self._trusted_keys,
        )

    def view(self, now_ms: int | None = None) -> NowPlayingView:
        """Build the client-facing view from one store snapshot."""
        now = self._clock() if now_ms is None else now_ms
        return build_view(
            self._store.snapshot(),
            now,
            stale_ttl_ms=self._stale_ttl_ms,
            tamper_ttl_ms=self._tamper_ttl_ms,
            trusted_keys=self._trusted_keys,
        )
