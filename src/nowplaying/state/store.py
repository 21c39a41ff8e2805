"""In-memory state store.

Holds exactly one :class:`SourceState` per :class:`SourceKey`. Entries are
created blank at construction and only ever replaced, never removed; a
source's liveness is a function of its ``ts`` alone.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from nowplaying._clock import now_ms
from nowplaying.ingestion.report import sanitize_report
from nowplaying.models.source import SourceKey, SourceState, normalize_source_key

_logger = logging.getLogger(__name__)


class StateStore:
    """Owner of all per-source snapshots.

    Snapshots are frozen models; every write swaps a whole entry under a
    lock, so :meth:`snapshot` always returns a consistent view.
    """

    def __init__(self, *, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._states: dict[SourceKey, SourceState] = {key: SourceState.blank(key) for key in SourceKey}
        self._seq = 0

    @property
    def clock(self) -> Callable[[], int]:
        return self._clock

    def apply_report(self, source: Any, payload: Any) -> SourceState:
        """Sanitize a networked report into its source entry and return the new snapshot."""
        key = normalize_source_key(source)
        with self._lock:
            state = self._stamp(sanitize_report(payload, self._states[key], now_ms=self._clock()))
            self._states[key] = state
        _logger.debug("Report applied source=%s playing=%s title=%s", key, state.playing, state.title)
        return state

    def write_bridge(self, state: SourceState) -> None:
        """Replace the ``mpris`` entry with a projection from the local bridge."""
        if state.source != SourceKey.MPRIS:
            raise ValueError(f"bridge may only write {SourceKey.MPRIS!s}, got {state.source!s}")
        with self._lock:
            self._states[SourceKey.MPRIS] = self._stamp(state)

    def _stamp(self, state: SourceState) -> SourceState:
        # Caller holds the lock.
        self._seq += 1
        return state.model_copy(update={"seq": self._seq})

    def get(self, source: SourceKey) -> SourceState:
        with self._lock:
            return self._states[source]

    def snapshot(self) -> dict[SourceKey, SourceState]:
        """All entries in key order, as of one instant."""
        with self._lock:
            return dict(self._states)
