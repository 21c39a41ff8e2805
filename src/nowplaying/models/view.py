"""Aggregated now-playing view returned to clients."""

from __future__ import annotations

from typing import Literal

from nowplaying.models._base import NowPlayingModel
from nowplaying.models.source import SourceKey, SourceState

ArbitrationReason = Literal["playing", "paused", "none"]


class SourceInfo(NowPlayingModel):
    """Client-facing key/label for a snapshot (e.g. ``("vlc", "VLC")``)."""

    key: str
    label: str


class NowPlayingView(NowPlayingModel):
    """Result of a now-playing query.

    ``states`` omits the ``mpris`` entry while tamper suppression is active.
    """

    active: SourceState | None
    stale: bool
    reason: ArbitrationReason
    ts: int
    states: dict[SourceKey, SourceState]
    active_source: SourceInfo
