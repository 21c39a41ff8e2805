"""Per-player snapshot kept by the bridge, and position interpolation."""

from __future__ import annotations

from dataclasses import dataclass

from nowplaying.ingestion.normalize import clamp
from nowplaying.mpris.metadata import TrackMetadata


@dataclass(slots=True)
class PlayerSnapshot:
    """Last known state of one MPRIS player.

    ``pos_base_ms``/``pos_base_ts`` are the interpolation base: the
    position observed at the last refresh, seek or optimistic command, and
    when it was observed.
    """

    name: str
    playing: bool = False
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    year: int | None = None
    url: str | None = None
    cover: str | None = None
    duration_ms: int = 0
    position_ms: int = 0
    track_id: str | None = None
    ts: int = 0
    pos_base_ms: int = 0
    pos_base_ts: int = 0

    @classmethod
    def from_metadata(
        cls,
        name: str,
        meta: TrackMetadata,
        *,
        playing: bool,
        position_ms: int,
        now_ms: int,
    ) -> PlayerSnapshot:
        return cls(
            name=name,
            playing=playing,
            title=meta.title,
            artist=meta.artist,
            album=meta.album,
            year=meta.year,
            url=meta.url,
            cover=meta.cover,
            duration_ms=meta.duration_ms,
            position_ms=position_ms,
            track_id=meta.track_id,
            ts=now_ms,
            pos_base_ms=position_ms,
            pos_base_ts=now_ms,
        )

    def rebase(self, position_ms: int, now_ms: int) -> None:
        """Move the interpolation base to *position_ms* as of *now_ms*."""
        self.position_ms = position_ms
        self.pos_base_ms = position_ms
        self.pos_base_ts = now_ms
        self.ts = now_ms


def effective_position_ms(snapshot: PlayerSnapshot, now_ms: int) -> int:
    """Position at *now_ms*: advances from the base while playing, clamped to the track."""
    position = snapshot.position_ms
    if snapshot.playing and snapshot.pos_base_ts:
        position = snapshot.pos_base_ms + (now_ms - snapshot.pos_base_ts)
    if snapshot.duration_ms > 0:
        return clamp(position, 0, snapshot.duration_ms)
    return max(0, position)
