"""Per-source playback state."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field

from nowplaying.models._base import NowPlayingModel


class SourceKey(enum.StrEnum):
    """Known report origins.

    Declaration order is the iteration order of the state store and
    therefore the deterministic tie-break order during arbitration.
    """

    SPOTIFY = "spotify"
    YTMUSIC = "ytmusic"
    YOUTUBE = "youtube"
    MPRIS = "mpris"
    OTHER = "other"


_SOURCE_ALIASES: dict[str, SourceKey] = {
    "spotify": SourceKey.SPOTIFY,
    "ytmusic": SourceKey.YTMUSIC,
    "youtube_music": SourceKey.YTMUSIC,
    "youtubemusic": SourceKey.YTMUSIC,
    "youtube": SourceKey.YOUTUBE,
    "yt": SourceKey.YOUTUBE,
    "mpris": SourceKey.MPRIS,
    "other": SourceKey.OTHER,
}


def parse_source_key(value: Any) -> SourceKey | None:
    """Strict lookup: return the key for a known name/alias, else ``None``."""
    if value is None:
        return None
    return _SOURCE_ALIASES.get(str(value).strip().lower())


def normalize_source_key(value: Any) -> SourceKey:
    """Lenient lookup used for inbound reports: unknown or empty -> ``other``."""
    return parse_source_key(value) or SourceKey.OTHER


class SourceState(NowPlayingModel):
    """Latest snapshot for one source key.

    Parameters
    ----------
    source : SourceKey
        Key this snapshot is stored under.
    title, artist, album, url, cover : str or None
        Playable metadata; ``None`` when never reported.
    year : int or None
        Release year.
    playing : bool
        Whether the source reported active playback.
    position_ms, duration_ms : int
        Non-negative; ``position_ms <= duration_ms`` whenever
        ``duration_ms > 0``.
    ts : int
        Epoch milliseconds of the write that produced this snapshot.
        ``0`` means the source has never been written.
    track_id, player_name, pos_base_ms, pos_base_ts
        Bridge-private fields, only populated under ``mpris``.
    seq : int
        Store-wide write counter stamped by :class:`StateStore`; orders
        writes that share a millisecond. Not serialized.
    """

    source: SourceKey
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    year: int | None = None
    url: str | None = None
    cover: str | None = None
    playing: bool = False
    position_ms: int = 0
    duration_ms: int = 0
    ts: int = 0

    track_id: str | None = None
    player_name: str | None = None
    pos_base_ms: int = 0
    pos_base_ts: int = 0

    seq: int = Field(default=0, exclude=True)

    @classmethod
    def blank(cls, source: SourceKey) -> SourceState:
        return cls(source=source)

    @property
    def is_written(self) -> bool:
        return self.ts > 0
