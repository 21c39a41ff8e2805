"""Local MPRIS bridge: player discovery, selection, interpolation and control."""

from nowplaying.mpris.bridge import BusFactory, MprisBridge
from nowplaying.mpris.bus import MediaBus, PlayerProxy
from nowplaying.mpris.metadata import TrackMetadata, parse_metadata
from nowplaying.mpris.player import PlayerSnapshot, effective_position_ms
from nowplaying.mpris.selection import choose_player, hint_terms, matches_hint, prefer_rank

__all__ = [
    "BusFactory",
    "MediaBus",
    "MprisBridge",
    "PlayerProxy",
    "PlayerSnapshot",
    "TrackMetadata",
    "choose_player",
    "effective_position_ms",
    "hint_terms",
    "matches_hint",
    "parse_metadata",
    "prefer_rank",
]
