"""Client-facing source labels.

Best-effort classifier, not a type dispatch: MPRIS bus names are matched
against an ordered table of substrings, first hit wins.
"""

from __future__ import annotations

from nowplaying.models.source import SourceKey, SourceState
from nowplaying.models.view import SourceInfo

# (substring of the lower-cased bus name, key, label)
PLAYER_CLASSIFIERS: tuple[tuple[str, str, str], ...] = (
    ("vlc", "vlc", "VLC"),
    ("spotify", "spotify", "Spotify"),
    ("chrom", "chrome", "Chrome"),
    ("brave", "brave", "Brave"),
    ("vivaldi", "vivaldi", "Vivaldi"),
    ("edge", "edge", "Edge"),
    ("firefox", "firefox", "Firefox"),
    ("mpv", "mpv", "mpv"),
    ("kodi", "kodi", "Kodi"),
    ("jellyfin", "jellyfin", "Jellyfin"),
)

_NETWORK_LABELS: dict[SourceKey, str] = {
    SourceKey.SPOTIFY: "Spotify",
    SourceKey.YTMUSIC: "YouTube Music",
    SourceKey.YOUTUBE: "YouTube",
    SourceKey.OTHER: "Other",
}


def classify_player_name(name: str | None) -> SourceInfo:
    """Map an MPRIS bus name to a key/label; unknown names use their last dotted segment."""
    lowered = (name or "").lower()
    for needle, key, label in PLAYER_CLASSIFIERS:
        if needle in lowered:
            return SourceInfo(key=key, label=label)
    segments = [part for part in lowered.split(".") if part]
    last = segments[-1] if segments else "mpris"
    return SourceInfo(key=last, label=last.upper())


def source_info(state: SourceState | None) -> SourceInfo:
    if state is None:
        return SourceInfo(key="none", label="")
    if state.source != SourceKey.MPRIS:
        return SourceInfo(key=str(state.source), label=_NETWORK_LABELS[state.source])
    return classify_player_name(state.player_name)
