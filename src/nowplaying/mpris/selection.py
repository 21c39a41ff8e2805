"""Preferred-player selection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from nowplaying._constants import BROWSER_TERMS, DEFAULT_STALE_TTL_MS, PLAYER_FRESH_FACTOR, UNRANKED
from nowplaying.mpris.player import PlayerSnapshot


def hint_terms(hint: str | None) -> tuple[str, ...]:
    """Name substrings a hint matches.

    ``youtube``/``ytmusic`` expand to browser names because web playback
    surfaces on the bus as the browser, not as a dedicated app.
    """
    term = (hint or "").strip().lower()
    if not term:
        return ()
    if term == "spotify":
        return ("spotify",)
    if term in ("youtube", "ytmusic"):
        return BROWSER_TERMS
    return (term,)


def matches_hint(name: str, hint: str | None) -> bool:
    lowered = (name or "").lower()
    return any(term in lowered for term in hint_terms(hint))


def prefer_rank(name: str, prefer: Sequence[str]) -> int:
    """Index of the first preference substring found in *name*; ``UNRANKED`` if none."""
    lowered = (name or "").lower()
    for index, term in enumerate(prefer):
        if term and term in lowered:
            return index
    return UNRANKED


def choose_player(
    players: Iterable[PlayerSnapshot],
    *,
    now_ms: int,
    hint: str | None = None,
    prefer: Sequence[str] = (),
    stale_ttl_ms: int = DEFAULT_STALE_TTL_MS,
) -> PlayerSnapshot | None:
    """Pick one player.

    Recently refreshed players first (within ``PLAYER_FRESH_FACTOR`` stale
    TTLs, if any), playing ones among those (if any), then ordered by hint
    match, configured preference and newest refresh.
    """
    candidates = list(players)
    if not candidates:
        return None

    window = stale_ttl_ms * PLAYER_FRESH_FACTOR
    recent = [p for p in candidates if p.ts and now_ms - p.ts <= window]
    pool = recent or candidates

    playing = [p for p in pool if p.playing]
    pool = playing or pool

    ranked = sorted(
        pool,
        key=lambda p: (
            0 if matches_hint(p.name, hint) else 1,
            prefer_rank(p.name, prefer),
            -p.ts,
        ),
    )
    return ranked[0]
