"""MPRIS ``Metadata`` normalization."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from nowplaying.ingestion.normalize import clean_str, us_to_ms, year_from_text
from nowplaying.mpris._variant import unwrap_variant

# Fields scanned for a release year, in priority order.
_YEAR_FIELDS: tuple[str, ...] = ("xesam:date", "xesam:contentCreated", "xesam:comment")


@dataclass(frozen=True)
class TrackMetadata:
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    year: int | None = None
    url: str | None = None
    cover: str | None = None
    duration_ms: int = 0
    track_id: str | None = None


def _text(value: Any) -> str | None:
    value = unwrap_variant(value)
    if isinstance(value, (list, tuple)):
        for item in value:
            text = clean_str(unwrap_variant(item))
            if text:
                return text
        return None
    return clean_str(value)


def _artists(value: Any) -> str | None:
    value = unwrap_variant(value)
    if isinstance(value, (list, tuple)):
        names = [name for name in (clean_str(unwrap_variant(item)) for item in value) if name]
        return ", ".join(names) if names else None
    return clean_str(value)


def parse_metadata(metadata: Any) -> TrackMetadata:
    """Normalize an MPRIS ``Metadata`` dict.

    Missing, empty or malformed fields become ``None`` (``0`` for the
    duration); this never raises.
    """
    md = unwrap_variant(metadata)
    if not isinstance(md, Mapping):
        return TrackMetadata()

    year: int | None = None
    for field in _YEAR_FIELDS:
        year = year_from_text(unwrap_variant(md.get(field)))
        if year is not None:
            break

    return TrackMetadata(
        title=_text(md.get("xesam:title")),
        artist=_artists(md.get("xesam:artist")),
        album=_text(md.get("xesam:album")),
        year=year,
        url=_text(md.get("xesam:url")) or _text(md.get("xesam:comment")),
        cover=_text(md.get("mpris:artUrl")),
        duration_ms=us_to_ms(unwrap_variant(md.get("mpris:length"))),
        track_id=clean_str(unwrap_variant(md.get("mpris:trackid"))),
    )
