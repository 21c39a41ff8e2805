"""Sanitizer for networked source reports.

Turns a raw partial update (as posted by a browser integration) plus the
previous snapshot into the next snapshot. Never raises: anything that does
not parse keeps the previous value, and the timestamp is always refreshed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nowplaying.ingestion.normalize import clamp, clean_str, coerce_bool, non_negative_int, safe_int
from nowplaying.models.source import SourceState

_TEXT_FIELDS: tuple[str, ...] = ("title", "artist", "album", "url", "cover")


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def sanitize_report(payload: Any, previous: SourceState, *, now_ms: int) -> SourceState:
    """Merge *payload* into *previous*.

    - non-empty text fields replace, empty/absent ones keep the previous value
    - ``playing`` always comes from the payload (absent -> ``False``)
    - ``positionMs``/``durationMs`` are floored to non-negative ints, falling
      back to the previous values when missing or non-finite
    - ``positionMs`` is clamped into ``[0, durationMs]`` when ``durationMs > 0``
    - ``ts`` is set to *now_ms*
    """
    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    update: dict[str, Any] = {}
    for field in _TEXT_FIELDS:
        text = clean_str(data.get(field))
        if text is not None:
            update[field] = text

    year = safe_int(data.get("year"))
    if year is not None:
        update["year"] = year

    position = non_negative_int(_pick(data, "positionMs", "position_ms"))
    if position is None:
        position = previous.position_ms
    duration = non_negative_int(_pick(data, "durationMs", "duration_ms"))
    if duration is None:
        duration = previous.duration_ms
    if duration > 0:
        position = clamp(position, 0, duration)

    update["playing"] = coerce_bool(data.get("playing"))
    update["position_ms"] = position
    update["duration_ms"] = duration
    update["ts"] = now_ms
    return previous.model_copy(update=update)
