"""Normalization helpers.

Centralizes tolerant parsing: malformed values become ``None`` (or a
caller-chosen fallback) instead of raising.
"""

from __future__ import annotations

import math
import re
from typing import Any

_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")

_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return math.floor(parsed)


def clean_str(value: Any) -> str | None:
    """Stringify and strip; empty -> ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def non_negative_int(value: Any) -> int | None:
    parsed = safe_int(value)
    if parsed is None:
        return None
    return 0 if parsed < 0 else parsed


def coerce_bool(value: Any) -> bool:
    """Truthiness for report flags; strings must be an explicit "true" word."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    return bool(value)


def clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


def year_from_text(value: Any) -> int | None:
    """First 19xx/20xx year found in *value* (a string or a list of strings)."""
    if isinstance(value, (list, tuple)):
        text = " ".join(item for item in (clean_str(v) for v in value) if item)
    else:
        text = clean_str(value) or ""
    match = _YEAR_RE.search(text)
    return int(match.group(1)) if match else None


def us_to_ms(value: Any) -> int:
    """Convert a microsecond count to milliseconds (floor); non-positive/invalid -> 0."""
    parsed = safe_float(value)
    if parsed is None or parsed <= 0:
        return 0
    return int(parsed // 1000)
