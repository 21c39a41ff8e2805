"""Service configuration for nowplaying."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from nowplaying._constants import (
    DEFAULT_MPRIS_SCAN_MS,
    DEFAULT_MPRIS_TICK_MS,
    DEFAULT_STALE_TTL_MS,
    DEFAULT_TAMPER_TTL_MS,
)
from nowplaying.exceptions import NowPlayingConfigError
from nowplaying.models.source import SourceKey, parse_source_key


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str) -> int:
    try:
        return int(float(value.strip()))
    except (ValueError, OverflowError) as exc:
        raise NowPlayingConfigError(f"{name} must be a number, got {value!r}") from exc


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


def _parse_trusted(values: tuple[str, ...]) -> tuple[SourceKey, ...]:
    keys: list[SourceKey] = []
    for value in values:
        key = parse_source_key(value)
        if key is None:
            raise NowPlayingConfigError(f"Unknown trusted source {value!r}")
        if key not in keys:
            keys.append(key)
    return tuple(keys)


@dataclasses.dataclass(frozen=True)
class NowPlayingConfig:
    """Service configuration.

    Parameters
    ----------
    stale_ttl_ms : int
        Maximum snapshot age (ms) for a source to count as live during
        arbitration.
    tamper_ttl_ms : int
        A trusted source written within this many ms suppresses the MPRIS
        bridge (excluded from arbitration, hidden from the per-source map,
        commands not forwarded).
    trusted_sources : tuple of SourceKey
        Sources whose recent reports trigger tamper suppression.
    mpris_enabled : bool
        Start the local MPRIS bridge.
    mpris_tick_ms : int
        Interval of the projection tick that copies the preferred player
        into the ``mpris`` source.
    mpris_scan_ms : int
        Interval of the player discovery rescan.
    mpris_prefer : tuple of str
        Lower-cased substrings of player bus names, highest preference first.
    """

    stale_ttl_ms: int = DEFAULT_STALE_TTL_MS
    tamper_ttl_ms: int = DEFAULT_TAMPER_TTL_MS
    trusted_sources: tuple[SourceKey, ...] = (SourceKey.YTMUSIC, SourceKey.YOUTUBE)
    mpris_enabled: bool = True
    mpris_tick_ms: int = DEFAULT_MPRIS_TICK_MS
    mpris_scan_ms: int = DEFAULT_MPRIS_SCAN_MS
    mpris_prefer: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("stale_ttl_ms", "tamper_ttl_ms"):
            if getattr(self, name) < 0:
                raise NowPlayingConfigError(f"{name} must be >= 0")
        for name in ("mpris_tick_ms", "mpris_scan_ms"):
            if getattr(self, name) <= 0:
                raise NowPlayingConfigError(f"{name} must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> NowPlayingConfig:
        """Create configuration from ``NOWPLAYING_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        NowPlayingConfigError
            A numeric variable does not parse or a trusted source is unknown.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_INT_MAP = {
            "NOWPLAYING_STALE_MS": "stale_ttl_ms",
            "NOWPLAYING_TM_TTL_MS": "tamper_ttl_ms",
            "NOWPLAYING_MPRIS_TICK_MS": "mpris_tick_ms",
            "NOWPLAYING_MPRIS_SCAN_MS": "mpris_scan_ms",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip() and field_name not in overrides:
                config_kwargs[field_name] = _env_int(env_key, val)

        if "mpris_enabled" not in overrides:
            config_kwargs["mpris_enabled"] = _env_bool(env.get("NOWPLAYING_ENABLE_MPRIS"), True)

        trusted_env = env.get("NOWPLAYING_TM_SOURCES")
        if trusted_env is not None and "trusted_sources" not in overrides:
            config_kwargs["trusted_sources"] = _parse_trusted(_split_list(trusted_env))

        prefer_env = env.get("NOWPLAYING_MPRIS_PREFER")
        if prefer_env is not None and "mpris_prefer" not in overrides:
            config_kwargs["mpris_prefer"] = _split_list(prefer_env)

        # Accept plain lists/strings for the tuple fields when passed explicitly.
        trusted_override = overrides.pop("trusted_sources", None)
        if trusted_override is not None:
            items = _split_list(trusted_override) if isinstance(trusted_override, str) else tuple(trusted_override)
            config_kwargs["trusted_sources"] = _parse_trusted(tuple(str(item) for item in items))
        prefer_override = overrides.pop("mpris_prefer", None)
        if prefer_override is not None:
            if isinstance(prefer_override, str):
                config_kwargs["mpris_prefer"] = _split_list(prefer_override)
            else:
                config_kwargs["mpris_prefer"] = tuple(str(item).strip().lower() for item in prefer_override)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
