"""Data models for sources, commands and the aggregated view."""

from nowplaying.models._base import NowPlayingModel
from nowplaying.models.command import CommandRecord, CommandResult
from nowplaying.models.source import SourceKey, SourceState, normalize_source_key, parse_source_key
from nowplaying.models.view import ArbitrationReason, NowPlayingView, SourceInfo

__all__ = [
    "ArbitrationReason",
    "CommandRecord",
    "CommandResult",
    "NowPlayingModel",
    "NowPlayingView",
    "SourceInfo",
    "SourceKey",
    "SourceState",
    "normalize_source_key",
    "parse_source_key",
]
