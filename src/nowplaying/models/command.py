"""Command channel models."""

from __future__ import annotations

from typing import Any

from nowplaying.models._base import NowPlayingModel


class CommandRecord(NowPlayingModel):
    """The single "latest command" slot.

    ``id`` starts at ``0`` (no command yet); the first submitted command
    gets ``1``. Each submission replaces the previous record.
    """

    id: int = 0
    action: str | None = None
    value: Any = None
    ts: int = 0


class CommandResult(NowPlayingModel):
    """Outcome of a submission: the stored record and whether a local player acted on it."""

    cmd: CommandRecord
    executed: bool
