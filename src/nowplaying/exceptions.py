"""Custom exception hierarchy for nowplaying."""

from __future__ import annotations


class NowPlayingError(Exception):
    """Base exception for all nowplaying errors."""


class NowPlayingConfigError(NowPlayingError):
    """Invalid or missing configuration."""


class NowPlayingCommandError(NowPlayingError):
    """A playback command was rejected before reaching the register (e.g. empty action)."""


class BusError(NowPlayingError):
    """Message-bus call failed (player vanished, method error, connection lost)."""

    def __init__(
        self,
        message: str,
        *,
        bus_name: str = "",
        member: str = "",
    ) -> None:
        self.bus_name = bus_name
        self.member = member
        super().__init__(message)


class BusUnavailableError(BusError):
    """The bus client library is missing or the session bus cannot be reached.

    The MPRIS bridge treats this as "disabled for the process lifetime";
    networked sources keep working.
    """
