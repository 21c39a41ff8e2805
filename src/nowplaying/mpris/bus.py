"""Message-bus boundary used by the MPRIS bridge.

The bridge only talks to these protocols; :mod:`nowplaying.mpris._dbus_next`
provides the production implementation and tests pass in-memory doubles.
Every coroutine may raise :class:`~nowplaying.exceptions.BusError`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

PropertiesChangedHandler = Callable[[str, dict[str, Any], list[str]], None]
SeekedHandler = Callable[[int], None]
NameOwnerChangedHandler = Callable[[str, str, str], None]


class PlayerProxy(Protocol):
    """One MPRIS player object (``/org/mpris/MediaPlayer2``)."""

    async def get_all(self) -> dict[str, Any]:
        """All ``org.mpris.MediaPlayer2.Player`` properties (values may be variants)."""
        ...

    async def get_property(self, interface: str, name: str) -> Any: ...

    def on_properties_changed(self, handler: PropertiesChangedHandler) -> None: ...

    def on_seeked(self, handler: SeekedHandler) -> None: ...

    async def raise_window(self) -> None: ...

    async def play_pause(self) -> None: ...

    async def next(self) -> None: ...

    async def previous(self) -> None: ...

    async def set_position(self, track_id: str, position_us: int) -> None: ...

    async def seek(self, offset_us: int) -> None: ...


class MediaBus(Protocol):
    """Session-bus connection with name discovery."""

    async def list_names(self) -> list[str]: ...

    async def subscribe_name_owner_changed(self, handler: NameOwnerChangedHandler) -> None: ...

    async def player(self, name: str) -> PlayerProxy:
        """Proxy for *name*, created on first use and cached until :meth:`forget`."""
        ...

    def forget(self, name: str) -> None: ...

    async def wait_for_disconnect(self) -> None: ...

    def disconnect(self) -> None: ...
