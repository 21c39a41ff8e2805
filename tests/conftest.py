from __future__ import annotations

import asyncio
from typing import Any

import pytest

from nowplaying.exceptions import BusError


class Variant:
    """Stand-in for ``dbus_next.Variant``: a signature plus a value."""

    def __init__(self, signature: str, value: Any) -> None:
        self.signature = signature
        self.value = value


class FakeClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakePlayer:
    def __init__(
        self,
        *,
        status: str = "Playing",
        metadata: dict[str, Any] | None = None,
        position_us: int = 0,
        can_raise: Any = True,
    ) -> None:
        self.status = status
        self.metadata = metadata or {}
        self.position_us = position_us
        self.can_raise = can_raise
        self.calls: list[tuple[Any, ...]] = []
        self.fail: set[str] = set()
        self.properties_handlers: list[Any] = []
        self.seeked_handlers: list[Any] = []

    def _maybe_fail(self, member: str) -> None:
        if member in self.fail:
            raise BusError(f"{member} failed", member=member)

    async def get_all(self) -> dict[str, Any]:
        self._maybe_fail("GetAll")
        return {
            "PlaybackStatus": Variant("s", self.status),
            "Metadata": Variant("a{sv}", self.metadata),
            "Position": Variant("x", self.position_us),
        }

    async def get_property(self, interface: str, name: str) -> Any:
        self._maybe_fail(name)
        if isinstance(self.can_raise, Exception):
            raise self.can_raise
        return Variant("b", self.can_raise)

    def on_properties_changed(self, handler: Any) -> None:
        self.properties_handlers.append(handler)

    def on_seeked(self, handler: Any) -> None:
        self.seeked_handlers.append(handler)

    def emit_properties_changed(self, interface: str = "org.mpris.MediaPlayer2.Player") -> None:
        for handler in self.properties_handlers:
            handler(interface, {}, [])

    def emit_seeked(self, position_us: int) -> None:
        for handler in self.seeked_handlers:
            handler(position_us)

    async def raise_window(self) -> None:
        self._maybe_fail("Raise")
        self.calls.append(("Raise",))

    async def play_pause(self) -> None:
        self._maybe_fail("PlayPause")
        self.calls.append(("PlayPause",))

    async def next(self) -> None:
        self._maybe_fail("Next")
        self.calls.append(("Next",))

    async def previous(self) -> None:
        self._maybe_fail("Previous")
        self.calls.append(("Previous",))

    async def set_position(self, track_id: str, position_us: int) -> None:
        self._maybe_fail("SetPosition")
        self.calls.append(("SetPosition", track_id, position_us))

    async def seek(self, offset_us: int) -> None:
        self._maybe_fail("Seek")
        self.calls.append(("Seek", offset_us))


class FakeBus:
    def __init__(self) -> None:
        self.players: dict[str, FakePlayer] = {}
        self.extra_names: list[str] = ["org.freedesktop.DBus", ":1.42"]
        self.owner_handlers: list[Any] = []
        self.forgotten: list[str] = []
        self.disconnected = False
        self.closed = asyncio.Event()
        self.list_names_fails = False

    def add(self, name: str, player: FakePlayer) -> FakePlayer:
        self.players[name] = player
        return player

    async def list_names(self) -> list[str]:
        if self.list_names_fails:
            raise BusError("ListNames failed", member="ListNames")
        return [*self.extra_names, *self.players]

    async def subscribe_name_owner_changed(self, handler: Any) -> None:
        self.owner_handlers.append(handler)

    def emit_name_owner_changed(self, name: str, old: str, new: str) -> None:
        for handler in self.owner_handlers:
            handler(name, old, new)

    async def player(self, name: str) -> FakePlayer:
        player = self.players.get(name)
        if player is None:
            raise BusError(f"{name} not on bus", bus_name=name)
        return player

    def forget(self, name: str) -> None:
        self.forgotten.append(name)

    async def wait_for_disconnect(self) -> None:
        await self.closed.wait()

    def disconnect(self) -> None:
        self.disconnected = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_bus() -> FakeBus:
    return FakeBus()


def bus_factory_for(bus: FakeBus) -> Any:
    async def factory() -> FakeBus:
        return bus

    return factory


@pytest.fixture
def bus_factory(fake_bus: FakeBus) -> Any:
    return bus_factory_for(fake_bus)
