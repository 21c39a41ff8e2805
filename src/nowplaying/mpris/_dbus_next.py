"""``dbus-next`` implementation of the MPRIS bus boundary."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from dbus_next import BusType
from dbus_next.aio import MessageBus, ProxyInterface
from dbus_next.errors import DBusError, InterfaceNotFoundError, InvalidIntrospectionError

from nowplaying._constants import (
    DBUS_NAME,
    DBUS_PATH,
    DBUS_PROPERTIES_IFACE,
    MPRIS_PATH,
    MPRIS_PLAYER_IFACE,
    MPRIS_ROOT_IFACE,
)
from nowplaying.exceptions import BusError, BusUnavailableError
from nowplaying.mpris.bus import NameOwnerChangedHandler, PropertiesChangedHandler, SeekedHandler

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_BUS_ERRORS = (DBusError, InterfaceNotFoundError, InvalidIntrospectionError, OSError, EOFError)


async def _call(awaitable: Awaitable[T], *, bus_name: str, member: str) -> T:
    try:
        return await awaitable
    except _BUS_ERRORS as exc:
        raise BusError(f"{member} on {bus_name} failed: {exc}", bus_name=bus_name, member=member) from exc


def _off(remove: Any, handler: Any, *, bus_name: str, member: str) -> None:
    try:
        remove(handler)
    except Exception:
        _logger.debug("Removing %s handler on %s failed", member, bus_name, exc_info=True)


class DbusNextPlayer:
    """:class:`~nowplaying.mpris.bus.PlayerProxy` over dbus-next proxy interfaces."""

    def __init__(self, name: str, props: ProxyInterface, player: ProxyInterface, root: ProxyInterface) -> None:
        self._name = name
        self._props = props
        self._player = player
        self._root = root
        self._properties_handlers: list[PropertiesChangedHandler] = []
        self._seeked_handlers: list[SeekedHandler] = []

    async def get_all(self) -> dict[str, Any]:
        return await _call(self._props.call_get_all(MPRIS_PLAYER_IFACE), bus_name=self._name, member="GetAll")

    async def get_property(self, interface: str, name: str) -> Any:
        return await _call(self._props.call_get(interface, name), bus_name=self._name, member=f"Get({name})")

    def on_properties_changed(self, handler: PropertiesChangedHandler) -> None:
        self._props.on_properties_changed(handler)
        self._properties_handlers.append(handler)

    def on_seeked(self, handler: SeekedHandler) -> None:
        self._player.on_seeked(handler)
        self._seeked_handlers.append(handler)

    def close(self) -> None:
        """Unregister every signal handler added through this proxy."""
        for handler in self._properties_handlers:
            _off(self._props.off_properties_changed, handler, bus_name=self._name, member="PropertiesChanged")
        for handler in self._seeked_handlers:
            _off(self._player.off_seeked, handler, bus_name=self._name, member="Seeked")
        self._properties_handlers.clear()
        self._seeked_handlers.clear()

    async def raise_window(self) -> None:
        await _call(self._root.call_raise(), bus_name=self._name, member="Raise")

    async def play_pause(self) -> None:
        await _call(self._player.call_play_pause(), bus_name=self._name, member="PlayPause")

    async def next(self) -> None:
        await _call(self._player.call_next(), bus_name=self._name, member="Next")

    async def previous(self) -> None:
        await _call(self._player.call_previous(), bus_name=self._name, member="Previous")

    async def set_position(self, track_id: str, position_us: int) -> None:
        await _call(
            self._player.call_set_position(track_id, position_us),
            bus_name=self._name,
            member="SetPosition",
        )

    async def seek(self, offset_us: int) -> None:
        await _call(self._player.call_seek(offset_us), bus_name=self._name, member="Seek")


class DbusNextBus:
    """:class:`~nowplaying.mpris.bus.MediaBus` over a connected dbus-next ``MessageBus``."""

    def __init__(self, bus: MessageBus, daemon: ProxyInterface) -> None:
        self._bus = bus
        self._daemon = daemon
        self._players: dict[str, DbusNextPlayer] = {}

    async def list_names(self) -> list[str]:
        names = await _call(self._daemon.call_list_names(), bus_name=DBUS_NAME, member="ListNames")
        return [str(name) for name in names or []]

    async def subscribe_name_owner_changed(self, handler: NameOwnerChangedHandler) -> None:
        self._daemon.on_name_owner_changed(handler)

    async def player(self, name: str) -> DbusNextPlayer:
        cached = self._players.get(name)
        if cached is not None:
            return cached
        introspection = await _call(self._bus.introspect(name, MPRIS_PATH), bus_name=name, member="Introspect")
        try:
            obj = self._bus.get_proxy_object(name, MPRIS_PATH, introspection)
            proxy = DbusNextPlayer(
                name,
                props=obj.get_interface(DBUS_PROPERTIES_IFACE),
                player=obj.get_interface(MPRIS_PLAYER_IFACE),
                root=obj.get_interface(MPRIS_ROOT_IFACE),
            )
        except _BUS_ERRORS as exc:
            raise BusError(f"{name} does not expose MPRIS: {exc}", bus_name=name, member="get_interface") from exc
        self._players[name] = proxy
        return proxy

    def forget(self, name: str) -> None:
        proxy = self._players.pop(name, None)
        if proxy is not None:
            proxy.close()

    async def wait_for_disconnect(self) -> None:
        await self._bus.wait_for_disconnect()

    def disconnect(self) -> None:
        self._players.clear()
        self._bus.disconnect()


async def connect_session_bus() -> DbusNextBus:
    """Connect to the session bus and bind the bus daemon interface."""
    try:
        bus = await MessageBus(bus_type=BusType.SESSION).connect()
        introspection = await bus.introspect(DBUS_NAME, DBUS_PATH)
        daemon = bus.get_proxy_object(DBUS_NAME, DBUS_PATH, introspection).get_interface(DBUS_NAME)
    except Exception as exc:
        raise BusUnavailableError(f"Session bus unavailable: {exc}", bus_name=DBUS_NAME, member="connect") from exc
    _logger.debug("Connected to session bus unique_name=%s", bus.unique_name)
    return DbusNextBus(bus, daemon)
