"""Local MPRIS bridge.

Owns:
- connecting to the session bus and discovering ``org.mpris.MediaPlayer2.*``
  players (periodic rescan plus ``NameOwnerChanged``)
- one :class:`PlayerSnapshot` per attached player, refreshed on
  ``PropertiesChanged`` and rebased on ``Seeked``
- the projection tick that writes the preferred player into the store's
  ``mpris`` source
- executing playback commands against the preferred player

All mutation happens on the event loop that called :meth:`MprisBridge.start`.
Bus failures are logged and degrade to "no data"/"not executed".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from nowplaying._clock import now_ms
from nowplaying._constants import MPRIS_PLAYER_IFACE, MPRIS_PREFIX, MPRIS_ROOT_IFACE
from nowplaying.config import NowPlayingConfig
from nowplaying.exceptions import BusUnavailableError
from nowplaying.ingestion.normalize import clean_str, non_negative_int, us_to_ms
from nowplaying.models.source import SourceKey, SourceState
from nowplaying.mpris._variant import unwrap_variant
from nowplaying.mpris.bus import MediaBus, PlayerProxy
from nowplaying.mpris.metadata import parse_metadata
from nowplaying.mpris.player import PlayerSnapshot, effective_position_ms
from nowplaying.mpris.selection import choose_player
from nowplaying.state.store import StateStore

_logger = logging.getLogger(__name__)

BusFactory = Callable[[], Awaitable[MediaBus]]


async def _connect_default_bus() -> MediaBus:
    try:
        from nowplaying.mpris._dbus_next import connect_session_bus
    except ImportError as exc:
        raise BusUnavailableError("dbus-next is not installed (pip install dbus-next)") from exc
    return await connect_session_bus()


class MprisBridge:
    """Tracks local MPRIS players and projects the preferred one into a :class:`StateStore`."""

    def __init__(
        self,
        store: StateStore,
        *,
        config: NowPlayingConfig | None = None,
        clock: Callable[[], int] = now_ms,
        bus_factory: BusFactory | None = None,
    ) -> None:
        self._store = store
        self._config = config or NowPlayingConfig()
        self._clock = clock
        self._bus_factory = bus_factory or _connect_default_bus
        self._bus: MediaBus | None = None
        self._ok = False
        self._players: dict[str, PlayerSnapshot] = {}
        self._attached: set[str] = set()
        self._tasks: list[asyncio.Task[None]] = []
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def is_running(self) -> bool:
        """Whether the bridge is connected and its loops are active."""
        return self._ok

    @property
    def players(self) -> dict[str, PlayerSnapshot]:
        return dict(self._players)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Connect, scan once, subscribe to name changes and start the loops.

        Returns ``False`` (and stays disabled) when the bridge is turned off
        in config or the bus is unavailable.
        """
        if self._ok:
            return True
        if not self._config.mpris_enabled:
            _logger.info("MPRIS bridge disabled by configuration")
            return False

        try:
            bus = await self._bus_factory()
        except BusUnavailableError as exc:
            _logger.warning("MPRIS bridge disabled: %s", exc)
            return False
        except Exception:
            _logger.warning("MPRIS bridge disabled: bus connection failed", exc_info=True)
            return False

        self._bus = bus
        self._ok = True

        await self.scan()
        try:
            await bus.subscribe_name_owner_changed(self._on_name_owner_changed)
        except Exception:
            _logger.debug("NameOwnerChanged subscription failed; relying on rescans", exc_info=True)

        self._tasks = [
            asyncio.create_task(self._run_every(self._config.mpris_scan_ms, self.scan), name="mpris-scan"),
            asyncio.create_task(self._run_every(self._config.mpris_tick_ms, self._project_tick), name="mpris-tick"),
            asyncio.create_task(self._watch_disconnect(bus), name="mpris-disconnect"),
        ]
        _logger.info("MPRIS bridge enabled players=%d", len(self._players))
        return True

    async def stop(self) -> None:
        """Cancel loops and pending refreshes and disconnect from the bus."""
        bus = self._bus
        self._shutdown()
        tasks, self._tasks = self._tasks, []
        pending, self._pending = list(self._pending), set()
        current = asyncio.current_task()
        for task in [*tasks, *pending]:
            if task is not current:
                task.cancel()
        await asyncio.gather(*(t for t in [*tasks, *pending] if t is not current), return_exceptions=True)
        if bus is not None:
            try:
                bus.disconnect()
            except Exception:
                _logger.debug("Bus disconnect failed", exc_info=True)

    def _shutdown(self) -> None:
        self._ok = False
        self._bus = None
        self._players.clear()
        self._attached.clear()

    async def _watch_disconnect(self, bus: MediaBus) -> None:
        try:
            await bus.wait_for_disconnect()
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.debug("Bus connection closed with error", exc_info=True)
        if self._bus is not bus:
            return
        # No resubscription: a lost session bus disables the bridge until restart.
        _logger.warning("MPRIS bus disconnected; bridge disabled")
        self._shutdown()
        current = asyncio.current_task()
        for task in self._tasks:
            if task is not current:
                task.cancel()
        for task in list(self._pending):
            task.cancel()

    async def _run_every(self, interval_ms: int, body: Callable[[], Awaitable[Any]]) -> None:
        interval = interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            if not self._ok:
                continue
            try:
                await body()
            except Exception:
                _logger.debug("MPRIS periodic task failed", exc_info=True)

    async def _project_tick(self) -> None:
        self.project()

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def scan(self) -> None:
        """Attach newly registered players and drop vanished ones."""
        bus = self._bus
        if bus is None:
            return
        try:
            names = [name for name in await bus.list_names() if name.startswith(MPRIS_PREFIX)]
        except Exception:
            _logger.debug("MPRIS ListNames failed", exc_info=True)
            return

        for name in names:
            if name not in self._attached:
                await self.attach(name)
            elif name not in self._players:
                # Attached but the first refresh failed; try again.
                await self.refresh(name)

        registered = set(names)
        for name in list(self._attached | set(self._players)):
            if name not in registered:
                self.detach(name)

    async def attach(self, name: str) -> None:
        """Subscribe to a player's change/seek signals and refresh it once."""
        bus = self._bus
        if bus is None or name in self._attached:
            return
        self._attached.add(name)
        try:
            proxy = await bus.player(name)
            proxy.on_properties_changed(
                lambda iface, _changed, _invalidated: self._on_properties_changed(name, iface)
            )
            proxy.on_seeked(lambda position_us: self._on_seeked(name, position_us))
        except Exception:
            self._attached.discard(name)
            _logger.debug("MPRIS attach failed name=%s", name, exc_info=True)
            return
        _logger.debug("MPRIS player attached name=%s", name)
        await self.refresh(name)

    def detach(self, name: str) -> None:
        self._attached.discard(name)
        self._players.pop(name, None)
        if self._bus is not None:
            self._bus.forget(name)
        _logger.debug("MPRIS player detached name=%s", name)

    async def refresh(self, name: str) -> None:
        """Re-read all player properties into a fresh snapshot."""
        bus = self._bus
        if bus is None:
            return
        try:
            proxy = await bus.player(name)
            props = await proxy.get_all()
        except Exception:
            _logger.debug("MPRIS refresh failed name=%s", name, exc_info=True)
            return
        if name not in self._attached:
            return

        status = clean_str(unwrap_variant(props.get("PlaybackStatus"))) or ""
        meta = parse_metadata(props.get("Metadata"))
        position_ms = us_to_ms(unwrap_variant(props.get("Position")))
        self._players[name] = PlayerSnapshot.from_metadata(
            name,
            meta,
            playing=status.lower() == "playing",
            position_ms=position_ms,
            now_ms=self._clock(),
        )
        _logger.debug("MPRIS refreshed name=%s status=%s title=%s", name, status, meta.title)

    def _on_name_owner_changed(self, name: str, _old_owner: str, new_owner: str) -> None:
        if not str(name).startswith(MPRIS_PREFIX) or not self._ok:
            return
        if new_owner:
            self._spawn(self.attach(name))
        else:
            self.detach(name)

    def _on_properties_changed(self, name: str, interface: str) -> None:
        if interface != MPRIS_PLAYER_IFACE or not self._ok:
            return
        self._spawn(self.refresh(name))

    def _on_seeked(self, name: str, position_us: Any) -> None:
        snapshot = self._players.get(name)
        if snapshot is None:
            return
        snapshot.rebase(us_to_ms(unwrap_variant(position_us)), self._clock())

    # ------------------------------------------------------------------
    # Selection / projection
    # ------------------------------------------------------------------

    def choose(self, hint: str | None = None, now_ms: int | None = None) -> PlayerSnapshot | None:
        return choose_player(
            self._players.values(),
            now_ms=self._clock() if now_ms is None else now_ms,
            hint=hint,
            prefer=self._config.mpris_prefer,
            stale_ttl_ms=self._config.stale_ttl_ms,
        )

    def project(self) -> SourceState | None:
        """Write the preferred player's interpolated state into the ``mpris`` source."""
        chosen = self.choose()
        if chosen is None:
            return None

        now = self._clock()
        position = effective_position_ms(chosen, now)
        state = SourceState(
            source=SourceKey.MPRIS,
            title=clean_str(chosen.title),
            artist=clean_str(chosen.artist),
            album=clean_str(chosen.album),
            year=chosen.year,
            url=clean_str(chosen.url),
            cover=clean_str(chosen.cover),
            playing=chosen.playing,
            position_ms=position,
            duration_ms=max(0, chosen.duration_ms),
            ts=now,
            track_id=chosen.track_id,
            player_name=chosen.name,
            pos_base_ms=position,
            pos_base_ts=now,
        )
        self._store.write_bridge(state)
        return state

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def execute(self, action: str, value: Any = None) -> bool:
        """Run a playback command against the preferred player.

        Supported actions: ``raise`` (``value`` is an optional player hint),
        ``toggle``, ``next``, ``prev`` and ``seek`` (``value`` is the absolute
        target in ms). Returns ``False`` when nothing was executed.
        """
        bus = self._bus
        if not self._ok or bus is None:
            return False

        hint = clean_str(value) if action == "raise" else None
        chosen = self.choose(hint)
        if chosen is None:
            return False

        try:
            proxy = await bus.player(chosen.name)

            if action == "raise":
                try:
                    can_raise = unwrap_variant(await proxy.get_property(MPRIS_ROOT_IFACE, "CanRaise"))
                except Exception:
                    _logger.debug("CanRaise unreadable name=%s", chosen.name, exc_info=True)
                    can_raise = None
                if can_raise is False:
                    return False
                await proxy.raise_window()
                return True

            if action == "toggle":
                await proxy.play_pause()
                return True
            if action == "next":
                await proxy.next()
                return True
            if action == "prev":
                await proxy.previous()
                return True

            if action == "seek":
                return await self._seek(proxy, chosen, value)
        except Exception:
            _logger.debug("MPRIS command failed action=%s name=%s", action, chosen.name, exc_info=True)
            return False

        _logger.debug("Unsupported MPRIS action=%s", action)
        return False

    async def _seek(self, proxy: PlayerProxy, chosen: PlayerSnapshot, value: Any) -> bool:
        target_ms = non_negative_int(value) or 0
        track_id = chosen.track_id
        if not track_id:
            projected = self._store.get(SourceKey.MPRIS)
            if projected.player_name == chosen.name:
                track_id = projected.track_id

        if track_id:
            await proxy.set_position(str(track_id), target_ms * 1000)
        else:
            current_ms = effective_position_ms(chosen, self._clock())
            await proxy.seek((target_ms - current_ms) * 1000)

        # Optimistic: the Seeked signal may arrive late or never. A refresh
        # during the call may have replaced the snapshot, so rebase the current one.
        current = self._players.get(chosen.name)
        if current is not None:
            current.rebase(target_ms, self._clock())
        return True
