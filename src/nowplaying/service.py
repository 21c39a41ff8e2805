"""High-level async facade for the now-playing aggregator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from nowplaying._clock import now_ms
from nowplaying.commands import CommandRegister
from nowplaying.config import NowPlayingConfig
from nowplaying.exceptions import NowPlayingCommandError
from nowplaying.ingestion.normalize import clean_str
from nowplaying.models.command import CommandRecord, CommandResult
from nowplaying.models.source import SourceState
from nowplaying.models.view import NowPlayingView
from nowplaying.mpris.bridge import BusFactory, MprisBridge
from nowplaying.state.arbitration import ArbitrationEngine
from nowplaying.state.store import StateStore

_logger = logging.getLogger(__name__)


class NowPlayingService:
    """Aggregates source reports and local players into one now-playing view.

    Usage::

        async with NowPlayingService(NowPlayingConfig.from_env()) as service:
            service.report("spotify", {"title": "Song", "playing": True})
            view = service.now_playing()
            result = await service.submit_command("toggle")
    """

    def __init__(
        self,
        config: NowPlayingConfig | None = None,
        *,
        clock: Callable[[], int] = now_ms,
        bus_factory: BusFactory | None = None,
    ) -> None:
        self._config = config or NowPlayingConfig()
        self._store = StateStore(clock=clock)
        self._engine = ArbitrationEngine(
            self._store,
            stale_ttl_ms=self._config.stale_ttl_ms,
            tamper_ttl_ms=self._config.tamper_ttl_ms,
            trusted_keys=self._config.trusted_sources,
            clock=clock,
        )
        self._bridge = MprisBridge(self._store, config=self._config, clock=clock, bus_factory=bus_factory)
        self._commands = CommandRegister(
            executor=self._bridge.execute,
            is_suppressed=self._engine.is_bridge_suppressed,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NowPlayingService:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Start the MPRIS bridge (no-op when disabled or unavailable)."""
        await self._bridge.start()

    async def stop(self) -> None:
        await self._bridge.stop()

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> NowPlayingConfig:
        return self._config

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def engine(self) -> ArbitrationEngine:
        return self._engine

    @property
    def bridge(self) -> MprisBridge:
        return self._bridge

    @property
    def commands(self) -> CommandRegister:
        return self._commands

    # ------------------------------------------------------------------
    # External interfaces
    # ------------------------------------------------------------------

    def report(self, source: Any, payload: Any) -> SourceState:
        """Accept a partial report from a networked source (already authenticated)."""
        return self._store.apply_report(source, payload)

    def now_playing(self) -> NowPlayingView:
        return self._engine.view()

    async def submit_command(self, action: Any, value: Any = None) -> CommandResult:
        """Record a playback command and forward it to the local bridge unless suppressed.

        Raises
        ------
        NowPlayingCommandError
            *action* is empty.
        """
        action_name = clean_str(action)
        if action_name is None:
            raise NowPlayingCommandError("missing action")
        result = await self._commands.submit(action_name, value)
        _logger.debug("Command %d %s executed=%s", result.cmd.id, action_name, result.executed)
        return result

    def poll_command(self, since_id: Any = 0) -> CommandRecord | None:
        """Latest command if its id is greater than *since_id*, else ``None``."""
        return self._commands.poll_since(since_id)
