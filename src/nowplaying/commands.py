"""Single-slot command register.

Holds only the most recent command. A consumer that polls slower than
commands arrive sees just the latest one; intermediate commands are lost.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from nowplaying._clock import now_ms
from nowplaying.ingestion.normalize import safe_int
from nowplaying.models.command import CommandRecord, CommandResult

_logger = logging.getLogger(__name__)

CommandExecutor = Callable[[str, Any], Awaitable[bool]]


class CommandRegister:
    """Latest-command record plus forwarding to a local executor.

    Parameters
    ----------
    executor
        Coroutine run for every command unless suppressed (normally
        :meth:`MprisBridge.execute`). ``None`` records without executing.
    is_suppressed
        Called at submission time; when it returns ``True`` the command is
        recorded but not forwarded.
    """

    def __init__(
        self,
        *,
        executor: CommandExecutor | None = None,
        is_suppressed: Callable[[], bool] = lambda: False,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._executor = executor
        self._is_suppressed = is_suppressed
        self._clock = clock
        self._record = CommandRecord()

    @property
    def current(self) -> CommandRecord:
        return self._record

    async def submit(self, action: str, value: Any = None) -> CommandResult:
        record = CommandRecord(id=self._record.id + 1, action=action, value=value, ts=self._clock())
        self._record = record

        executed = False
        if self._executor is not None:
            if self._is_suppressed():
                _logger.debug("Command %d (%s) recorded; local bridge suppressed", record.id, action)
            else:
                try:
                    executed = bool(await self._executor(action, value))
                except Exception:
                    _logger.debug("Command %d (%s) execution failed", record.id, action, exc_info=True)
        return CommandResult(cmd=record, executed=executed)

    def poll_since(self, last_seen_id: Any) -> CommandRecord | None:
        """Current record if newer than *last_seen_id*, else ``None``."""
        since = safe_int(last_seen_id) or 0
        if self._record.id <= since:
            return None
        return self._record
