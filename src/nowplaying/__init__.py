"""nowplaying - Aggregate browser and local MPRIS playback into one now-playing view."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nowplaying")
except PackageNotFoundError:
    __version__ = "0+local"

from nowplaying.commands import CommandRegister
from nowplaying.config import NowPlayingConfig
from nowplaying.exceptions import (
    BusError,
    BusUnavailableError,
    NowPlayingCommandError,
    NowPlayingConfigError,
    NowPlayingError,
)
from nowplaying.models import (
    CommandRecord,
    CommandResult,
    NowPlayingView,
    SourceInfo,
    SourceKey,
    SourceState,
)
from nowplaying.mpris import MprisBridge, PlayerSnapshot
from nowplaying.service import NowPlayingService
from nowplaying.state.arbitration import ArbitrationEngine, build_view, pick_active
from nowplaying.state.store import StateStore

__all__ = [
    "__version__",
    "ArbitrationEngine",
    "BusError",
    "BusUnavailableError",
    "CommandRecord",
    "CommandRegister",
    "CommandResult",
    "MprisBridge",
    "NowPlayingCommandError",
    "NowPlayingConfig",
    "NowPlayingConfigError",
    "NowPlayingError",
    "NowPlayingService",
    "NowPlayingView",
    "PlayerSnapshot",
    "SourceInfo",
    "SourceKey",
    "SourceState",
    "StateStore",
    "build_view",
    "pick_active",
]
