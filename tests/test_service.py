from __future__ import annotations

import pytest
from conftest import FakeBus, FakeClock, FakePlayer, Variant

from nowplaying import NowPlayingConfig, NowPlayingService
from nowplaying.exceptions import NowPlayingCommandError
from nowplaying.models.source import SourceKey

VLC = "org.mpris.MediaPlayer2.vlc"


def _vlc(title: str = "Local Song") -> FakePlayer:
    return FakePlayer(
        metadata={
            "xesam:title": Variant("s", title),
            "mpris:trackid": Variant("o", "/vlc/1"),
            "mpris:length": Variant("x", 180_000_000),
        },
        position_us=5_000_000,
    )


def _service(clock: FakeClock, bus_factory=None, **config) -> NowPlayingService:
    return NowPlayingService(NowPlayingConfig(**config), clock=clock, bus_factory=bus_factory)


def test_most_recent_playing_report_wins(clock) -> None:
    service = _service(clock, mpris_enabled=False)

    service.report("spotify", {"title": "Track A", "playing": True})
    clock.advance(100)
    service.report("ytmusic", {"title": "Track B", "playing": True})

    view = service.now_playing()

    assert view.reason == "playing"
    assert view.stale is False
    assert view.active is not None
    assert view.active.source == SourceKey.YTMUSIC
    assert view.active.title == "Track B"
    assert view.active_source.label == "YouTube Music"
    assert view.ts == clock.now


def test_back_to_back_reports_in_one_millisecond(clock) -> None:
    service = _service(clock, mpris_enabled=False)

    service.report("spotify", {"title": "Track A", "playing": True, "positionMs": 1000, "durationMs": 200_000})
    service.report("ytmusic", {"playing": True})

    view = service.now_playing()

    assert view.active is not None
    assert view.active.source == SourceKey.YTMUSIC
    assert view.reason == "playing"


def test_everything_stale_reports_none(clock) -> None:
    service = _service(clock, mpris_enabled=False)
    service.report("spotify", {"title": "Old", "playing": True})
    clock.advance(15_001)

    view = service.now_playing()

    assert view.active is None
    assert view.stale is True
    assert view.reason == "none"
    assert (view.active_source.key, view.active_source.label) == ("none", "")


@pytest.mark.asyncio
async def test_submit_command_requires_action(clock) -> None:
    service = _service(clock, mpris_enabled=False)

    with pytest.raises(NowPlayingCommandError):
        await service.submit_command("   ")

    assert service.poll_command(0) is None


@pytest.mark.asyncio
async def test_commands_are_pollable_by_extensions(clock) -> None:
    service = _service(clock, mpris_enabled=False)

    first = await service.submit_command("toggle")
    second = await service.submit_command(" seek ", 12_000)

    assert first.executed is False
    assert (second.cmd.id, second.cmd.action, second.cmd.value) == (2, "seek", 12_000)
    assert service.poll_command(1) == second.cmd
    assert service.poll_command(2) is None


@pytest.mark.asyncio
async def test_bridge_projects_local_player_into_view(clock, fake_bus: FakeBus, bus_factory) -> None:
    fake_bus.add(VLC, _vlc())

    async with _service(clock, bus_factory) as service:
        clock.advance(1_000)
        service.bridge.project()
        view = service.now_playing()

    assert view.active is not None
    assert view.active.source == SourceKey.MPRIS
    assert view.active.title == "Local Song"
    assert view.active.position_ms == 6_000
    assert (view.active_source.key, view.active_source.label) == ("vlc", "VLC")


@pytest.mark.asyncio
async def test_trusted_report_suppresses_bridge(clock, fake_bus: FakeBus, bus_factory) -> None:
    player = fake_bus.add(VLC, _vlc())

    async with _service(clock, bus_factory) as service:
        service.bridge.project()
        clock.advance(10)
        service.report("youtube", {"title": "Video", "playing": False})

        view = service.now_playing()
        result = await service.submit_command("toggle")

        assert SourceKey.MPRIS not in view.states
        assert view.active is not None
        assert view.active.source == SourceKey.YOUTUBE
        assert view.reason == "paused"
        assert result.executed is False
        assert service.poll_command(0) == result.cmd
        assert player.calls == []

        # Suppression lapses after the tamper window.
        clock.advance(12_001)
        service.bridge.project()
        view = service.now_playing()
        result = await service.submit_command("toggle")

        assert SourceKey.MPRIS in view.states
        assert view.active is not None
        assert view.active.source == SourceKey.MPRIS
        assert result.executed is True
        assert player.calls == [("PlayPause",)]


@pytest.mark.asyncio
async def test_untrusted_report_does_not_suppress_bridge(clock, fake_bus: FakeBus, bus_factory) -> None:
    player = fake_bus.add(VLC, _vlc())

    async with _service(clock, bus_factory) as service:
        service.report("spotify", {"title": "Remote", "playing": True})
        result = await service.submit_command("next")

    assert result.executed is True
    assert player.calls == [("Next",)]
