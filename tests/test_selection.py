from __future__ import annotations

from nowplaying._constants import BROWSER_TERMS, UNRANKED
from nowplaying.mpris.player import PlayerSnapshot, effective_position_ms
from nowplaying.mpris.selection import choose_player, hint_terms, matches_hint, prefer_rank

NOW = 10_000_000
SPOTIFY = "org.mpris.MediaPlayer2.spotify"
FIREFOX = "org.mpris.MediaPlayer2.firefox.instance_1_42"
VLC = "org.mpris.MediaPlayer2.vlc"


def _player(name: str, *, ts: int = NOW, playing: bool = True, **fields) -> PlayerSnapshot:
    return PlayerSnapshot(name=name, ts=ts, playing=playing, **fields)


def test_hint_terms() -> None:
    assert hint_terms("Spotify") == ("spotify",)
    assert hint_terms("ytmusic") == BROWSER_TERMS
    assert hint_terms("youtube") == BROWSER_TERMS
    assert hint_terms("vlc") == ("vlc",)
    assert hint_terms("  ") == ()
    assert hint_terms(None) == ()


def test_matches_hint() -> None:
    assert matches_hint(FIREFOX, "youtube")
    assert not matches_hint(SPOTIFY, "youtube")
    assert not matches_hint(SPOTIFY, None)


def test_prefer_rank() -> None:
    assert prefer_rank(VLC, ("spotify", "vlc")) == 1
    assert prefer_rank(FIREFOX, ("spotify", "vlc")) == UNRANKED
    assert prefer_rank(VLC, ()) == UNRANKED


def test_no_players_returns_none() -> None:
    assert choose_player([], now_ms=NOW) is None


def test_hint_beats_newer_non_matching_player() -> None:
    spotify = _player(SPOTIFY, ts=NOW - 2_000)
    firefox = _player(FIREFOX, ts=NOW - 10)

    chosen = choose_player([firefox, spotify], now_ms=NOW, hint="spotify")

    assert chosen is spotify


def test_playing_beats_hint_match() -> None:
    spotify = _player(SPOTIFY, playing=False)
    firefox = _player(FIREFOX, playing=True, ts=NOW - 500)

    assert choose_player([spotify, firefox], now_ms=NOW, hint="spotify") is firefox


def test_preference_then_recency() -> None:
    vlc = _player(VLC, ts=NOW - 3_000)
    spotify = _player(SPOTIFY, ts=NOW - 1_000)
    firefox = _player(FIREFOX, ts=NOW - 10)

    assert choose_player([vlc, spotify, firefox], now_ms=NOW, prefer=("vlc",)) is vlc
    assert choose_player([vlc, spotify, firefox], now_ms=NOW) is firefox


def test_long_silent_players_only_used_when_nothing_recent() -> None:
    old_playing = _player(VLC, ts=NOW - 45_001, playing=True)
    recent_paused = _player(SPOTIFY, ts=NOW - 1_000, playing=False)

    assert choose_player([old_playing, recent_paused], now_ms=NOW) is recent_paused
    assert choose_player([old_playing], now_ms=NOW) is old_playing


def test_interpolation_advances_while_playing() -> None:
    snapshot = _player(SPOTIFY, position_ms=10_000, pos_base_ms=10_000, pos_base_ts=NOW, duration_ms=200_000)

    assert effective_position_ms(snapshot, NOW + 2_500) == 12_500


def test_interpolation_clamps_to_duration_and_zero() -> None:
    snapshot = _player(SPOTIFY, position_ms=10_000, pos_base_ms=10_000, pos_base_ts=NOW, duration_ms=11_000)
    assert effective_position_ms(snapshot, NOW + 2_500) == 11_000

    no_duration = _player(SPOTIFY, pos_base_ms=-50, pos_base_ts=NOW)
    assert effective_position_ms(no_duration, NOW) == 0
    assert effective_position_ms(no_duration, NOW + 1_050) == 1_000


def test_interpolation_frozen_while_paused() -> None:
    snapshot = _player(SPOTIFY, playing=False, position_ms=7_000, pos_base_ms=7_000, pos_base_ts=NOW)

    assert effective_position_ms(snapshot, NOW + 60_000) == 7_000


def test_rebase_moves_interpolation_base() -> None:
    snapshot = _player(SPOTIFY, position_ms=1_000, pos_base_ms=1_000, pos_base_ts=NOW)

    snapshot.rebase(90_000, NOW + 5)

    assert effective_position_ms(snapshot, NOW + 1_005) == 91_000
    assert snapshot.ts == NOW + 5
