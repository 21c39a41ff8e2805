from __future__ import annotations

from conftest import Variant

from nowplaying.mpris._variant import unwrap_variant
from nowplaying.mpris.metadata import TrackMetadata, parse_metadata


def test_unwrap_variant_one_level_only() -> None:
    inner = Variant("s", "x")
    assert unwrap_variant(Variant("v", inner)) is inner
    assert unwrap_variant("raw") == "raw"
    assert unwrap_variant(None) is None


def test_parse_full_metadata_with_wrapped_fields() -> None:
    md = {
        "xesam:title": Variant("s", " Song "),
        "xesam:artist": Variant("as", ["A", " ", "B"]),
        "xesam:album": Variant("s", "Album"),
        "xesam:date": Variant("s", "2019-05-01T00:00:00Z"),
        "xesam:url": Variant("s", "https://open.spotify.com/track/1"),
        "mpris:artUrl": Variant("s", "https://i.scdn.co/image/abc"),
        "mpris:length": Variant("x", 215_999_999),
        "mpris:trackid": Variant("o", "/com/spotify/track/1"),
    }

    meta = parse_metadata(Variant("a{sv}", md))

    assert meta == TrackMetadata(
        title="Song",
        artist="A, B",
        album="Album",
        year=2019,
        url="https://open.spotify.com/track/1",
        cover="https://i.scdn.co/image/abc",
        duration_ms=215_999,
        track_id="/com/spotify/track/1",
    )


def test_raw_values_are_accepted() -> None:
    meta = parse_metadata({"xesam:title": "Raw", "xesam:artist": "Solo", "mpris:length": 5_000})

    assert meta.title == "Raw"
    assert meta.artist == "Solo"
    assert meta.duration_ms == 5


def test_year_falls_back_in_priority_order() -> None:
    assert parse_metadata({"xesam:contentCreated": "1987", "xesam:comment": ["2001"]}).year == 1987
    assert parse_metadata({"xesam:date": "unknown", "xesam:comment": ["live, 2004 tour"]}).year == 2004
    assert parse_metadata({"xesam:date": "3021", "xesam:comment": ["12005"]}).year is None


def test_comment_used_as_url_fallback() -> None:
    meta = parse_metadata({"xesam:comment": Variant("as", ["", "https://youtu.be/abc"])})

    assert meta.url == "https://youtu.be/abc"


def test_missing_or_malformed_fields_become_none() -> None:
    meta = parse_metadata(
        {
            "xesam:title": "",
            "xesam:artist": [],
            "mpris:length": "NaN",
            "mpris:trackid": None,
        }
    )

    assert meta == TrackMetadata()
    assert parse_metadata(None) == TrackMetadata()
    assert parse_metadata(["not", "a", "dict"]) == TrackMetadata()
    assert parse_metadata({"mpris:length": -10}).duration_ms == 0
