from urllib.parse import quote

import pytest

from realbook.chart.ireal_pro import IRealProDialect
from realbook.chart.tokenizer import tokenize
from realbook.chart.url import split_playlist
from realbook.decoder import decode_chart, decode_playlist
from realbook.exceptions import MalformedChartUrl
from realbook.models import TokenKind


def _url(*songs: str, name: str = "", scheme: str = "irealb") -> str:
    payload = "===".join(songs)
    if name:
        payload += "===" + name
    return f"{scheme}://" + quote(payload, safe="")


GOOD_SONG = "Tune=Writer==Medium Swing=C==1r34LbKcu7[C^7 |A-7 |D-7 |G7 Z=Jazz-Medium Swing=120=3"


# ---------------------------------------------------------------------------
# End to end: 500 Miles High
# ---------------------------------------------------------------------------


def test_miles_metadata(miles_url):
    song = decode_chart(miles_url)
    assert song.title == "500 Miles High"
    assert song.composer == "Corea Chick"
    assert song.key == "E-"
    assert song.style == "Bossa Nova"
    assert song.tempo == 140
    assert song.comp_style == "Jazz-Bossa Nova"
    assert song.transpose == "7"
    assert song.default_loops == 0
    assert song.time_signature == "4/4"


def test_miles_body_has_barlines(miles_url):
    dialect = IRealProDialect()
    _, (chunk,) = split_playlist(miles_url)
    fields = dialect.parse_fields(chunk)
    kinds = [t.kind for t in tokenize(dialect.music(fields))]
    assert TokenKind.BARLINE in kinds


def test_miles_structure(miles_url):
    song = decode_chart(miles_url)
    first, bracket = song.sections
    assert len(first.measures) == 18
    assert first.measures[0].chords == ("E-7",)
    assert first.measures[1].chords == ("E-7",)
    assert bracket.repeats == 2
    assert [m.chords for m in bracket.measures] == [("C-7",), ("C-7",), ("Ab^7",), ("Ab^7",)]
    assert len(song.performance_order()) == 26
    assert song.unknown_tokens == 0


# ---------------------------------------------------------------------------
# Field layout
# ---------------------------------------------------------------------------


def test_trailing_fields_default_to_empty():
    song = decode_chart(_url("Tune=Writer==Swing=F==1r34LbKcu7C|DZ"))
    assert song.comp_style == ""
    assert song.tempo == 0


def test_body_without_prefix_found_by_position():
    song = decode_chart(_url("Tune=Writer==Swing=F=0=C|DZ=Jazz-Swing=160"))
    assert song.measure_count() == 2
    assert song.tempo == 160


def test_short_chunk_with_prefixed_body():
    song = decode_chart(_url("Tune=1r34LbKcu7C|DZ"))
    assert song.title == "Tune"
    assert song.composer == ""
    assert song.measure_count() == 2


def test_missing_body_is_malformed():
    with pytest.raises(MalformedChartUrl):
        decode_chart(_url("Tune=Writer==Swing"))


def test_title_only_is_malformed():
    with pytest.raises(MalformedChartUrl):
        decode_chart(_url("Tune"))


def test_url_without_songs_is_malformed():
    with pytest.raises(MalformedChartUrl):
        decode_chart("irealb://")


def test_legacy_irealbook_dialect():
    song = decode_chart(_url("Old Tune=Someone=Ballad=F=n=[C^7 |A-7 Z", scheme="irealbook"))
    assert song.title == "Old Tune"
    assert song.composer == "Someone"
    assert song.style == "Ballad"
    assert song.key == "F"
    assert song.measure_count() == 2


# ---------------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------------


def test_playlist_decodes_every_song():
    second = GOOD_SONG.replace("Tune=", "Other Tune=", 1)
    playlist = decode_playlist(_url(GOOD_SONG, second, name="Gig"))
    assert playlist.name == "Gig"
    assert [s.title for s in playlist.songs] == ["Tune", "Other Tune"]
    assert playlist.failures == []


def test_malformed_song_does_not_abort_playlist():
    playlist = decode_playlist(_url("Broken", GOOD_SONG, name="Gig"))
    assert [s.title for s in playlist.songs] == ["Tune"]
    assert len(playlist.failures) == 1
    assert isinstance(playlist.failures[0], MalformedChartUrl)


def test_playlist_song_metadata():
    (song,) = decode_playlist(_url(GOOD_SONG, name="Gig")).songs
    assert song.tempo == 120
    assert song.default_loops == 3
    assert song.measure_count() == 4
