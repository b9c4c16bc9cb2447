import pytest

from realbook.chart.url import field_at, split_fields, split_playlist, strip_scheme
from realbook.exceptions import MalformedChartUrl

# ---------------------------------------------------------------------------
# strip_scheme
# ---------------------------------------------------------------------------


def test_strip_scheme():
    assert strip_scheme("irealb://Tune%3DX") == ("irealb", "Tune%3DX")


def test_strip_scheme_lowercases_and_trims():
    assert strip_scheme("  IREALB://abc \n") == ("irealb", "abc")


def test_strip_scheme_absent():
    assert strip_scheme("Tune=Body") == ("", "Tune=Body")


# ---------------------------------------------------------------------------
# split_playlist
# ---------------------------------------------------------------------------


def test_single_song_with_trailing_separator(miles_url):
    name, chunks = split_playlist(miles_url)
    assert name == ""
    assert len(chunks) == 1
    assert chunks[0].startswith("500 Miles High=Corea Chick==Bossa Nova=E-")


def test_percent_decoding():
    _, chunks = split_playlist("irealb://A%20Tune%3DMe%3D%3DSwing")
    assert chunks == ["A Tune=Me==Swing"]


def test_playlist_name_is_last_part():
    name, chunks = split_playlist("irealb://One%3Dx===Two%3Dy===Jazz%20Set")
    assert name == "Jazz Set"
    assert chunks == ["One=x", "Two=y"]


def test_no_separator_means_no_name():
    name, chunks = split_playlist("irealb://One%3Dx")
    assert name == ""
    assert chunks == ["One=x"]


def test_blank_chunks_dropped():
    _, chunks = split_playlist("irealb://One%3Dx======Set")
    assert chunks == ["One=x"]


# ---------------------------------------------------------------------------
# split_fields
# ---------------------------------------------------------------------------


def test_split_fields():
    assert split_fields("Tune=Me==Swing") == ["Tune", "Me", "", "Swing"]


def test_single_field_is_malformed():
    with pytest.raises(MalformedChartUrl) as exc_info:
        split_fields("Just A Title")
    assert "chord body" in exc_info.value.reason


def test_blank_title_is_malformed():
    with pytest.raises(MalformedChartUrl):
        split_fields("  =1r34LbKcu7C|DZ")


def test_field_at_defaults_missing_trailing_field():
    fields = ["a", "b"]
    assert field_at(fields, 1) == "b"
    assert field_at(fields, 7) == ""
