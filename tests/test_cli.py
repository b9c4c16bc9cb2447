import json
from unittest.mock import patch
from urllib.parse import quote

import pytest
from click.testing import CliRunner

from realbook.cli import main

SONG = "Tune=Writer==Medium Swing=C==1r34LbKcu7[C^7 |A-7 |D-7 |G7 Z=Jazz-Medium Swing=120=3"


def _url(*songs: str, name: str = "") -> str:
    payload = "===".join(songs + ((name,) if name else ()))
    return "irealb://" + quote(payload, safe="")


@pytest.fixture
def runner():
    return CliRunner()


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


def test_decode_summary(runner):
    result = runner.invoke(main, ["decode", _url(SONG)])
    assert result.exit_code == 0
    assert "Tune | Writer | key C | Medium Swing | 120 BPM | 1 section(s), 4 measure(s)" in result.output


def test_decode_miles(runner, miles_url):
    result = runner.invoke(main, ["decode", miles_url])
    assert result.exit_code == 0
    assert result.output.startswith("500 Miles High | Corea Chick | key E- | Bossa Nova | 140 BPM")


def test_decode_json(runner):
    result = runner.invoke(main, ["decode", "--json", _url(SONG)])
    assert result.exit_code == 0
    (entry,) = json.loads(result.output)
    assert entry["Title"] == "Tune"
    assert entry["Tempo"] == 120
    assert entry["DefaultLoops"] == 3
    assert entry["Sections"][0]["MainSegment"]["Chords"].count("|") == 3


def test_decode_all(runner):
    url = _url(SONG, "Broken", SONG.replace("Tune=", "Other=", 1), name="Gig")
    result = runner.invoke(main, ["decode", "--all", url])
    assert result.exit_code == 0
    assert "Tune | Writer" in result.output
    assert "Other | Writer" in result.output
    assert "Decoded 2 song(s), 1 failure(s)." in result.output


def test_decode_from_file(runner, tmp_path):
    path = tmp_path / "charts.txt"
    path.write_text(_url(SONG) + "\n", encoding="utf-8")
    result = runner.invoke(main, ["decode", str(path)])
    assert result.exit_code == 0
    assert result.output.startswith("Tune | Writer")


def test_decode_malformed(runner):
    result = runner.invoke(main, ["decode", _url("Broken")])
    assert result.exit_code == 1
    assert "Error: Malformed chart URL" in result.output


def test_decode_no_chart(runner, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("nothing to see\n", encoding="utf-8")
    result = runner.invoke(main, ["decode", str(path)])
    assert result.exit_code == 1
    assert "No chart URL found" in result.output


@patch("realbook.sources.httpx.get")
def test_decode_page_http_error(mock_get, runner):
    mock_get.return_value.status_code = 503
    result = runner.invoke(main, ["decode", "https://example.com/list"])
    assert result.exit_code == 1
    assert "Could not fetch https://example.com/list (HTTP 503)" in result.output


# ---------------------------------------------------------------------------
# sync-structures
# ---------------------------------------------------------------------------


def test_sync_structures(runner, write_json):
    local = write_json("standards.json", [{"Title": "Solar", "Sections": [{}]}])
    canonical = write_json("canonical.json", [{"Title": "Solar", "Sections": [{}, {"Repeats": 1}]}])

    result = runner.invoke(main, ["sync-structures", str(canonical), "--standards", str(local)])

    assert result.exit_code == 0
    assert "Updated repeats/sections for 1 song(s)." in result.output
    assert _read(local)[0]["Sections"] == [{}, {"Repeats": 1}]


def test_sync_structures_nothing_to_do(runner, write_json):
    local = write_json("standards.json", [{"Title": "Solar", "Sections": [{}]}])
    canonical = write_json("canonical.json", [{"Title": "Solar", "Sections": [{}]}])
    result = runner.invoke(main, ["sync-structures", str(canonical), "--standards", str(local)])
    assert result.exit_code == 0
    assert "No structural updates found." in result.output


def test_sync_structures_dry_run(runner, write_json):
    local = write_json("standards.json", [{"Title": "Solar", "Sections": [{}]}])
    canonical = write_json("canonical.json", [{"Title": "Solar", "Sections": [{}, {}]}])
    result = runner.invoke(
        main, ["sync-structures", str(canonical), "--standards", str(local), "--dry-run"]
    )
    assert result.exit_code == 0
    assert "[DRY RUN] No file written." in result.output
    assert _read(local)[0]["Sections"] == [{}]


def test_sync_structures_missing_canonical(runner, write_json, tmp_path):
    local = write_json("standards.json", [])
    result = runner.invoke(
        main, ["sync-structures", str(tmp_path / "missing.json"), "--standards", str(local)]
    )
    assert result.exit_code == 1
    assert "Standards repository error" in result.output


def test_sync_structures_undecodable_standards(runner, write_json, tmp_path):
    local = tmp_path / "standards.json"
    local.write_bytes(b'[{"Title": "\xff\xfe"}]')
    canonical = write_json("canonical.json", [])
    result = runner.invoke(main, ["sync-structures", str(canonical), "--standards", str(local)])
    assert result.exit_code == 1
    assert "Error: Standards repository error" in result.output
    assert "not UTF-8" in result.output


# ---------------------------------------------------------------------------
# normalize-defaults
# ---------------------------------------------------------------------------


def test_normalize_defaults_from_env(runner, write_json):
    path = write_json("standards.json", [{"Title": "A"}, {"Title": "B", "DefaultLoops": 0},
                                         {"Title": "C", "DefaultLoops": 5}])
    result = runner.invoke(main, ["normalize-defaults"], env={"REALBOOK_STANDARDS": str(path)})
    assert result.exit_code == 0
    assert "Set DefaultLoops=2 on 2 standard(s)." in result.output
    assert [e["DefaultLoops"] for e in _read(path)] == [2, 2, 5]


def test_normalize_defaults_requires_standards(runner):
    result = runner.invoke(main, ["normalize-defaults"], env={"REALBOOK_STANDARDS": None})
    assert result.exit_code == 2


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------


def test_merge(runner, write_json):
    path = write_json("standards.json", [{"Title": "tune", "Tempo": 90}])
    other = SONG.replace("Tune=", "Other=", 1)
    result = runner.invoke(main, ["merge", _url(SONG, other, name="Gig"), "--standards", str(path)])

    assert result.exit_code == 0
    assert "Songs in playlist: 2" in result.output
    assert "Tempo updated for existing: 1" in result.output
    assert "Repeats updated for existing: 1" in result.output
    assert "New standards added: 1" in result.output
    saved = _read(path)
    assert [e["Title"] for e in saved] == ["tune", "Other"]
    assert saved[0]["Tempo"] == 120


def test_merge_update_only(runner, write_json):
    path = write_json("standards.json", [{"Title": "Tune"}])
    other = SONG.replace("Tune=", "Other=", 1)
    result = runner.invoke(
        main, ["merge", _url(SONG, other, name="Gig"), "--standards", str(path), "--update-only"]
    )
    assert result.exit_code == 0
    assert "New standards added: 0" in result.output
    assert [e["Title"] for e in _read(path)] == ["Tune"]
