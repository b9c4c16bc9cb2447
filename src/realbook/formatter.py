"""Render a decoded :class:`~realbook.models.Song` as a persisted standard entry.

Entry shape
-----------

+------------------+----------------------------------------------------+
| Key              | Source                                             |
+==================+====================================================+
| ``Title``        | song title (``Untitled`` when blank)               |
| ``Composer``     | composer (``Unknown`` when blank)                  |
| ``Rhythm``       | style (``Swing`` when blank)                       |
| ``TimeSignature``| first time signature in the chart (``4/4``)        |
| ``Sections``     | one object per section, see below                  |
| ``Key``          | key, when set                                      |
| ``Tempo``        | BPM, when positive                                 |
| ``DefaultLoops`` | chart repeat count, when at least 1                |
| ``CompStyle``    | accompaniment style, when set                      |
+------------------+----------------------------------------------------+

Each section becomes::

    {"Label": "A", "Repeats": 1,
     "MainSegment": {"Chords": "C^7,A-7|D-7,G7"},
     "Endings": [{"Chords": "..."}, ...]}

``Repeats`` counts the extra passes (a ``{ ... }`` bracket played twice has
``Repeats: 1``); it is omitted for sections played once, as are ``Label``
and ``Endings`` when empty.  Chords within a measure are joined with ``,``
and measures with ``|``.

Usage::

    from realbook.formatter import StandardFormatter
    entry = StandardFormatter().render(song)
"""

from typing import Any

from .models import Measure, Section, Song

DEFAULT_TIME_SIGNATURE = "4/4"


class StandardFormatter:
    """Render a :class:`~realbook.models.Song` to a standards-collection entry."""

    def render(self, song: Song) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "Title": song.title.strip() or "Untitled",
            "Composer": song.composer.strip() or "Unknown",
            "Rhythm": song.style.strip() or "Swing",
            "TimeSignature": song.time_signature or DEFAULT_TIME_SIGNATURE,
            "Sections": [_render_section(s) for s in song.sections],
        }
        if song.key:
            entry["Key"] = song.key
        if song.tempo > 0:
            entry["Tempo"] = song.tempo
        if song.default_loops >= 1:
            entry["DefaultLoops"] = song.default_loops
        if song.comp_style.strip():
            entry["CompStyle"] = song.comp_style.strip()
        return entry


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_measures(measures: tuple[Measure, ...]) -> str:
    return "|".join(",".join(m.chords) for m in measures)


def _render_section(section: Section) -> dict[str, Any]:
    rendered: dict[str, Any] = {}
    if section.label:
        rendered["Label"] = section.label
    if section.repeats > 1:
        rendered["Repeats"] = section.repeats - 1
    rendered["MainSegment"] = {"Chords": _render_measures(section.measures)}
    if section.endings:
        ordered = sorted(section.endings, key=lambda e: e.number)
        rendered["Endings"] = [{"Chords": _render_measures(e.measures)} for e in ordered]
    return rendered


def has_chords(entry: dict[str, Any]) -> bool:
    """Return True if any section of a rendered entry holds a chord."""
    for section in entry.get("Sections") or []:
        if section.get("MainSegment", {}).get("Chords", "").strip("|, "):
            return True
        if any(e.get("Chords", "").strip("|, ") for e in section.get("Endings") or []):
            return True
    return False
