"""Merge decoded playlist songs into the standards collection.

For a song whose title is already in the collection, its tempo, loop count
and accompaniment style are refreshed.  A song that is missing is rendered
with :class:`~realbook.formatter.StandardFormatter` and appended, unless it
has no chords at all.
"""

import logging
from dataclasses import dataclass, field

from .formatter import StandardFormatter, has_chords
from .models import Song, StandardEntry
from .repository import StandardsRepository

_LOG = logging.getLogger(__name__)


def normalize_title(title: str) -> str:
    """Match key for playlist titles: trimmed, lowercased, inner whitespace collapsed."""
    return " ".join((title or "").split()).lower()


@dataclass
class MergeReport:
    added: list[str] = field(default_factory=list)
    tempo_updated: list[str] = field(default_factory=list)
    repeats_updated: int = 0
    skipped: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.tempo_updated or self.repeats_updated)


def _refresh(entry: StandardEntry, song: Song, report: MergeReport) -> None:
    data = entry.data
    if song.tempo > 0 and data.get("Tempo") != song.tempo:
        data["Tempo"] = song.tempo
        report.tempo_updated.append(f"{entry.title} → {song.tempo} BPM")
    if song.default_loops >= 1 and entry.default_loops != song.default_loops:
        entry.default_loops = song.default_loops
        report.repeats_updated += 1
    if song.comp_style.strip():
        data["CompStyle"] = song.comp_style.strip()


def merge_playlist(
    entries: list[StandardEntry], songs: list[Song], add_missing: bool = True
) -> MergeReport:
    """Merge *songs* into *entries* in place."""
    formatter = StandardFormatter()
    index = {normalize_title(e.title): e for e in reversed(entries)}
    report = MergeReport()

    for song in songs:
        key = normalize_title(song.title)
        if not key:
            continue

        entry = index.get(key)
        if entry is not None:
            _refresh(entry, song, report)
            continue
        if not add_missing:
            continue

        rendered = formatter.render(song)
        if not has_chords(rendered):
            _LOG.warning("Skip (no chords): %s", song.title)
            report.skipped.append(song.title)
            continue
        entry = StandardEntry(rendered)
        entries.append(entry)
        index[key] = entry
        report.added.append(song.title)

    return report


def merge_into_repository(
    repo: StandardsRepository,
    songs: list[Song],
    add_missing: bool = True,
    dry_run: bool = False,
) -> MergeReport:
    """Merge *songs* into a stored collection, saving only when it changed."""
    entries = repo.load_all()
    report = merge_playlist(entries, songs, add_missing=add_missing)
    if report.changed and not dry_run:
        repo.save_all(entries)
    _LOG.info(
        "Merged playlist: %d added, %d tempo, %d repeats updated",
        len(report.added),
        len(report.tempo_updated),
        report.repeats_updated,
    )
    return report
