"""Decode chart URLs into :class:`~realbook.models.Song` objects.

Pipeline per song: split URL → parse fields → unscramble → tokenize → build.
"""

import logging
from dataclasses import dataclass, field

from .chart.url import split_playlist
from .exceptions import MalformedChartUrl
from .models import Song
from .registry import get_dialect

_LOG = logging.getLogger(__name__)


@dataclass
class Playlist:
    """Songs decoded from one chart URL, plus the charts that failed."""

    name: str
    songs: list[Song] = field(default_factory=list)
    failures: list[MalformedChartUrl] = field(default_factory=list)


def decode_chart(url: str) -> Song:
    """Decode the first song of a chart URL.

    Raises MalformedChartUrl if the URL holds no song or the song lacks a
    title or chord body.
    """
    dialect = get_dialect(url)
    _, chunks = split_playlist(url)
    if not chunks:
        raise MalformedChartUrl(url, "no song in URL")
    return dialect.decode(chunks[0])


def decode_playlist(url: str) -> Playlist:
    """Decode every song of a chart URL.

    A malformed song is recorded in ``failures`` and does not stop the others.
    """
    dialect = get_dialect(url)
    name, chunks = split_playlist(url)
    playlist = Playlist(name=name)
    for chunk in chunks:
        try:
            playlist.songs.append(dialect.decode(chunk))
        except MalformedChartUrl as exc:
            _LOG.warning("Skipping chart: %s", exc)
            playlist.failures.append(exc)
    _LOG.info(
        "Decoded %d song(s) from playlist %r, %d failure(s)",
        len(playlist.songs),
        name,
        len(playlist.failures),
    )
    return playlist
