"""Split a chart URL into playlist name, song chunks and song fields.

URL layout::

    irealb://<song>===<song>===...===<playlist name>

each ``<song>`` being ``=``-separated fields.  The payload is percent-encoded
as a whole, so it is decoded before splitting.
"""

from urllib.parse import unquote

from ..exceptions import MalformedChartUrl

SONG_SEPARATOR = "==="
FIELD_SEPARATOR = "="


def strip_scheme(url: str) -> tuple[str, str]:
    """Return ``(scheme, payload)``; scheme is ``""`` when the URL has none."""
    url = url.strip()
    scheme, sep, payload = url.partition("://")
    if not sep:
        return "", url
    return scheme.lower(), payload


def split_playlist(url: str) -> tuple[str, list[str]]:
    """Return ``(playlist_name, song_chunks)`` for a chart URL.

    When the payload holds more than one ``===`` separated part the last one
    is the playlist name; a single-song URL ending in ``===`` therefore has
    an empty name.
    """
    _, payload = strip_scheme(url)
    parts = unquote(payload).split(SONG_SEPARATOR)
    name = parts.pop().strip() if len(parts) > 1 else ""
    return name, [part for part in parts if part.strip()]


def split_fields(chunk: str) -> list[str]:
    """Split one song chunk into its raw fields.

    Raises MalformedChartUrl when fewer than two fields are present: without
    a chord body there is nothing to decode.
    """
    fields = chunk.split(FIELD_SEPARATOR)
    if len(fields) < 2:
        raise MalformedChartUrl(chunk, "expected at least a title and a chord body")
    if not fields[0].strip():
        raise MalformedChartUrl(chunk, "missing title")
    return fields


def field_at(fields: list[str], index: int) -> str:
    """Return ``fields[index]`` or ``""`` for a missing trailing field."""
    return fields[index] if index < len(fields) else ""
