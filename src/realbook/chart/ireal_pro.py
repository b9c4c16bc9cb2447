"""Dialect for ``irealb://`` chart URLs.

Song chunk layout (``=``-separated)::

    Title = Composer = (unused) = Style = Key = Transpose = Body = CompStyle = Tempo = Repeats

Example (percent-decoded)::

    500 Miles High=Corea Chick==Bossa Nova=E-=7=1r34LbKcu7...=Jazz-Bossa Nova=140=0

The body carries the ``1r34LbKcu7`` music prefix and is scrambled (see
:mod:`realbook.chart.scramble`).  The prefix is the most reliable anchor, so
the body is located by it first; the three fields after the body are always
CompStyle, Tempo and Repeats.
"""

from ..exceptions import MalformedChartUrl
from ..models import MUSIC_PREFIX, ChartFields
from .base import ChartDialect
from .scramble import unscramble
from .url import field_at, split_fields

# Where the body sits in a complete chunk
BODY_INDEX = 6

# Metadata field positions before the body
_COMPOSER, _STYLE, _KEY, _TRANSPOSE = 1, 3, 4, 5


class IRealProDialect(ChartDialect):
    """Scrambled ``irealb://`` charts, as exported by current iReal apps."""

    schemes = ("irealb", "")

    def parse_fields(self, chunk: str) -> ChartFields:
        fields = split_fields(chunk)
        body_index = _find_body(fields)
        if body_index is None:
            raise MalformedChartUrl(chunk, "no chord body field")

        def before_body(index: int) -> str:
            return fields[index] if index < body_index else ""

        return ChartFields(
            title=fields[0].strip(),
            body=fields[body_index],
            composer=before_body(_COMPOSER).strip(),
            style=before_body(_STYLE).strip(),
            key=before_body(_KEY).strip(),
            transpose=before_body(_TRANSPOSE).strip(),
            comp_style=field_at(fields, body_index + 1).strip(),
            tempo=field_at(fields, body_index + 2).strip(),
            repeats=field_at(fields, body_index + 3).strip(),
        )

    def music(self, fields: ChartFields) -> str:
        return unscramble(fields.music)


def _find_body(fields: list[str]) -> int | None:
    for index, value in enumerate(fields[1:], start=1):
        if value.startswith(MUSIC_PREFIX):
            return index
    if len(fields) > BODY_INDEX and fields[BODY_INDEX]:
        return BODY_INDEX
    return None
