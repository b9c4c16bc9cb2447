"""Dialect for legacy ``irealbook://`` chart URLs.

Song chunk layout::

    Title = Composer = Style = Key = n = Body

The body is plain text (no music prefix, no scrambling) and there are no
tempo or repeat fields.
"""

from ..exceptions import MalformedChartUrl
from ..models import ChartFields
from .base import ChartDialect
from .url import field_at, split_fields

BODY_INDEX = 5


class IRealBookDialect(ChartDialect):
    """Unscrambled charts from the original iReal Book app."""

    schemes = ("irealbook",)

    def parse_fields(self, chunk: str) -> ChartFields:
        fields = split_fields(chunk)
        # Short chunks put the body last
        body_index = BODY_INDEX if len(fields) > BODY_INDEX else len(fields) - 1
        body = fields[body_index]
        if not body.strip():
            raise MalformedChartUrl(chunk, "empty chord body")

        def meta(index: int) -> str:
            return field_at(fields, index).strip() if index < body_index else ""

        return ChartFields(
            title=fields[0].strip(),
            body=body,
            composer=meta(1),
            style=meta(2),
            key=meta(3),
        )

    def music(self, fields: ChartFields) -> str:
        return fields.body
