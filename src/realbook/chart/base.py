from abc import ABC, abstractmethod

from ..models import ChartFields, Song
from .builder import ChartBuilder
from .tokenizer import tokenize


class ChartDialect(ABC):
    """Abstract base class for the chart URL dialects."""

    schemes: tuple[str, ...] = ()

    @classmethod
    def can_handle(cls, scheme: str) -> bool:
        """Return True if this dialect reads URLs with the given scheme."""
        return scheme.lower() in cls.schemes

    @abstractmethod
    def parse_fields(self, chunk: str) -> ChartFields:
        """Map one ``=``-separated song chunk onto :class:`ChartFields`.

        Raises MalformedChartUrl if the title or chord body is missing.
        """

    @abstractmethod
    def music(self, fields: ChartFields) -> str:
        """Return the plain (unscrambled) chord body for *fields*."""

    def decode(self, chunk: str) -> Song:
        """Convenience method: fields + music + tokenize + build."""
        fields = self.parse_fields(chunk)
        return ChartBuilder().build(tokenize(self.music(fields)), fields)
