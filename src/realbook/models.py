from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterator

MUSIC_PREFIX = "1r34LbKcu7"


@dataclass
class ChartFields:
    """Positional fields of one song inside a chart URL.

    ``body`` is the chord body exactly as it appears in the URL, music prefix
    included; :attr:`music` strips the prefix.
    """

    title: str
    body: str
    composer: str = ""
    style: str = ""
    key: str = ""
    transpose: str = ""
    comp_style: str = ""  # e.g. "Jazz-Bossa Nova"
    tempo: str = ""
    repeats: str = ""

    @property
    def music(self) -> str:
        if self.body.startswith(MUSIC_PREFIX):
            return self.body[len(MUSIC_PREFIX):]
        return self.body


class TokenKind(Enum):
    BARLINE = auto()
    FINAL_BARLINE = auto()
    SECTION_MARK = auto()
    REPEAT_OPEN = auto()
    REPEAT_CLOSE = auto()
    ENDING_MARK = auto()
    REPEAT_PREVIOUS_MEASURE = auto()
    CHORD_TEXT = auto()
    UNKNOWN = auto()
    # Formatting kinds: consumed text with no structural width
    TIME_SIGNATURE = auto()
    COMMENT = auto()
    SPACER = auto()


@dataclass(frozen=True)
class Token:
    """One classified span of an unscrambled chord body.

    ``raw`` is the exact text consumed; ``value`` is the decoded payload
    (chord name, section symbol, ending number, ...) or None.
    """

    kind: TokenKind
    raw: str
    value: Any = None


@dataclass(frozen=True)
class Measure:
    """A closed bar of chords."""

    chords: tuple[str, ...] = ()


@dataclass(frozen=True)
class Ending:
    """Measures played only on pass ``number`` of a repeated section."""

    number: int
    measures: tuple[Measure, ...] = ()


@dataclass(frozen=True)
class Section:
    """A structural block of a tune, identified by its position in the song."""

    measures: tuple[Measure, ...] = ()
    repeats: int = 1  # number of passes; 1 means "play once"
    endings: tuple[Ending, ...] = ()
    label: str | None = None  # rehearsal mark such as "A", "B", "i"

    def is_empty(self) -> bool:
        return not self.measures and not self.endings

    def passes(self) -> Iterator[list[Measure]]:
        """Yield the measures played on each pass through the section."""
        by_number = {ending.number: ending for ending in self.endings}
        last = max(self.endings, key=lambda e: e.number) if self.endings else None
        for number in range(1, self.repeats + 1):
            ending = by_number.get(number, last)
            yield list(self.measures) + (list(ending.measures) if ending else [])


@dataclass(frozen=True)
class Song:
    """A decoded chart. Instances are immutable."""

    title: str
    composer: str = ""
    style: str = ""
    key: str = ""
    tempo: int = 0
    sections: tuple[Section, ...] = ()
    comp_style: str = ""
    time_signature: str | None = None  # e.g. "4/4"
    transpose: str = ""
    default_loops: int = 0
    unknown_tokens: int = 0

    def measure_count(self) -> int:
        """Number of written measures, before repeats and endings are expanded."""
        return sum(
            len(s.measures) + sum(len(e.measures) for e in s.endings) for s in self.sections
        )

    def performance_order(self) -> list[Measure]:
        """Measures in the order they are played through the form once."""
        order: list[Measure] = []
        for section in self.sections:
            for measures in section.passes():
                order.extend(measures)
        return order


class StandardEntry:
    """One persisted standard, wrapping the JSON object it was loaded from.

    Only ``Title``, ``Sections`` and ``DefaultLoops`` are interpreted; all
    other keys are carried through untouched and in their original order.
    """

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def __repr__(self) -> str:
        return f"StandardEntry(title={self.title!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StandardEntry):
            return NotImplemented
        return self.data == other.data

    @property
    def title(self) -> str:
        return self.data.get("Title") or ""

    @property
    def sections(self) -> list[dict[str, Any]]:
        return self.data.get("Sections") or []

    @sections.setter
    def sections(self, value: list[dict[str, Any]]) -> None:
        self.data["Sections"] = value

    @property
    def default_loops(self) -> int | None:
        return self.data.get("DefaultLoops")

    @default_loops.setter
    def default_loops(self, value: int) -> None:
        self.data["DefaultLoops"] = value
