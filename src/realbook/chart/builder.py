"""Assemble a :class:`~realbook.models.Song` from a chart token stream.

The builder is a small state machine:

  BUILDING_MEASURE   chords accumulate into the open measure of the section
  IN_REPEAT_BRACKET  as above, inside a ``{ ... }`` repeated section
  IN_ENDING          measures go to ``Ending(n)`` of the current section

Bar-line-class tokens (``|``, ``Z``, ``}``) always close the open measure,
even an empty one, so a body with *n* of them that ends in a final bar line
yields exactly *n* measures.  Section openers (``[``, ``*A``, ``{``, ``N1``)
only close the open measure when it holds chords.

Building never fails: unknown tokens are counted and skipped, and a body
with nothing recognizable still produces a song with one empty section.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterable

from ..exceptions import UnrecognizedToken
from ..models import ChartFields, Ending, Measure, Section, Song, Token, TokenKind

_LOG = logging.getLogger(__name__)

# Passes through a "{ ... }" bracket when the chart gives no explicit count
DEFAULT_BRACKET_REPEATS = 2

# Repeat-count annotations such as "3x" or "4 x" inside a comment
_REPEAT_COUNT_RE = re.compile(r"(\d+)\s*x\b", re.IGNORECASE)


@dataclass
class _EndingDraft:
    number: int
    measures: list[Measure] = field(default_factory=list)


@dataclass
class _SectionDraft:
    """Mutable section under construction; frozen into a Section when pushed."""

    measures: list[Measure] = field(default_factory=list)
    repeats: int = 1
    endings: list[_EndingDraft] = field(default_factory=list)
    label: str | None = None

    def is_empty(self) -> bool:
        return not self.measures and not self.endings

    def freeze(self) -> Section:
        repeats = self.repeats
        if self.endings:
            repeats = max(repeats, max(e.number for e in self.endings))
        return Section(
            measures=tuple(self.measures),
            repeats=repeats,
            endings=tuple(Ending(e.number, tuple(e.measures)) for e in self.endings),
            label=self.label,
        )


class BuildState(Enum):
    BUILDING_MEASURE = auto()
    IN_REPEAT_BRACKET = auto()
    IN_ENDING = auto()


class ChartBuilder:
    """Consume tokens and build the section list of one chart.

    A builder is single use: create one per chart.
    """

    def __init__(self) -> None:
        self.state = BuildState.BUILDING_MEASURE
        self.sections: list[Section] = []
        self.section = _SectionDraft()
        self.ending: _EndingDraft | None = None
        self.chords: list[str] = []
        self.last_measure: Measure | None = None
        self.time_signature: str | None = None
        self.diagnostics: list[UnrecognizedToken] = []
        # The current section's "{ ... }" bracket has been closed; endings and
        # repeat-count comments may still attach to it.
        self._sealed = False
        self._bracket = False
        self._handlers: dict[TokenKind, Callable[[Token], None]] = {
            TokenKind.CHORD_TEXT: self._on_chord,
            TokenKind.BARLINE: self._on_barline,
            TokenKind.FINAL_BARLINE: self._on_barline,
            TokenKind.REPEAT_OPEN: self._on_repeat_open,
            TokenKind.REPEAT_CLOSE: self._on_repeat_close,
            TokenKind.SECTION_MARK: self._on_section_mark,
            TokenKind.ENDING_MARK: self._on_ending_mark,
            TokenKind.REPEAT_PREVIOUS_MEASURE: self._on_repeat_previous,
            TokenKind.TIME_SIGNATURE: self._on_time_signature,
            TokenKind.COMMENT: self._on_comment,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, token: Token) -> None:
        if token.kind == TokenKind.UNKNOWN:
            diagnostic = UnrecognizedToken(token.raw, len(self.diagnostics))
            self.diagnostics.append(diagnostic)
            _LOG.debug("%s", diagnostic)
            return
        handler = self._handlers.get(token.kind)
        if handler is not None:
            handler(token)

    def finish(self) -> list[Section]:
        """Flush open measures and sections and return the section list."""
        self._close_measure(force=False)
        self._push_section()
        self.section = _SectionDraft()
        self.ending = None
        self.state = BuildState.BUILDING_MEASURE
        if not self.sections:
            self.sections.append(Section())
        return self.sections

    def build(self, tokens: Iterable[Token], fields: ChartFields) -> Song:
        """Consume *tokens* and return the song described by *fields*."""
        for token in tokens:
            self.feed(token)
        sections = self.finish()

        if self.diagnostics:
            _LOG.info(
                "%s: ignored %d unrecognized symbol(s)", fields.title, len(self.diagnostics)
            )

        return Song(
            title=fields.title,
            composer=fields.composer,
            style=fields.style,
            key=fields.key,
            tempo=_to_int(fields.tempo),
            sections=tuple(sections),
            comp_style=fields.comp_style,
            time_signature=self.time_signature,
            transpose=fields.transpose,
            default_loops=_to_int(fields.repeats),
            unknown_tokens=len(self.diagnostics),
        )

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _on_chord(self, token: Token) -> None:
        self._leave_sealed_bracket()
        self.chords.append(token.value)

    def _on_barline(self, token: Token) -> None:
        self._close_measure(force=True)

    def _on_repeat_open(self, token: Token) -> None:
        self._begin_section()
        self.section.repeats = DEFAULT_BRACKET_REPEATS
        self._bracket = True
        self.state = BuildState.IN_REPEAT_BRACKET

    def _on_repeat_close(self, token: Token) -> None:
        self._close_measure(force=True)
        if not self._bracket:
            # Close without an open: the whole section so far is repeated
            self.section.repeats = max(self.section.repeats, DEFAULT_BRACKET_REPEATS)
            self._bracket = True
        self._sealed = True
        self.ending = None
        self.state = BuildState.BUILDING_MEASURE

    def _on_section_mark(self, token: Token) -> None:
        self._begin_section()
        if token.value:
            self.section.label = token.value

    def _on_ending_mark(self, token: Token) -> None:
        self._close_measure(force=False)
        self.ending = _EndingDraft(number=token.value)
        self.section.endings.append(self.ending)
        self.state = BuildState.IN_ENDING

    def _on_repeat_previous(self, token: Token) -> None:
        self._close_measure(force=False)
        self._leave_sealed_bracket()
        if self.last_measure is not None:
            self.chords = list(self.last_measure.chords)

    def _on_time_signature(self, token: Token) -> None:
        if self.time_signature is None:
            self.time_signature = token.value

    def _on_comment(self, token: Token) -> None:
        if not self._bracket:
            return
        match = _REPEAT_COUNT_RE.search(token.value)
        if match and int(match.group(1)) >= 1:
            self.section.repeats = int(match.group(1))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _close_measure(self, force: bool) -> None:
        """Close the open measure into the current target.

        With ``force`` False an empty measure is discarded instead.
        """
        if not self.chords and not force:
            return
        self._leave_sealed_bracket()
        measure = Measure(tuple(self.chords))
        if self.ending is not None:
            self.ending.measures.append(measure)
        else:
            self.section.measures.append(measure)
        self.last_measure = measure
        self.chords = []

    def _leave_sealed_bracket(self) -> None:
        # Content after "}" that is not an ending starts a fresh section
        if self._sealed and self.ending is None:
            self._begin_section()

    def _begin_section(self) -> None:
        self._close_measure(force=False)
        self.ending = None
        if self._sealed or not self.section.is_empty():
            self._push_section()
            self.section = _SectionDraft()
        self._sealed = False
        self._bracket = False
        self.state = BuildState.BUILDING_MEASURE

    def _push_section(self) -> None:
        if not self.section.is_empty():
            self.sections.append(self.section.freeze())


def _to_int(text: str) -> int:
    text = text.strip()
    return int(text) if text.isdigit() else 0
