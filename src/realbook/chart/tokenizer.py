"""Tokenizer for unscrambled iReal chord bodies.

The chart dialect is only partly documented, so the grammar is kept as data:

  1. ``SYMBOLS``:       single characters with a fixed meaning (bar lines,
                          repeat brackets, section openers, spacers)
  2. ``PATTERN_RULES``: ordered multi-character regex rules (shorthand
                          sequences, endings, rehearsal marks, time
                          signatures, comments, chords)
  3. fallback:          anything else becomes an ``UNKNOWN`` token

Tokenizing never fails.  Every character of the input ends up in the ``raw``
span of exactly one token, so joining the raw spans rebuilds the input.

Example::

    "[T44C^7 |A-7 Z"  →  SECTION_MARK  TIME_SIGNATURE(4/4)  CHORD_TEXT(C^7)
                          SPACER  BARLINE  CHORD_TEXT(A-7)  SPACER  FINAL_BARLINE
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from ..models import Token, TokenKind

# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

# Chord symbol: root (or W for "invisible" root), quality/extension letters,
# optional slash bass, optional alternate chord in parentheses.
CHORD_RE = re.compile(
    r"[A-GW][+\-^\dhob#suadlt]*"
    r"(?:/[A-G][#b]?)?"
    r"(?:\([^)]*\))?"
)

SYMBOLS: dict[str, tuple[TokenKind, Any]] = {
    "|": (TokenKind.BARLINE, None),
    "]": (TokenKind.BARLINE, None),  # closing double bar
    "Z": (TokenKind.FINAL_BARLINE, None),
    "{": (TokenKind.REPEAT_OPEN, None),
    "}": (TokenKind.REPEAT_CLOSE, None),
    "[": (TokenKind.SECTION_MARK, None),  # opening double bar, no rehearsal mark
    "x": (TokenKind.REPEAT_PREVIOUS_MEASURE, None),
    "n": (TokenKind.CHORD_TEXT, "N.C."),
}

# Layout and navigation marks that carry no structure
for _char in " ,YlsfSQUp":
    SYMBOLS[_char] = (TokenKind.SPACER, None)
del _char


@dataclass(frozen=True)
class Rule:
    pattern: re.Pattern[str]
    kind: TokenKind
    value: Callable[[re.Match[str]], Any] | None = None
    # Zero-width token emitted right after the main one
    then: TokenKind | None = None


def _time_signature(match: re.Match[str]) -> str:
    digits = match.group(1)
    if digits == "12":
        return "12/8"
    return f"{digits[0]}/{digits[1]}"


PATTERN_RULES: list[Rule] = [
    # "Kcl" is shorthand for "| x": a bar line, then a repeat-previous-bar
    Rule(re.compile(r"Kcl"), TokenKind.BARLINE, then=TokenKind.REPEAT_PREVIOUS_MEASURE),
    # "LZ" is shorthand for " |"
    Rule(re.compile(r"LZ"), TokenKind.BARLINE),
    Rule(re.compile(r"XyQ"), TokenKind.SPACER),
    Rule(re.compile(r"N(\d+)"), TokenKind.ENDING_MARK, lambda m: int(m.group(1))),
    Rule(re.compile(r"\*(\w)"), TokenKind.SECTION_MARK, lambda m: m.group(1)),
    Rule(re.compile(r"T(12|\d\d)"), TokenKind.TIME_SIGNATURE, _time_signature),
    Rule(re.compile(r"<([^>]*)>"), TokenKind.COMMENT, lambda m: m.group(1)),
    Rule(CHORD_RE, TokenKind.CHORD_TEXT, lambda m: m.group(0)),
    # Escape prefix with no known continuation: a formatting hint, swallowed
    Rule(re.compile(r"Xy?"), TokenKind.SPACER),
]


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def _match_at(text: str, pos: int) -> tuple[list[Token], int] | None:
    """Return the tokens of the first grammar entry matching at *pos*, or None."""
    char = text[pos]
    if char in SYMBOLS:
        kind, value = SYMBOLS[char]
        return [Token(kind, char, value)], pos + 1

    for rule in PATTERN_RULES:
        match = rule.pattern.match(text, pos)
        if not match or not match.group(0):
            continue
        value = rule.value(match) if rule.value else None
        tokens = [Token(rule.kind, match.group(0), value)]
        if rule.then is not None:
            tokens.append(Token(rule.then, ""))
        return tokens, match.end()

    return None


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of an unscrambled chord body, left to right.

    Runs of unclassifiable characters are merged into a single ``UNKNOWN``
    token whose value is the raw symbol.
    """
    pos = 0
    unknown_start: int | None = None

    while pos < len(text):
        matched = _match_at(text, pos)
        if matched is None:
            if unknown_start is None:
                unknown_start = pos
            pos += 1
            continue

        if unknown_start is not None:
            raw = text[unknown_start:pos]
            yield Token(TokenKind.UNKNOWN, raw, raw)
            unknown_start = None

        tokens, pos = matched
        yield from tokens

    if unknown_start is not None:
        raw = text[unknown_start:]
        yield Token(TokenKind.UNKNOWN, raw, raw)
