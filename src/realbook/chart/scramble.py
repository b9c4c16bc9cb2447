"""Reversible obfuscation applied to the chord body of irealb charts.

The body is cut into 50-character runs.  Each run is permuted by swapping
the first five characters with the last five (mirrored) and positions 10-23
with 39-26; the remaining positions stay put.  Runs are only permuted while
more than 51 characters remain, so the final remainder (up to 51 characters,
even a full run) is passed through as-is.

The permutation is its own inverse, so scrambling and unscrambling are the
same operation.
"""

RUN_LENGTH = 50
# A remainder this long or shorter is left untouched.
PASSTHROUGH_LENGTH = 51


def _build_permutation() -> tuple[int, ...]:
    table = list(range(RUN_LENGTH))
    for start, stop in ((0, 5), (10, 24)):
        for i in range(start, stop):
            mirror = RUN_LENGTH - 1 - i
            table[i], table[mirror] = mirror, i
    return tuple(table)


# _PERMUTATION[i] is the source index of output character i
_PERMUTATION = _build_permutation()


def _permute_run(run: str) -> str:
    return "".join(run[source] for source in _PERMUTATION)


def _transform(text: str) -> str:
    parts: list[str] = []
    rest = text
    while len(rest) > PASSTHROUGH_LENGTH:
        parts.append(_permute_run(rest[:RUN_LENGTH]))
        rest = rest[RUN_LENGTH:]
    parts.append(rest)
    return "".join(parts)


def unscramble(body: str) -> str:
    """Return the plain chord body for a scrambled *body* (prefix already removed).

    Never raises: input that does not line up with the run boundaries still
    comes back permuted run by run.
    """
    return _transform(body)


def scramble(text: str) -> str:
    """Apply the forward obfuscation; ``scramble(unscramble(s)) == s``."""
    return _transform(text)
