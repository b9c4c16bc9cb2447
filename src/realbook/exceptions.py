class RealbookError(Exception):
    """Base exception for realbook."""


class MalformedChartUrl(RealbookError):
    """Raised when a chart URL lacks the fields needed to decode a song."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed chart URL {url[:60]!r}: {reason}")


class UnrecognizedToken(RealbookError):
    """Diagnostic record for a chart symbol the tokenizer could not classify.

    Never raised while decoding; the chart builder collects instances so
    callers can report how much of a chart was ignored.
    """

    def __init__(self, symbol: str, position: int):
        self.symbol = symbol
        self.position = position
        super().__init__(f"Unrecognized chart symbol {symbol!r} at token {position}")


class RepositoryIoError(RealbookError):
    """Raised when the standards collection cannot be loaded or saved."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Standards repository error for {path}: {reason}")


class FetchError(RealbookError):
    """Raised when an HTTP request for a playlist page fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class NoChartUrlError(RealbookError):
    """Raised when a source contains no chart URL."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No chart URL found in {source}")
