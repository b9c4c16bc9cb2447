from .chart.base import ChartDialect
from .chart.ireal_book import IRealBookDialect
from .chart.ireal_pro import IRealProDialect
from .chart.url import strip_scheme
from .exceptions import MalformedChartUrl

_DIALECTS: list[type[ChartDialect]] = [
    IRealProDialect,
    IRealBookDialect,
]

CHART_SCHEMES = tuple(s for cls in _DIALECTS for s in cls.schemes if s)


def get_dialect(url: str) -> ChartDialect:
    """Return an instantiated dialect for the given chart URL.

    A URL without a scheme is read as ``irealb``.  Raises MalformedChartUrl
    if the scheme belongs to no dialect.
    """
    scheme, _ = strip_scheme(url)
    for cls in _DIALECTS:
        if cls.can_handle(scheme):
            return cls()
    raise MalformedChartUrl(url, f"unsupported scheme {scheme!r}")
