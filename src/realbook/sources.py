"""Find chart URLs in whatever the user points the CLI at.

A source is one of:

  - a chart URL itself (``irealb://...`` / ``irealbook://...``)
  - an ``http(s)://`` page publishing playlists as links, e.g. a forum post
  - a local file holding either such an HTML page or plain text with URLs

Chart links inside HTML are read from ``<a href>`` attributes; plain text is
scanned with a regex.
"""

import re
from pathlib import Path

import httpx
from bs4 import BeautifulSoup

from .exceptions import FetchError, NoChartUrlError
from .registry import CHART_SCHEMES

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
}

_SCHEME_PREFIXES = tuple(f"{s}://" for s in CHART_SCHEMES)

CHART_URL_RE = re.compile(
    r"(?:" + "|".join(re.escape(p) for p in _SCHEME_PREFIXES) + r")[^\s\"'<>]+"
)

_HTML_HINT_RE = re.compile(r"<\s*(?:html|a|body|div)\b", re.IGNORECASE)


def is_chart_url(text: str) -> bool:
    return text.strip().lower().startswith(_SCHEME_PREFIXES)


def fetch(url: str) -> str:
    """GET a playlist page and return its HTML.

    Raises FetchError on HTTP-level failures.
    """
    try:
        resp = httpx.get(url, headers=_FETCH_HEADERS, follow_redirects=True, timeout=15)
    except httpx.RequestError as exc:
        raise FetchError(url, 0) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code)
    return resp.text


def extract_chart_urls(text: str) -> list[str]:
    """Return the chart URLs in *text*, HTML or plain, in document order."""
    if _HTML_HINT_RE.search(text):
        soup = BeautifulSoup(text, "html.parser")
        links = [a["href"].strip() for a in soup.find_all("a", href=True) if is_chart_url(a["href"])]
        if links:
            return links
        text = soup.get_text(" ")
    return CHART_URL_RE.findall(text)


def read_chart_urls(source: str) -> list[str]:
    """Return the chart URLs found in *source*.

    Raises FetchError for an unreachable page and NoChartUrlError when the
    source holds no chart URL.
    """
    source = source.strip()
    if is_chart_url(source):
        return [source]

    if source.lower().startswith(("http://", "https://")):
        urls = extract_chart_urls(fetch(source))
    else:
        path = Path(source)
        if not path.is_file():
            raise NoChartUrlError(source)
        try:
            # Chart URLs are ASCII; stray undecodable bytes around them are ignored
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise NoChartUrlError(source) from exc
        urls = extract_chart_urls(text)

    if not urls:
        raise NoChartUrlError(source)
    return urls
