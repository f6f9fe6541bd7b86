from __future__ import annotations

import codecs
import http.client
import logging
import urllib.error
import urllib.request

LOGGER = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class ScanFetchError(RuntimeError):
    """Scan data could not be retrieved; says nothing about whether a post is botted."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


def _resolve_charset(charset: str | None, url: str) -> str:
    if not charset:
        return DEFAULT_CHARSET
    try:
        return codecs.lookup(charset).name
    except LookupError:
        LOGGER.warning("Unknown charset %r from %s; decoding as %s", charset, url, DEFAULT_CHARSET)
        return DEFAULT_CHARSET


def fetch_dump_html(url: str, timeout: float = 30.0, user_agent: str | None = None) -> str:
    """Download a dump page as text; every failure surfaces as ScanFetchError."""
    headers = {"User-Agent": user_agent} if user_agent else {}
    LOGGER.debug("Fetching %s", url)
    try:
        request = urllib.request.Request(url, headers=headers)
        with urllib.request.urlopen(request, timeout=timeout) as response:
            charset = response.headers.get_content_charset()
            body = response.read()
    except urllib.error.HTTPError as exc:
        raise ScanFetchError(url, f"HTTP {exc.code}", status_code=exc.code) from exc
    except urllib.error.URLError as exc:
        raise ScanFetchError(url, f"Request failed: {exc.reason}") from exc
    except (OSError, ValueError, http.client.HTTPException) as exc:
        raise ScanFetchError(url, f"Request failed: {exc}") from exc
    return body.decode(_resolve_charset(charset, url), errors="replace")
