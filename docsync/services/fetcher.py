from __future__ import annotations

from typing import Protocol

from docsync.domain.http_response import HttpResponse


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response.

    Implementations: requests-based (`HttpServiceFetcher`) and
    headless-browser rendered HTML (`PlaywrightHeadlessFetcher`).
    """

    def fetch(self, url: str, stop_event=None) -> HttpResponse: ...


class HttpServiceFetcher:
    def __init__(self, http_service):
        self._http_service = http_service

    def fetch(self, url: str, stop_event=None) -> HttpResponse:
        return self._http_service.fetch(url)
