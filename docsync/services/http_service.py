import requests
from typing import Callable

from docsync.domain.http_response import HttpResponse
from docsync.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for fetching documentation pages and sitemaps.

    Requires http_client callable for dependency injection, so tests can pass
    a Mock instead of patching requests.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        """Fetch URL (following redirects) and return status, body, Content-Type and final URL."""
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        final_url = getattr(resp, 'url', None)
        if not isinstance(final_url, str) or not final_url:
            final_url = url

        return HttpResponse(resp.status_code, resp.text, ct, final_url)
