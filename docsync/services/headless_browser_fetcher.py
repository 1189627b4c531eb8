from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from docsync.domain.http_response import HttpResponse
from docsync.exceptions import HttpFetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaywrightHeadlessOptions:
    timeout_ms: int = 10_000
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle


class PlaywrightHeadlessFetcher:
    """Headless browser fetcher backed by Playwright.

    Renders JavaScript-heavy documentation pages and returns the final DOM
    HTML via page.content(), together with the URL the browser ended up on.

    Notes:
    - A browser is launched per request.
    - Playwright is imported lazily so installs without the `headless` extra still work.
    """

    def __init__(self, *, user_agent: str, options: Optional[PlaywrightHeadlessOptions] = None):
        self._user_agent = user_agent
        self._options = options or PlaywrightHeadlessOptions()
        self._executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="playwright")

    def _fetch_sync(self, url: str, stop_event) -> HttpResponse:
        if stop_event is not None and stop_event.is_set():
            raise RuntimeError("Fetch cancelled")

        try:
            from playwright.sync_api import sync_playwright, Error as PlaywrightError  # type: ignore
        except ImportError as e:
            raise RuntimeError(
                "Headless fetch requested but Playwright is not installed. "
                "Install 'docsync[headless]' and run 'python -m playwright install chromium'."
            ) from e

        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                context = browser.new_context(user_agent=self._user_agent)
                page = context.new_page()
                try:
                    resp = page.goto(url, wait_until=self._options.wait_until, timeout=self._options.timeout_ms)
                except PlaywrightError as e:
                    raise HttpFetchError(url, e) from e
                status = int(resp.status) if resp is not None else 0
                return HttpResponse(status_code=status, text=page.content(), url=page.url)
            finally:
                try:
                    browser.close()
                except Exception:
                    logger.debug("Error closing headless browser for %s", url, exc_info=True)

    def fetch(self, url: str, stop_event=None) -> HttpResponse:
        """Fetch a URL using Playwright, off the event loop if one is running."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._fetch_sync(url, stop_event)
        future = self._executor.submit(self._fetch_sync, url, stop_event)
        return future.result()
