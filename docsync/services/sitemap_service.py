import logging

from bs4 import BeautifulSoup

from docsync.exceptions import HttpFetchError
from docsync.services.http_service import HttpService

logger = logging.getLogger(__name__)


class SitemapService:
    """Loads page URLs from a sitemap, following nested sitemap indexes."""

    def __init__(self, http_service: HttpService, max_sitemaps: int = 50):
        self.http_service = http_service
        self.max_sitemaps = max_sitemaps

    def _parse(self, xml: str) -> tuple[list[str], list[str]]:
        """Return (page_urls, child_sitemap_urls) found in one sitemap document."""
        soup = BeautifulSoup(xml, "html.parser")
        pages = [loc.get_text(strip=True) for url in soup.find_all("url") for loc in url.find_all("loc", limit=1)]
        children = [loc.get_text(strip=True) for sm in soup.find_all("sitemap") for loc in sm.find_all("loc", limit=1)]
        return [p for p in pages if p], [c for c in children if c]

    def load_urls(self, sitemap_url: str) -> list[str]:
        """Return every page URL reachable from `sitemap_url`, deduplicated in first-seen order.

        The root sitemap must load; failures on nested sitemaps are logged and skipped.
        """
        seen_pages: dict[str, None] = {}
        queue = [sitemap_url]
        visited_sitemaps: set[str] = set()
        while queue and len(visited_sitemaps) < self.max_sitemaps:
            current = queue.pop(0)
            if current in visited_sitemaps:
                continue
            visited_sitemaps.add(current)
            try:
                response = self.http_service.fetch(current)
            except HttpFetchError:
                if current == sitemap_url:
                    raise
                logger.warning("Skipping nested sitemap %s: fetch failed", current)
                continue
            if response.status_code < 200 or response.status_code >= 300:
                if current == sitemap_url:
                    raise HttpFetchError(current, RuntimeError(f"HTTP {response.status_code}"))
                logger.warning("Skipping nested sitemap %s: status %s", current, response.status_code)
                continue
            pages, children = self._parse(response.text)
            for page_url in pages:
                seen_pages.setdefault(page_url, None)
            queue.extend(children)

        if queue:
            logger.warning("Sitemap limit %d reached; %d nested sitemaps not loaded", self.max_sitemaps, len(queue))
        logger.info("Loaded %d URLs from %s", len(seen_pages), sitemap_url)
        return list(seen_pages)
