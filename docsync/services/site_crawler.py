import logging
import threading
from typing import Optional

from docsync.domain.crawl_outcome import CrawlOutcome, CrawlRecord
from docsync.domain.crawl_result import CrawlResult
from docsync.domain.http_response import HttpResponse
from docsync.domain.site_config import SiteConfig
from docsync.exceptions import HttpFetchError
from docsync.services.fetcher_factory import FetcherFactory
from docsync.services.html_text_extractor import HtmlTextExtractor, TextExtractor

logger = logging.getLogger(__name__)


class SiteCrawler:
    """Fetches every frontier URL once and classifies the outcome.

    - FAILED: the fetch raised, or the final status is not 2xx
    - REDIRECTED: the page was served from a different URL than requested
    - SUCCESS: otherwise; the record carries title and main-content text

    No link discovery happens here: the frontier comes from the sitemap.
    """

    def __init__(
        self,
        *,
        fetcher_factory: FetcherFactory,
        text_extractor: Optional[TextExtractor] = None,
    ):
        self.fetcher_factory = fetcher_factory
        self.text_extractor = text_extractor or HtmlTextExtractor()

    def classify(self, url: str, response: HttpResponse) -> CrawlRecord:
        status = response.status_code
        final_url = response.url or url
        if status < 200 or status >= 300:
            logger.warning("Non-success status for %s: %s", url, status)
            return CrawlRecord(url, CrawlOutcome.FAILED, status_code=status, final_url=final_url, error=f"HTTP {status}")
        if final_url != url:
            logger.info("Redirected %s -> %s", url, final_url)
            return CrawlRecord(url, CrawlOutcome.REDIRECTED, status_code=status, final_url=final_url)
        extracted = self.text_extractor.extract(response.text)
        return CrawlRecord(
            url,
            CrawlOutcome.SUCCESS,
            status_code=status,
            final_url=final_url,
            title=extracted.title,
            plain_text=extracted.plain_text,
        )

    def fetch_one(self, url: str, site_config: SiteConfig, stop_event: Optional[threading.Event] = None) -> CrawlRecord:
        fetcher = self.fetcher_factory.get(site_config.fetch_mode)
        try:
            response = fetcher.fetch(url, stop_event=stop_event)
        except HttpFetchError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return CrawlRecord(url, CrawlOutcome.FAILED, error=str(e))
        return self.classify(url, response)

    def crawl(self, site_config: SiteConfig, urls: list[str], stop_event: Optional[threading.Event] = None) -> CrawlResult:
        if site_config is None:
            raise ValueError("site_config is required for crawl")

        records: list[CrawlRecord] = []
        for url in urls:
            if stop_event is not None and stop_event.is_set():
                logger.info("Crawl cancelled before %s (%d/%d done)", url, len(records), len(urls))
                return CrawlResult(records=records, stopped=True)
            record = self.fetch_one(url, site_config, stop_event)
            logger.debug("Crawled %s -> %s", url, record.outcome.value)
            records.append(record)

        return CrawlResult(records=records, stopped=False)
