import logging
import threading
from typing import NamedTuple, Optional

from docsync.domain.reconciliation_report import ReconciliationReport
from docsync.domain.site_config import SiteConfig
from docsync.exceptions import CrawlCancelledError
from docsync.services.chunker import TextChunker
from docsync.services.config_service import SiteConfigService
from docsync.services.frontier_filter import FrontierRules
from docsync.services.index_enumerator import IndexEnumerator
from docsync.services.index_writer import IndexWriter
from docsync.services.reconciliation import outcomes_from_records, reconcile, verify_report
from docsync.services.site_crawler import SiteCrawler
from docsync.services.sitemap_service import SitemapService

logger = logging.getLogger(__name__)


class ReconciliationRunResult(NamedTuple):
    run_id: Optional[int]
    report: ReconciliationReport
    applied: bool
    added: int = 0
    removed: int = 0


class ReconciliationService:
    """Runs one sitemap -> frontier -> crawl -> snapshot -> diff -> (apply) cycle.

    Each call builds its own enumerator, so concurrent runs for different
    collections share no mutable state. `dry_run` defaults to True: the report
    is computed, logged and recorded but the index is left untouched.
    """

    def __init__(
        self,
        *,
        config_service: SiteConfigService,
        sitemap_service: SitemapService,
        site_crawler: SiteCrawler,
        documents_repo,
        index_writer: IndexWriter,
        runs_repo=None,
        page_size: int = 250,
    ):
        self.config_service = config_service
        self.sitemap_service = sitemap_service
        self.site_crawler = site_crawler
        self.documents_repo = documents_repo
        self.index_writer = index_writer
        self.runs_repo = runs_repo
        self.page_size = int(page_size)

    def _chunker_for(self, site_config: SiteConfig) -> TextChunker:
        opts = site_config.chunking
        return self.index_writer.chunker.with_overrides(opts.delimiter, opts.min_length, opts.max_length)

    def _log_report(self, collection: str, report: ReconciliationReport) -> None:
        logger.info("[%s] Redirected: %s", collection, sorted(report.redirected))
        logger.info("[%s] To remove: %s", collection, sorted(report.to_remove))
        logger.info("[%s] New: %s", collection, sorted(report.to_add))
        logger.info("[%s] Failed: %s", collection, sorted(report.failed))
        logger.info("[%s] %s", collection, report.summary())

    def run(
        self,
        config_name: str,
        dry_run: bool = True,
        stop_event: Optional[threading.Event] = None,
    ) -> ReconciliationRunResult:
        site_config = self.config_service.get_config(config_name)
        collection = site_config.collection
        # Validate per-site chunking up front so a bad config fails before crawling.
        chunker = self._chunker_for(site_config)

        run_id = None
        if self.runs_repo is not None:
            run_id = self.runs_repo.create_run(collection, site_config.config_path, dry_run)

        try:
            discovered = self.sitemap_service.load_urls(site_config.sitemap_url)
            frontier = FrontierRules.from_site_config(site_config).apply(discovered)
            logger.info("[%s] Frontier: %d of %d discovered URLs", collection, len(frontier), len(discovered))

            crawl = self.site_crawler.crawl(site_config, frontier, stop_event=stop_event)
            if crawl.stopped:
                raise CrawlCancelledError(collection, len(crawl.records))

            indexed = IndexEnumerator(
                self.documents_repo.page_fetcher(collection),
                stop_event=stop_event,
            ).enumerate_all(self.page_size)

            report = verify_report(reconcile(indexed, outcomes_from_records(crawl.records)))
            self._log_report(collection, report)

            added = removed = 0
            if not dry_run:
                added, removed = self.index_writer.apply(collection, report, crawl.records, chunker=chunker)
        except Exception as e:
            if run_id is not None:
                self.runs_repo.finish_run(run_id, exception=f"{type(e).__name__}: {e}")
            raise

        if run_id is not None:
            self.runs_repo.finish_run(
                run_id,
                report=report,
                added=None if dry_run else added,
                removed=None if dry_run else removed,
            )
        return ReconciliationRunResult(run_id=run_id, report=report, applied=not dry_run, added=added, removed=removed)
