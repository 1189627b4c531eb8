import threading
from unittest.mock import Mock

import pytest

from docsync.domain.crawl_outcome import CrawlOutcome, CrawlRecord
from docsync.domain.crawl_result import CrawlResult
from docsync.domain.site_config import ChunkingOptions, SiteConfig
from docsync.exceptions import CrawlCancelledError, EnumerationError, IndexTransportError, InvalidBoundsError
from docsync.services.chunker import TextChunker
from docsync.services.reconciliation_service import ReconciliationService


def _site(chunking=None):
    return SiteConfig(
        config_path="studio.yml",
        sitemap_url="https://docs.example/sitemap.xml",
        collection="studio-docs",
        allow_prefixes=["https://docs.example/"],
        deny_prefixes=["https://docs.example/api/"],
        fetch_mode="http",
        chunking=chunking,
    )


def _pages(*pages):
    def fetch(page_number, page_size):
        index = page_number - 1
        return list(pages[index]) if index < len(pages) else []
    return fetch


def _service(records, indexed_pages=(["https://docs.example/u1", "https://docs.example/u2"],), site=None, stopped=False):
    config_service = Mock(get_config=Mock(return_value=site or _site()))
    sitemap_service = Mock(load_urls=Mock(return_value=[r.url for r in records] + ["https://docs.example/api/x"]))
    site_crawler = Mock(crawl=Mock(return_value=CrawlResult(records=records, stopped=stopped)))
    documents_repo = Mock(page_fetcher=Mock(return_value=_pages(*indexed_pages)))
    index_writer = Mock(chunker=TextChunker(delimiter="\n\n", min_length=100, max_length=400))
    index_writer.apply.return_value = (1, 1)
    runs_repo = Mock(create_run=Mock(return_value=7))
    service = ReconciliationService(
        config_service=config_service,
        sitemap_service=sitemap_service,
        site_crawler=site_crawler,
        documents_repo=documents_repo,
        index_writer=index_writer,
        runs_repo=runs_repo,
        page_size=2,
    )
    return service, site_crawler, index_writer, runs_repo


RECORDS = [
    CrawlRecord("https://docs.example/u2", CrawlOutcome.SUCCESS, plain_text="two"),
    CrawlRecord("https://docs.example/u3", CrawlOutcome.SUCCESS, plain_text="three"),
    CrawlRecord("https://docs.example/u4", CrawlOutcome.REDIRECTED),
]


def test_dry_run_reports_without_applying(caplog):
    caplog.set_level("INFO")
    service, crawler, writer, runs_repo = _service(RECORDS)
    result = service.run("studio")

    assert result.applied is False
    assert result.run_id == 7
    assert result.report.to_add == {"https://docs.example/u3"}
    assert result.report.to_remove == {"https://docs.example/u1"}
    assert result.report.redirected == {"https://docs.example/u4"}
    writer.apply.assert_not_called()
    runs_repo.create_run.assert_called_once_with("studio-docs", "studio.yml", True)
    runs_repo.finish_run.assert_called_once_with(7, report=result.report, added=None, removed=None)
    assert "Last crawl: 2 | This crawl: 2" in caplog.text


def test_frontier_excludes_denied_urls():
    service, crawler, _, _ = _service(RECORDS)
    service.run("studio")
    frontier = crawler.crawl.call_args.args[1]
    assert "https://docs.example/api/x" not in frontier
    assert len(frontier) == 3


def test_apply_writes_with_site_chunker():
    site = _site(ChunkingOptions(min_length=10, max_length=50))
    service, _, writer, runs_repo = _service(RECORDS, site=site)
    result = service.run("studio", dry_run=False)

    assert result.applied is True
    assert (result.added, result.removed) == (1, 1)
    chunker = writer.apply.call_args.kwargs["chunker"]
    assert (chunker.delimiter, chunker.min_length, chunker.max_length) == ("\n\n", 10, 50)
    runs_repo.finish_run.assert_called_once_with(7, report=result.report, added=1, removed=1)


def test_invalid_site_chunking_fails_before_crawl():
    site = _site(ChunkingOptions(min_length=500, max_length=50))
    service, crawler, _, runs_repo = _service(RECORDS, site=site)
    with pytest.raises(InvalidBoundsError):
        service.run("studio")
    crawler.crawl.assert_not_called()
    runs_repo.create_run.assert_not_called()


def test_enumeration_failure_is_recorded_and_nothing_applied():
    service, _, writer, runs_repo = _service(RECORDS)
    service.documents_repo.page_fetcher.return_value = Mock(
        side_effect=IndexTransportError("studio-docs", RuntimeError("db down"))
    )
    with pytest.raises(EnumerationError):
        service.run("studio", dry_run=False)
    writer.apply.assert_not_called()
    exception = runs_repo.finish_run.call_args.kwargs["exception"]
    assert exception.startswith("EnumerationError: ")


def test_cancelled_crawl_raises_and_skips_enumeration():
    service, _, writer, runs_repo = _service(RECORDS[:1], stopped=True)
    with pytest.raises(CrawlCancelledError):
        service.run("studio", dry_run=False, stop_event=threading.Event())
    service.documents_repo.page_fetcher.assert_not_called()
    writer.apply.assert_not_called()
    assert "CrawlCancelledError" in runs_repo.finish_run.call_args.kwargs["exception"]


def test_runs_without_runs_repository():
    service, _, _, _ = _service(RECORDS)
    service.runs_repo = None
    result = service.run("studio")
    assert result.run_id is None
