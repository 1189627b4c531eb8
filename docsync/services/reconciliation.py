"""Set-algebra reconciliation of an index snapshot against a crawl.

Pure functions only: nothing here touches the index. The report is meant to
be logged and reviewed (or dry-run) before any mutation is applied.
"""
from typing import Iterable, Mapping

from docsync.domain.crawl_outcome import CrawlOutcome, CrawlRecord
from docsync.domain.reconciliation_report import ReconciliationReport
from docsync.exceptions import ReconciliationInconsistencyError


def outcomes_from_records(records: Iterable[CrawlRecord]) -> dict[str, CrawlOutcome]:
    """Collapse crawl records into one outcome per URL; the last record wins."""
    outcomes: dict[str, CrawlOutcome] = {}
    for record in records:
        outcomes[record.url] = record.outcome
    return outcomes


def _urls_with(outcomes: Mapping[str, CrawlOutcome], outcome: CrawlOutcome) -> frozenset[str]:
    return frozenset(url for url, o in outcomes.items() if o is outcome)


def reconcile(indexed: Iterable[str], outcomes: Mapping[str, CrawlOutcome]) -> ReconciliationReport:
    indexed_set = frozenset(indexed)
    succeeded = _urls_with(outcomes, CrawlOutcome.SUCCESS)
    return ReconciliationReport(
        to_add=succeeded - indexed_set,
        to_remove=indexed_set - succeeded,
        redirected=_urls_with(outcomes, CrawlOutcome.REDIRECTED),
        failed=_urls_with(outcomes, CrawlOutcome.FAILED),
        indexed_count=len(indexed_set),
        crawled_count=len(succeeded),
    )


def verify_report(report: ReconciliationReport) -> ReconciliationReport:
    """Raise ReconciliationInconsistencyError if the report's sets overlap illegally.

    `to_add` must be disjoint from every other set, and `redirected` from
    `failed`. `to_remove` may share URLs with `redirected` and `failed`: those
    are pages that were indexed but no longer crawl successfully.
    """
    checks = (
        ("to_add overlaps to_remove", report.to_add & report.to_remove),
        ("to_add overlaps failed", report.to_add & report.failed),
        ("to_add overlaps redirected", report.to_add & report.redirected),
        ("redirected overlaps failed", report.redirected & report.failed),
    )
    for reason, overlap in checks:
        if overlap:
            raise ReconciliationInconsistencyError(reason, overlap)
    return report
