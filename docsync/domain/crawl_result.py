"""Crawl result data model."""
from typing import NamedTuple

from docsync.domain.crawl_outcome import CrawlRecord


class CrawlResult(NamedTuple):
    """Result of crawling a frontier.

    Records are in crawl order; a URL crawled twice appears twice and the
    later record wins when outcomes are collected.
    """
    records: list[CrawlRecord]
    """One record per fetched URL"""

    stopped: bool
    """True if crawl was stopped early via stop_event, False if completed normally"""
