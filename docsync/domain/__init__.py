"""Domain objects for DocSync - explicit re-exports to satisfy linters."""
from .text_segment import TextSegment as TextSegment
from .crawl_outcome import CrawlOutcome as CrawlOutcome, CrawlRecord as CrawlRecord
from .crawl_result import CrawlResult as CrawlResult
from .reconciliation_report import ReconciliationReport as ReconciliationReport
from .reconciliation_run import ReconciliationRun as ReconciliationRun
from .stream_buffer import StreamBuffer as StreamBuffer
from .stream_event import StreamEvent as StreamEvent
from .site_config import SiteConfig as SiteConfig, ChunkingOptions as ChunkingOptions
from .document import IndexedDocument as IndexedDocument, DocumentChunk as DocumentChunk

__all__ = [
    "TextSegment",
    "CrawlOutcome",
    "CrawlRecord",
    "CrawlResult",
    "ReconciliationReport",
    "ReconciliationRun",
    "StreamBuffer",
    "StreamEvent",
    "SiteConfig",
    "ChunkingOptions",
    "IndexedDocument",
    "DocumentChunk",
]
