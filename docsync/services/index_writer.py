import hashlib
import logging
from typing import Iterable, Optional

from docsync.domain.crawl_outcome import CrawlOutcome, CrawlRecord
from docsync.domain.document import DocumentChunk, IndexedDocument
from docsync.domain.reconciliation_report import ReconciliationReport
from docsync.repository.documents import DocumentsRepository
from docsync.services.chunker import TextChunker

logger = logging.getLogger(__name__)


class IndexWriter:
    """Applies a reconciliation report to the document index.

    Both halves are idempotent batch operations: `to_add` documents are
    upserted with freshly computed chunks, `to_remove` documents are deleted.
    """

    def __init__(self, documents_repo: DocumentsRepository, chunker: TextChunker):
        self.documents_repo = documents_repo
        self.chunker = chunker

    def build_document(self, collection: str, record: CrawlRecord, chunker: Optional[TextChunker] = None) -> IndexedDocument:
        chunker = chunker or self.chunker
        text = record.plain_text or ""
        segments = chunker.chunk(text)
        chunks = [
            DocumentChunk(chunk_index=i, start_offset=s.start, end_offset=s.end, text=s.slice(text))
            for i, s in enumerate(segments)
        ]
        return IndexedDocument(
            document_id=None,
            collection=collection,
            url=record.url,
            title=record.title,
            plain_text=text,
            content_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
            chunks=chunks,
        )

    def apply(
        self,
        collection: str,
        report: ReconciliationReport,
        records: Iterable[CrawlRecord],
        chunker: Optional[TextChunker] = None,
    ) -> tuple[int, int]:
        """Insert `report.to_add` and delete `report.to_remove`. Returns (added, removed)."""
        latest: dict[str, CrawlRecord] = {}
        for record in records:
            latest[record.url] = record

        documents = []
        for url in sorted(report.to_add):
            record = latest.get(url)
            if record is None or record.outcome is not CrawlOutcome.SUCCESS:
                logger.warning("No successful crawl record for %s; not indexing", url)
                continue
            documents.append(self.build_document(collection, record, chunker))

        added = self.documents_repo.upsert_documents(collection, documents)
        removed = self.documents_repo.delete_urls(collection, sorted(report.to_remove))
        logger.info("Applied reconciliation to %s: added=%d removed=%d", collection, added, removed)
        return added, removed
