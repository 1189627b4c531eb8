import logging
from typing import Iterable, List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from docsync.db.models import Chunk as DBChunk, Document as DBDocument
from docsync.domain import DocumentChunk, IndexedDocument
from docsync.exceptions import IndexTransportError

logger = logging.getLogger(__name__)


class DocumentsRepository:
    """Repository for the document index (documents + their chunks).

    Requires an explicit `session_factory` (callable returning a `Session`).
    Mutations are idempotent so a reconciliation can be replayed safely.
    """
    def __init__(self, session_factory):
        self.session_factory = session_factory

    @staticmethod
    def _sanitize_text(val: Optional[str]) -> Optional[str]:
        """Remove NUL (\x00) characters; Postgres TEXT columns cannot store them."""
        if isinstance(val, str):
            return val.replace("\x00", "")
        return val

    def get_session(self) -> Session:
        return self.session_factory()

    def _to_domain(self, row: DBDocument, full: bool = True) -> IndexedDocument:
        chunks = []
        if full:
            chunks = [
                DocumentChunk(
                    chunk_id=c.chunk_id,
                    chunk_index=c.chunk_index,
                    start_offset=c.start_offset,
                    end_offset=c.end_offset,
                    text=c.text,
                )
                for c in row.chunks
            ]
        return IndexedDocument(
            document_id=row.document_id,
            collection=row.collection,
            url=row.url,
            title=row.title,
            plain_text=row.plain_text if full else None,
            content_hash=row.content_hash,
            indexed_at=row.indexed_at,
            chunks=chunks,
        )

    def fetch_url_page(self, collection: str, page_number: int, page_size: int) -> List[str]:
        """Return one page (1-based) of URLs in `collection`, in insertion order."""
        if page_number < 1 or page_size < 1:
            raise ValueError("page_number and page_size must be positive")
        q = (
            select(DBDocument.url)
            .where(DBDocument.collection == collection)
            .order_by(DBDocument.document_id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
        )
        try:
            with self.get_session() as session:
                return list(session.execute(q).scalars().all())
        except SQLAlchemyError as e:
            raise IndexTransportError(collection, e) from e

    def page_fetcher(self, collection: str):
        """Bind `fetch_url_page` to one collection, as `fetch_page(page_number, page_size)`."""
        def fetch_page(page_number: int, page_size: int) -> List[str]:
            return self.fetch_url_page(collection, page_number, page_size)
        return fetch_page

    def count(self, collection: str) -> int:
        with self.get_session() as session:
            q = select(func.count()).select_from(DBDocument).where(DBDocument.collection == collection)
            return int(session.execute(q).scalar_one())

    def get_document(self, collection: str, url: str) -> Optional[IndexedDocument]:
        with self.get_session() as session:
            q = select(DBDocument).where(DBDocument.collection == collection, DBDocument.url == url)
            row = session.execute(q).scalars().first()
            if not row:
                return None
            return self._to_domain(row)

    def _apply_upsert(self, session: Session, collection: str, document: IndexedDocument) -> None:
        q = select(DBDocument).where(DBDocument.collection == collection, DBDocument.url == document.url)
        row = session.execute(q).scalars().first()
        if row is None:
            row = DBDocument(collection=collection, url=document.url)
            session.add(row)
        elif row.content_hash and row.content_hash == document.content_hash:
            return
        row.title = self._sanitize_text(document.title)
        row.plain_text = self._sanitize_text(document.plain_text)
        row.content_hash = document.content_hash
        row.chunks = [
            DBChunk(
                chunk_index=c.chunk_index,
                start_offset=c.start_offset,
                end_offset=c.end_offset,
                text=self._sanitize_text(c.text),
            )
            for c in document.chunks
        ]

    def upsert_documents(self, collection: str, documents: Iterable[IndexedDocument]) -> int:
        """Insert or refresh documents keyed by (collection, url); chunks are replaced.

        Documents whose content hash is unchanged are left alone. Returns the
        number of documents submitted.
        """
        documents = list(documents)
        if not documents:
            return 0
        logger.info("upsert_documents: collection=%s, documents=%d", collection, len(documents))
        with self.get_session() as session:
            for document in documents:
                self._apply_upsert(session, collection, document)
            # Another worker may have inserted the same URL concurrently:
            # roll back and replay, now taking the update path.
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                for document in documents:
                    self._apply_upsert(session, collection, document)
                session.commit()
        return len(documents)

    def delete_urls(self, collection: str, urls: Iterable[str]) -> int:
        """Delete documents (and their chunks) by URL. Missing URLs are ignored."""
        urls = list(urls)
        if not urls:
            return 0
        with self.get_session() as session:
            id_q = select(DBDocument.document_id).where(DBDocument.collection == collection, DBDocument.url.in_(urls))
            document_ids = session.execute(id_q).scalars().all()
            if not document_ids:
                return 0
            session.execute(delete(DBChunk).where(DBChunk.document_id.in_(document_ids)))
            result = session.execute(delete(DBDocument).where(DBDocument.document_id.in_(document_ids)))
            session.commit()
            return result.rowcount
