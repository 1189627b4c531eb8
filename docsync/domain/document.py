from datetime import datetime
from typing import Optional


class IndexedDocument:
    def __init__(self, document_id: Optional[int], collection: str, url: str, title: Optional[str] = None, plain_text: Optional[str] = None, content_hash: Optional[str] = None, indexed_at: Optional[datetime] = None, chunks: Optional[list["DocumentChunk"]] = None):
        self.document_id = document_id
        self.collection = collection
        self.url = url
        self.title = title
        self.plain_text = plain_text
        self.content_hash = content_hash
        self.indexed_at = indexed_at
        self.chunks = list(chunks or [])

    def __repr__(self):
        return f"<IndexedDocument id={self.document_id} collection={self.collection} url={self.url}>"


class DocumentChunk:
    def __init__(self, chunk_index: int, start_offset: int, end_offset: int, text: str, chunk_id: Optional[int] = None):
        self.chunk_id = chunk_id
        self.chunk_index = chunk_index
        self.start_offset = start_offset
        self.end_offset = end_offset
        self.text = text

    def __repr__(self):
        return f"<DocumentChunk index={self.chunk_index} range=[{self.start_offset}, {self.end_offset})>"
