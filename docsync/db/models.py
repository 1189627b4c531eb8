from __future__ import annotations


from sqlalchemy import Boolean, Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "url", name="uq_documents_collection_url"),)

    document_id = Column(Integer, primary_key=True)
    collection = Column(Text, nullable=False, index=True)
    url = Column(Text, nullable=False)
    title = Column(Text, nullable=True)
    plain_text = Column(Text, nullable=True)
    content_hash = Column(Text, nullable=True)
    indexed_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    chunks = relationship(
        "Chunk",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="Chunk.chunk_index",
    )


class Chunk(Base):
    __tablename__ = "chunks"

    chunk_id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.document_id", ondelete="CASCADE"), nullable=False, index=True)
    chunk_index = Column(Integer, nullable=False)
    start_offset = Column(Integer, nullable=False)
    end_offset = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)

    document = relationship("Document", back_populates="chunks")


class ReconciliationRun(Base):
    __tablename__ = "reconciliation_runs"

    run_id = Column(Integer, primary_key=True)
    collection = Column(Text, nullable=False)
    config_path = Column(Text, nullable=True)
    dry_run = Column(Boolean, nullable=False, default=True)
    start_timestamp = Column(DateTime(timezone=True), nullable=False)
    end_timestamp = Column(DateTime(timezone=True), nullable=True)
    indexed_count = Column(Integer, nullable=True)
    crawled_count = Column(Integer, nullable=True)
    added = Column(Integer, nullable=True)
    removed = Column(Integer, nullable=True)
    redirected = Column(Integer, nullable=True)
    failed = Column(Integer, nullable=True)
    exception = Column(Text, nullable=True)
