from .engine import make_engine, make_session_factory, init_orm
from .models import Base, Document, Chunk, ReconciliationRun

__all__ = [
    "make_engine",
    "make_session_factory",
    "init_orm",
    "Base",
    "Document",
    "Chunk",
    "ReconciliationRun",
]
