from .documents import DocumentsRepository
from .reconciliation_runs import ReconciliationRunsRepository

__all__ = ["DocumentsRepository", "ReconciliationRunsRepository"]
