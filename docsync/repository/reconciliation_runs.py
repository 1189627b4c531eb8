from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from docsync.db.models import ReconciliationRun as DBReconciliationRun
from docsync.domain import ReconciliationReport, ReconciliationRun as DomainReconciliationRun


class ReconciliationRunsRepository:
    """Audit trail of reconciliation runs, one row per run."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get_session(self) -> Session:
        return self.session_factory()

    @staticmethod
    def _to_domain(r: DBReconciliationRun) -> DomainReconciliationRun:
        return DomainReconciliationRun(
            run_id=r.run_id,
            collection=r.collection,
            config_path=r.config_path,
            dry_run=r.dry_run,
            start_timestamp=r.start_timestamp,
            end_timestamp=r.end_timestamp,
            indexed_count=r.indexed_count,
            crawled_count=r.crawled_count,
            added=r.added,
            removed=r.removed,
            redirected=r.redirected,
            failed=r.failed,
            exception=r.exception,
        )

    def create_run(self, collection: str, config_path: Optional[str], dry_run: bool) -> int:
        now = datetime.now(timezone.utc)
        with self.get_session() as session:
            r = DBReconciliationRun(collection=collection, config_path=config_path, dry_run=dry_run, start_timestamp=now)
            session.add(r)
            session.commit()
            session.refresh(r)
            return r.run_id

    def finish_run(
        self,
        run_id: int,
        report: Optional[ReconciliationReport] = None,
        added: Optional[int] = None,
        removed: Optional[int] = None,
        exception: Optional[str] = None,
    ) -> None:
        now = datetime.now(timezone.utc)
        with self.get_session() as session:
            q = select(DBReconciliationRun).where(DBReconciliationRun.run_id == run_id)
            r = session.execute(q).scalars().first()
            if not r:
                raise ValueError(f"ReconciliationRun with run_id={run_id} not found")
            r.end_timestamp = now
            r.exception = exception
            if report is not None:
                r.indexed_count = report.indexed_count
                r.crawled_count = report.crawled_count
                r.redirected = len(report.redirected)
                r.failed = len(report.failed)
            r.added = added
            r.removed = removed
            session.add(r)
            session.commit()

    def get_run(self, run_id: int) -> Optional[DomainReconciliationRun]:
        with self.get_session() as session:
            q = select(DBReconciliationRun).where(DBReconciliationRun.run_id == run_id)
            r = session.execute(q).scalars().first()
            if not r:
                return None
            return self._to_domain(r)

    def list_runs(self, limit: int = 20, collection: Optional[str] = None):
        """Return recent runs, newest first."""
        with self.get_session() as session:
            q = select(DBReconciliationRun)
            if collection is not None:
                q = q.where(DBReconciliationRun.collection == collection)
            q = q.order_by(DBReconciliationRun.run_id.desc()).limit(limit)
            rows = session.execute(q).scalars().all()
            return [self._to_domain(r) for r in rows]
