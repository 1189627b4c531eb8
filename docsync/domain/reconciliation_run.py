from typing import Optional
from datetime import datetime


class ReconciliationRun:
    def __init__(self, run_id: int, collection: str, config_path: Optional[str], dry_run: bool, start_timestamp: datetime, end_timestamp: Optional[datetime] = None, indexed_count: Optional[int] = None, crawled_count: Optional[int] = None, added: Optional[int] = None, removed: Optional[int] = None, redirected: Optional[int] = None, failed: Optional[int] = None, exception: Optional[str] = None):
        self.run_id = run_id
        self.collection = collection
        self.config_path = config_path
        self.dry_run = dry_run
        self.start_timestamp = start_timestamp
        self.end_timestamp = end_timestamp
        self.indexed_count = indexed_count
        self.crawled_count = crawled_count
        self.added = added
        self.removed = removed
        self.redirected = redirected
        self.failed = failed
        self.exception = exception

    def __repr__(self):
        return (
            f"<ReconciliationRun id={self.run_id} collection={self.collection} "
            f"dry_run={self.dry_run} start={self.start_timestamp} end={self.end_timestamp}>"
        )
