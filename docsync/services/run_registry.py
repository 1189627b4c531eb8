from __future__ import annotations

import threading
import uuid
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Deque, Dict, List, Optional


@dataclass
class RunRecord:
    id: str
    config_name: str
    dry_run: bool
    status: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    summary: Optional[str] = None


@dataclass(frozen=True)
class RunHandle:
    run_key: str
    stop_event: threading.Event


class InMemoryRunRegistry:
    """Thread-safe in-memory registry of in-flight and recent reconciliation runs.

    Each run gets a stop event; `cancel()` sets it so the pipeline stops at its
    next checkpoint. Single-process only, the registry is lost on restart.
    """

    def __init__(self, *, max_completed_records: int = 200):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._lock = threading.Lock()
        self._records: Dict[str, RunRecord] = {}
        self._stop_events: Dict[str, threading.Event] = {}
        self._completed_order: Deque[str] = deque()
        self._max_completed_records = max_completed_records

    def start(self, config_name: str, *, dry_run: bool = True) -> RunHandle:
        with self._lock:
            key = str(uuid.uuid4())
            self._records[key] = RunRecord(
                id=key,
                config_name=config_name,
                dry_run=dry_run,
                status="running",
                started_at=datetime.utcnow(),
            )
            stop_event = threading.Event()
            self._stop_events[key] = stop_event
            return RunHandle(run_key=key, stop_event=stop_event)

    def get_stop_event(self, run_key: str) -> Optional[threading.Event]:
        with self._lock:
            return self._stop_events.get(run_key)

    def cancel(self, run_key: str) -> bool:
        """Set the run's stop event and mark it cancelled.

        Returns False for unknown runs and runs that already completed.
        """
        with self._lock:
            ev = self._stop_events.pop(run_key, None)
            if ev is None:
                return False
            ev.set()
            self._complete(run_key, status="cancelled")
            return True

    def finish(
        self,
        run_key: str,
        *,
        status: str = "finished",
        error: Optional[str] = None,
        summary: Optional[str] = None,
    ) -> bool:
        with self._lock:
            rec = self._records.get(run_key)
            if rec is None:
                return False
            self._stop_events.pop(run_key, None)
            if rec.status == "running":
                self._complete(run_key, status=status)
            # A cancelled run keeps its status; the pipeline's own outcome is still recorded.
            if error:
                rec.error = error
            if summary:
                rec.summary = summary
            return True

    def get(self, run_key: str) -> Optional[Dict]:
        with self._lock:
            rec = self._records.get(run_key)
            return asdict(rec) if rec else None

    def list_active(self) -> List[Dict]:
        with self._lock:
            return [asdict(r) for r in self._records.values() if r.status == "running"]

    def _complete(self, run_key: str, *, status: str) -> None:
        rec = self._records[run_key]
        rec.status = status
        rec.finished_at = datetime.utcnow()
        self._completed_order.append(run_key)
        while len(self._completed_order) > self._max_completed_records:
            self._records.pop(self._completed_order.popleft(), None)
