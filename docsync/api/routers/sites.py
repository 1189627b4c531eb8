import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from docsync.api.auth import require_admin
from docsync.exceptions import (
    ConfigNotFoundError,
    CrawlCancelledError,
    EnumerationCancelledError,
    EnumerationError,
    HttpFetchError,
    InvalidBoundsError,
    ReconciliationInconsistencyError,
)

logger = logging.getLogger(__name__)

CANCELLED_ERRORS = (CrawlCancelledError, EnumerationCancelledError)


def _site_to_dict(cfg) -> dict:
    return {
        "name": cfg.name,
        "config_path": cfg.config_path,
        "sitemap_url": cfg.sitemap_url,
        "collection": cfg.collection,
        "chunks_collection": cfg.chunks_collection,
        "allow_prefixes": cfg.allow_prefixes,
        "deny_prefixes": cfg.deny_prefixes,
        "fetch_mode": cfg.fetch_mode,
    }


def _run_to_dict(run) -> dict:
    return {
        "run_id": run.run_id,
        "collection": run.collection,
        "config_path": run.config_path,
        "dry_run": run.dry_run,
        "start_timestamp": run.start_timestamp,
        "end_timestamp": run.end_timestamp,
        "indexed_count": run.indexed_count,
        "crawled_count": run.crawled_count,
        "added": run.added,
        "removed": run.removed,
        "redirected": run.redirected,
        "failed": run.failed,
        "exception": run.exception,
    }


def _result_to_dict(result) -> dict:
    return {
        "run_id": result.run_id,
        "applied": result.applied,
        "added": result.added,
        "removed": result.removed,
        "summary": result.report.summary(),
        "report": result.report.as_dict(),
    }


def create_sites_router(config_service, reconciliation_service, runs_repo=None, run_registry=None):
    router = APIRouter(tags=["Sites"])

    def _register(name: str, dry_run: bool):
        if run_registry is None:
            return None, None
        handle = run_registry.start(name, dry_run=dry_run)
        return handle.run_key, handle.stop_event

    def _finish(run_key, status: str, error: Optional[str] = None, summary: Optional[str] = None):
        if run_key is not None:
            run_registry.finish(run_key, status=status, error=error, summary=summary)

    def _run_and_track(name: str, dry_run: bool, run_key=None, stop_event=None):
        """Run one reconciliation and record its outcome in the run registry."""
        try:
            result = reconciliation_service.run(name, dry_run=dry_run, stop_event=stop_event)
        except CANCELLED_ERRORS as e:
            logger.info("Reconciliation of %s cancelled: %s", name, e)
            _finish(run_key, "cancelled", error=str(e))
            raise
        except Exception as e:
            _finish(run_key, "failed", error=str(e))
            raise
        _finish(run_key, "finished", summary=result.report.summary())
        return result

    @router.get("/sites")
    def list_sites():
        return [_site_to_dict(c) for c in config_service.list_configs()]

    @router.get("/sites/{name}")
    def get_site(name: str):
        try:
            return _site_to_dict(config_service.get_config(name))
        except ConfigNotFoundError:
            raise HTTPException(status_code=404, detail="config not found")

    @router.post("/sites/{name}/reconcile")
    def reconcile_site(name: str):
        """Dry run: compute and record the diff without touching the index."""
        run_key, stop_event = _register(name, dry_run=True)
        try:
            result = _run_and_track(name, True, run_key, stop_event)
        except ConfigNotFoundError:
            raise HTTPException(status_code=404, detail="config not found")
        except InvalidBoundsError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except CANCELLED_ERRORS:
            raise HTTPException(status_code=409, detail="reconciliation cancelled")
        except (EnumerationError, HttpFetchError):
            logger.exception("Reconciliation of %s failed", name)
            raise HTTPException(status_code=502, detail="upstream failure during reconciliation")
        except ReconciliationInconsistencyError:
            logger.exception("Reconciliation of %s produced an inconsistent report", name)
            raise HTTPException(status_code=409, detail="inconsistent reconciliation report")
        body = _result_to_dict(result)
        body["run_key"] = run_key
        return body

    @router.post("/sites/{name}/sync", status_code=202, dependencies=[Depends(require_admin)])
    def sync_site(name: str, background_tasks: BackgroundTasks):
        """Start a reconciliation that applies its diff to the index.

        The run happens in the background; poll `/runs/active` and `/runs` for
        progress, or stop it with `/runs/cancel/{run_key}`.
        """
        try:
            config_service.get_config(name)
        except ConfigNotFoundError:
            raise HTTPException(status_code=404, detail="config not found")
        run_key, stop_event = _register(name, dry_run=False)
        background_tasks.add_task(_run_and_track, name, False, run_key, stop_event)
        return {"status": "started", "run_key": run_key}

    @router.get("/runs")
    def list_runs(limit: int = 20, collection: Optional[str] = None):
        if runs_repo is None:
            return []
        return [_run_to_dict(r) for r in runs_repo.list_runs(limit=limit, collection=collection)]

    @router.get("/runs/active")
    def list_active_runs():
        if run_registry is None:
            return {"active": []}
        return {"active": run_registry.list_active()}

    @router.post("/runs/cancel/{run_key}", dependencies=[Depends(require_admin)])
    def cancel_run(run_key: str):
        if run_registry is None:
            raise HTTPException(status_code=404, detail="no registry configured")
        if not run_registry.cancel(run_key):
            raise HTTPException(status_code=404, detail="run not found or cannot cancel")
        return {"status": "cancelling", "run_key": run_key}

    return router
