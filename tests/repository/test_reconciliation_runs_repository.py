import pytest

from docsync.domain import ReconciliationReport
from docsync.repository.reconciliation_runs import ReconciliationRunsRepository


def _report():
    return ReconciliationReport(
        to_add=frozenset({"c"}),
        to_remove=frozenset({"a"}),
        redirected=frozenset({"r1", "r2"}),
        failed=frozenset(),
        indexed_count=2,
        crawled_count=2,
    )


def test_create_and_finish_dry_run(session_factory):
    repo = ReconciliationRunsRepository(session_factory)
    run_id = repo.create_run("docs", "docs.yml", dry_run=True)
    repo.finish_run(run_id, report=_report())

    run = repo.get_run(run_id)
    assert run.collection == "docs"
    assert run.dry_run is True
    assert run.end_timestamp is not None
    assert (run.indexed_count, run.crawled_count, run.redirected, run.failed) == (2, 2, 2, 0)
    assert run.added is None
    assert run.exception is None


def test_finish_with_exception(session_factory):
    repo = ReconciliationRunsRepository(session_factory)
    run_id = repo.create_run("docs", "docs.yml", dry_run=False)
    repo.finish_run(run_id, exception="EnumerationError: boom")
    run = repo.get_run(run_id)
    assert run.exception == "EnumerationError: boom"
    assert run.indexed_count is None


def test_finish_unknown_run_raises(session_factory):
    with pytest.raises(ValueError):
        ReconciliationRunsRepository(session_factory).finish_run(999)


def test_list_runs_newest_first_and_filtered(session_factory):
    repo = ReconciliationRunsRepository(session_factory)
    first = repo.create_run("docs", "docs.yml", dry_run=True)
    second = repo.create_run("other-docs", "other.yml", dry_run=True)
    third = repo.create_run("docs", "docs.yml", dry_run=False)

    assert [r.run_id for r in repo.list_runs()] == [third, second, first]
    assert [r.run_id for r in repo.list_runs(collection="docs")] == [third, first]
    assert [r.run_id for r in repo.list_runs(limit=1)] == [third]
