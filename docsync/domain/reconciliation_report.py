from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReconciliationReport:
    """Set-algebra diff between an index snapshot and a crawl.

    - `to_remove`: indexed but not crawled successfully
    - `to_add`: crawled successfully but not indexed
    - `redirected` / `failed`: as reported by the crawl; these may overlap
      `to_remove` when the URL was previously indexed.
    """

    to_add: frozenset[str]
    to_remove: frozenset[str]
    redirected: frozenset[str]
    failed: frozenset[str]
    indexed_count: int
    crawled_count: int

    def summary(self) -> str:
        return (
            f"Last crawl: {self.indexed_count} | This crawl: {self.crawled_count} | "
            f"Redirected: {len(self.redirected)} | Removed: {len(self.to_remove)} | "
            f"New: {len(self.to_add)} | Failed: {len(self.failed)}"
        )

    def as_dict(self) -> dict:
        return {
            "to_add": sorted(self.to_add),
            "to_remove": sorted(self.to_remove),
            "redirected": sorted(self.redirected),
            "failed": sorted(self.failed),
            "indexed_count": self.indexed_count,
            "crawled_count": self.crawled_count,
        }
