"""Command-line entry point for one-off reconciliation runs.

    docsync reconcile <config>            # dry run, prints the report
    docsync reconcile <config> --apply    # also applies it to the index
    docsync sites                         # list configured sites
"""
import argparse
import json
import logging
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from docsync import config as env
from docsync.container import Container
from docsync.db.engine import init_orm
from docsync.exceptions import ConfigNotFoundError, CrawlCancelledError, EnumerationCancelledError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docsync", description="Keep a docs index in sync with its website")
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("reconcile", help="crawl a site and diff it against its index collection")
    rec.add_argument("config", help="site config name (file in the configs directory)")
    rec.add_argument("--apply", action="store_true", help="apply additions and removals to the index")
    rec.add_argument("--json", action="store_true", help="print the full report as JSON")

    sub.add_parser("sites", help="list configured sites")
    return parser


def _wait(future: Future):
    return future.result()


def _reconcile(service, config_name: str, dry_run: bool):
    """Run one reconciliation on a worker thread; Ctrl-C sets its stop event.

    The worker stops at its next checkpoint and the cancellation error it
    raises is what the caller sees.
    """
    stop_event = threading.Event()
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="reconcile") as executor:
        future = executor.submit(service.run, config_name, dry_run=dry_run, stop_event=stop_event)
        try:
            return _wait(future)
        except KeyboardInterrupt:
            logger.warning("Interrupted, stopping reconciliation of %s", config_name)
            stop_event.set()
            return future.result()


def main(argv: Optional[list[str]] = None, container: Optional[Container] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=env.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    container = container or Container()

    if args.command == "sites":
        for cfg in container.config_service().list_configs():
            print(f"{cfg.name}\t{cfg.collection}\t{cfg.sitemap_url}")
        return 0

    if container.config.DATABASE_URL():
        init_orm(container.db_engine())

    try:
        result = _reconcile(container.reconciliation_service(), args.config, dry_run=not args.apply)
    except ConfigNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2
    except (CrawlCancelledError, EnumerationCancelledError) as e:
        print(str(e), file=sys.stderr)
        return 130

    if args.json:
        print(json.dumps(result.report.as_dict(), indent=2))
    print(result.report.summary())
    if result.applied:
        print(f"Applied: added={result.added} removed={result.removed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
