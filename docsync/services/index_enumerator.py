import logging
import threading
from typing import Callable, Optional

from docsync.exceptions import EnumerationCancelledError, EnumerationError, IndexTransportError

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], list[str]]


class IndexEnumerator:
    """Walks every identifier in an index, one page at a time.

    Pages are requested strictly in sequence starting at 1, and enumeration
    ends at the first empty page. Errors are never retried here: a failed or
    cancelled enumeration yields no result, since diffing against a partial
    snapshot could delete live documents.
    """

    def __init__(self, fetch_page: PageFetcher, stop_event: Optional[threading.Event] = None):
        self.fetch_page = fetch_page
        self.stop_event = stop_event

    def enumerate_all(self, page_size: int) -> frozenset[str]:
        if page_size <= 0:
            raise ValueError("page_size must be positive")

        collected: set[str] = set()
        page_number = 1
        while True:
            if self.stop_event is not None and self.stop_event.is_set():
                logger.info("Enumeration cancelled before page %s", page_number)
                raise EnumerationCancelledError(page_number)
            try:
                page = self.fetch_page(page_number, page_size)
            except IndexTransportError as e:
                logger.warning("Enumeration failed at page %s: %s", page_number, e)
                raise EnumerationError(page_number, str(e)) from e
            if not page:
                break
            collected.update(page)
            page_number += 1

        logger.debug("Enumerated %d identifiers in %d pages", len(collected), page_number - 1)
        return frozenset(collected)
