"""Custom exceptions for DocSync services."""


class ConfigNotFoundError(Exception):
    """Raised when a requested site config cannot be found on disk."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class InvalidBoundsError(ValueError):
    """Raised when chunker bounds or delimiter are misconfigured. Not retryable."""

    def __init__(self, min_length, max_length, delimiter):
        self.min_length = min_length
        self.max_length = max_length
        self.delimiter = delimiter
        super().__init__(
            f"Invalid chunk bounds: min_length={min_length!r}, max_length={max_length!r}, "
            f"delimiter={delimiter!r} (require 0 < min_length <= max_length and a non-empty delimiter)"
        )


class IndexTransportError(Exception):
    """Raised by an index store when a query fails at the transport/storage layer."""

    def __init__(self, collection: str, original: Exception):
        self.collection = collection
        self.original = original
        super().__init__(f"Index query failed for collection {collection!r}: {original}")


class EnumerationError(Exception):
    """Raised when paging through the index fails.

    Any identifiers collected before the failure are discarded; callers may
    retry the whole enumeration from page 1.
    """

    def __init__(self, page_number: int, message: str):
        self.page_number = page_number
        super().__init__(f"Index enumeration failed at page {page_number}: {message}")


class EnumerationCancelledError(EnumerationError):
    """Raised when a stop event is set between page fetches."""

    def __init__(self, page_number: int):
        super().__init__(page_number, "cancelled")


class StreamStateError(RuntimeError):
    """Raised when a stream aggregator is used out of order."""


class StreamAlreadyTerminatedError(StreamStateError):
    """Raised when feeding or terminating a stream that has already terminated."""

    def __init__(self):
        super().__init__("stream already terminated")


class ReconciliationInconsistencyError(Exception):
    """Raised when a reconciliation report violates its disjointness rules.

    Indicates a collaborator bug upstream; the mutation step must be aborted.
    """

    def __init__(self, reason: str, identifiers=()):
        self.reason = reason
        self.identifiers = frozenset(identifiers)
        super().__init__(f"Inconsistent reconciliation report: {reason} ({len(self.identifiers)} identifiers)")


class ChatStreamError(Exception):
    """Raised when the model stream cannot be opened or read."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Chat stream failed for {url}: {original}")


class CrawlCancelledError(Exception):
    """Raised when a reconciliation run is cancelled while crawling."""

    def __init__(self, collection: str, crawled: int):
        self.collection = collection
        self.crawled = crawled
        super().__init__(f"Crawl of {collection!r} cancelled after {crawled} pages")
