from enum import Enum
from typing import NamedTuple, Optional


class CrawlOutcome(str, Enum):
    SUCCESS = "success"
    REDIRECTED = "redirected"
    FAILED = "failed"


class CrawlRecord(NamedTuple):
    """What the crawler observed for a single frontier URL."""
    url: str
    outcome: CrawlOutcome
    status_code: Optional[int] = None
    final_url: Optional[str] = None
    title: Optional[str] = None
    plain_text: Optional[str] = None
    error: Optional[str] = None
