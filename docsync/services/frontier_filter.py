from dataclasses import dataclass
from typing import Iterable, Sequence


def filter_frontier(
    discovered_urls: Iterable[str],
    allow_prefixes: Sequence[str],
    deny_prefixes: Sequence[str],
) -> list[str]:
    """Keep URLs that match an allow prefix and no deny prefix, in input order.

    Deny wins when both match. No deduplication is done here.
    """
    allow = tuple(allow_prefixes)
    deny = tuple(deny_prefixes)
    # str.startswith(()) is False, so an empty allow list admits nothing
    return [url for url in discovered_urls if url.startswith(allow) and not url.startswith(deny)]


@dataclass(frozen=True)
class FrontierRules:
    allow_prefixes: tuple[str, ...]
    deny_prefixes: tuple[str, ...] = ()

    @classmethod
    def from_site_config(cls, site_config) -> "FrontierRules":
        return cls(tuple(site_config.allow_prefixes), tuple(site_config.deny_prefixes))

    def allows(self, url: str) -> bool:
        return url.startswith(self.allow_prefixes) and not url.startswith(self.deny_prefixes)

    def apply(self, urls: Iterable[str]) -> list[str]:
        return filter_frontier(urls, self.allow_prefixes, self.deny_prefixes)
