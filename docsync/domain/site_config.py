from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ChunkingOptions:
    delimiter: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


@dataclass(frozen=True)
class SiteConfigData:
    """Sync-behavior fields for a site configuration."""

    sitemap_url: str
    collection: str
    allow_prefixes: list[str]
    deny_prefixes: list[str]
    fetch_mode: str
    chunking: ChunkingOptions = field(default_factory=ChunkingOptions)


class SiteConfig:
    """A documentation site to keep in sync with one index collection."""

    def __init__(
        self,
        config_path: str,
        sitemap_url: str,
        collection: str,
        allow_prefixes=None,
        deny_prefixes=None,
        fetch_mode: str = None,
        chunking: Optional[ChunkingOptions] = None,
    ):
        if fetch_mode is None or (isinstance(fetch_mode, str) and fetch_mode.strip() == ""):
            raise ValueError("fetch_mode is required")
        if not collection:
            raise ValueError("collection is required")

        self.config_path = config_path
        self.data = SiteConfigData(
            sitemap_url=sitemap_url,
            collection=collection,
            allow_prefixes=list(allow_prefixes or []),
            deny_prefixes=list(deny_prefixes or []),
            fetch_mode=fetch_mode,
            chunking=chunking or ChunkingOptions(),
        )

    @property
    def name(self) -> str:
        return self.config_path.rsplit(".", 1)[0]

    @property
    def sitemap_url(self) -> str:
        return self.data.sitemap_url

    @property
    def collection(self) -> str:
        return self.data.collection

    @property
    def chunks_collection(self) -> str:
        """Name of the paired chunks collection, e.g. "next-docs" -> "next-chunks".

        Informational only: it is reported by `/sites` for external search
        setups that keep chunks in a separate collection. DocSync itself stores
        chunks in the `chunks` table keyed by document and never reads it.
        """
        return self.data.collection.replace("docs", "chunks")

    @property
    def allow_prefixes(self) -> list[str]:
        return self.data.allow_prefixes

    @property
    def deny_prefixes(self) -> list[str]:
        return self.data.deny_prefixes

    @property
    def fetch_mode(self) -> str:
        return self.data.fetch_mode

    @property
    def chunking(self) -> ChunkingOptions:
        return self.data.chunking

    def __repr__(self):
        return f"<SiteConfig path={self.config_path} collection={self.collection} mode={self.fetch_mode}>"
