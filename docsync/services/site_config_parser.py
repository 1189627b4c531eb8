import os
from typing import Optional

from docsync.domain.site_config import ChunkingOptions, SiteConfig


class SiteConfigParser:
    """Parse a YAML dict into a SiteConfig.

    Responsibility: schema/validation for YAML config files.
    It does NOT perform filesystem IO.

    Expected shape::

        sitemap_url: https://docs.example/en/sitemap.xml
        collection: example-docs
        allow_prefixes: [https://docs.example/]
        deny_prefixes: [https://docs.example/api]
        fetch:
          mode: headless_chromium
        chunking: {delimiter: "\\n\\n", min_length: 800, max_length: 3000}
    """

    def parse(self, *, config_path: str, data: dict) -> Optional[SiteConfig]:
        sitemap_url = data.get("sitemap_url")
        collection = data.get("collection")
        if not sitemap_url or not collection:
            return None

        fetch_mode = (data.get("fetch") or {}).get("mode", "http")

        allow = data.get("allow_prefixes")
        if allow is None:
            # Default frontier: everything under the sitemap's site root.
            allow = [sitemap_url.rsplit("/", 1)[0] + "/"]
        if isinstance(allow, str):
            allow = [allow]
        deny = data.get("deny_prefixes") or []
        if isinstance(deny, str):
            deny = [deny]

        chunking_dict = data.get("chunking") or {}
        chunking = ChunkingOptions(
            delimiter=chunking_dict.get("delimiter"),
            min_length=chunking_dict.get("min_length"),
            max_length=chunking_dict.get("max_length"),
        )

        return SiteConfig(
            config_path=os.path.basename(config_path),
            sitemap_url=sitemap_url,
            collection=collection,
            allow_prefixes=allow,
            deny_prefixes=deny,
            fetch_mode=fetch_mode,
            chunking=chunking,
        )
