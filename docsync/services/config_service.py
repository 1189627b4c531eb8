import logging
from typing import Optional

from docsync.domain.site_config import SiteConfig
from docsync.exceptions import ConfigNotFoundError
from docsync.services.config_file_store import ConfigFileStore
from docsync.services.site_config_parser import SiteConfigParser

logger = logging.getLogger(__name__)


class SiteConfigService:
    """Looks up site configs by name (file name with or without extension)."""

    def __init__(self, store: ConfigFileStore, parser: Optional[SiteConfigParser] = None):
        self.store = store
        self.parser = parser or SiteConfigParser()

    def _load(self, fname: str) -> Optional[SiteConfig]:
        data = self.store.load_yaml_dict(fname)
        if data is None:
            return None
        try:
            cfg = self.parser.parse(config_path=fname, data=data)
        except ValueError as e:
            logger.warning("Invalid site config %s: %s", fname, e)
            return None
        if cfg is None:
            logger.warning("Site config %s is missing sitemap_url or collection", fname)
        return cfg

    def list_configs(self) -> list[SiteConfig]:
        configs = []
        for fname in self.store.list_config_files():
            cfg = self._load(fname)
            if cfg is not None:
                configs.append(cfg)
        return configs

    def get_config(self, name: str) -> SiteConfig:
        """Return the named config or raise ConfigNotFoundError."""
        candidates = [name] if name.endswith((".yml", ".yaml")) else [f"{name}.yml", f"{name}.yaml"]
        for fname in candidates:
            cfg = self._load(fname)
            if cfg is not None:
                return cfg
        raise ConfigNotFoundError(name)
