"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from docsync.db.engine import make_engine, make_session_factory
from docsync.repository.documents import DocumentsRepository
from docsync.repository.reconciliation_runs import ReconciliationRunsRepository
from docsync.services.chat_stream_service import ChatStreamClient
from docsync.services.chunker import TextChunker
from docsync.services.config_file_store import ConfigFileStore
from docsync.services.config_service import SiteConfigService
from docsync.services.fetcher import HttpServiceFetcher
from docsync.services.fetcher_factory import FetcherFactory
from docsync.services.headless_browser_fetcher import PlaywrightHeadlessFetcher, PlaywrightHeadlessOptions
from docsync.services.html_text_extractor import HtmlTextExtractor
from docsync.services.http_service import HttpService
from docsync.services.index_writer import IndexWriter
from docsync.services.reconciliation_service import ReconciliationService
from docsync.services.run_registry import InMemoryRunRegistry
from docsync.services.site_crawler import SiteCrawler
from docsync.services.sitemap_service import SitemapService
from docsync import config as env


# Environment variables used by the container (read via `docsync.config` helpers).
#
# DATABASE_URL (str | optional)
#   SQLAlchemy URL of the document index store. Required once a repository is used.
#
# USER_AGENT (str, default: "DocSync/0.1")
#   User-Agent header for sitemap/page requests and the headless browser.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for outbound HTTP requests. Also reused for headless fetcher timeout.
#
# DOCSYNC_CONFIGS_DIR (str, default: "./configs")
#   Directory holding one YAML file per documentation site.
#
# DOCSYNC_INDEX_PAGE_SIZE (int, default: 250)
#   Page size used when enumerating the existing index.
#
# DOCSYNC_CHUNK_DELIMITER (str, default: "\n\n"), DOCSYNC_CHUNK_MIN_LENGTH (int, default: 1000),
# DOCSYNC_CHUNK_MAX_LENGTH (int, default: 4000)
#   Default chunking of indexed documents; site configs may override.
#
# DOCSYNC_STREAM_FLUSH_INTERVAL (float seconds, default: 2.0)
#   How often streamed model output is handed to the consumer.
#
# LLM_API_URL, LLM_API_KEY, LLM_MODEL_NAME, LLM_TEMPERATURE
#   OpenAI-compatible chat completion endpoint used for streaming.
ENV = {
    "DATABASE_URL": env.get_optional_str_env("DATABASE_URL"),
    "USER_AGENT": env.get_str_env("USER_AGENT", "DocSync/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "DOCSYNC_CONFIGS_DIR": env.configs_dir(),
    "DOCSYNC_INDEX_PAGE_SIZE": env.get_int_env("DOCSYNC_INDEX_PAGE_SIZE", 250),
    "DOCSYNC_CHUNK_DELIMITER": env.get_delimiter_env("DOCSYNC_CHUNK_DELIMITER", "\n\n"),
    "DOCSYNC_CHUNK_MIN_LENGTH": env.get_int_env("DOCSYNC_CHUNK_MIN_LENGTH", 1000),
    "DOCSYNC_CHUNK_MAX_LENGTH": env.get_int_env("DOCSYNC_CHUNK_MAX_LENGTH", 4000),
    "DOCSYNC_STREAM_FLUSH_INTERVAL": env.get_float_env("DOCSYNC_STREAM_FLUSH_INTERVAL", 2.0),
    "LLM_API_URL": env.get_str_env("LLM_API_URL", "https://api.openai.com/v1"),
    "LLM_API_KEY": env.get_optional_str_env("LLM_API_KEY"),
    "LLM_MODEL_NAME": env.get_str_env("LLM_MODEL_NAME", "gpt-4o-mini"),
    "LLM_TEMPERATURE": env.get_float_env("LLM_TEMPERATURE", 0.1),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for DocSync."""

    config = providers.Configuration(default=ENV)

    # Database engine - Singleton to reuse connection pool
    db_engine = providers.Singleton(
        make_engine,
        database_url=config.DATABASE_URL
    )
    session_factory = providers.Singleton(
        make_session_factory,
        database_url=config.DATABASE_URL
    )

    documents_repository = providers.Singleton(
        DocumentsRepository,
        session_factory=session_factory
    )

    runs_repository = providers.Singleton(
        ReconciliationRunsRepository,
        session_factory=session_factory
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int)
    )

    page_fetcher = providers.Singleton(
        HttpServiceFetcher,
        http_service=http_service,
    )

    headless_fetcher = providers.Singleton(
        PlaywrightHeadlessFetcher,
        user_agent=config.USER_AGENT.as_(str),
        options=providers.Factory(
            PlaywrightHeadlessOptions,
            timeout_ms=providers.Callable(lambda t: t * 1000, config.HTTP_TIMEOUT.as_(int)),
        ),
    )

    fetcher_factory = providers.Singleton(
        FetcherFactory,
        http_fetcher=page_fetcher,
        headless_fetcher=headless_fetcher,
    )

    config_file_store = providers.Singleton(
        ConfigFileStore,
        configs_dir=config.DOCSYNC_CONFIGS_DIR.as_(str),
    )

    config_service = providers.Singleton(
        SiteConfigService,
        store=config_file_store,
    )

    sitemap_service = providers.Singleton(
        SitemapService,
        http_service=http_service,
    )

    site_crawler = providers.Singleton(
        SiteCrawler,
        fetcher_factory=fetcher_factory,
        text_extractor=providers.Singleton(HtmlTextExtractor),
    )

    chunker = providers.Singleton(
        TextChunker,
        delimiter=config.DOCSYNC_CHUNK_DELIMITER.as_(str),
        min_length=config.DOCSYNC_CHUNK_MIN_LENGTH.as_(int),
        max_length=config.DOCSYNC_CHUNK_MAX_LENGTH.as_(int),
    )

    index_writer = providers.Singleton(
        IndexWriter,
        documents_repo=documents_repository,
        chunker=chunker,
    )

    reconciliation_service = providers.Singleton(
        ReconciliationService,
        config_service=config_service,
        sitemap_service=sitemap_service,
        site_crawler=site_crawler,
        documents_repo=documents_repository,
        index_writer=index_writer,
        runs_repo=runs_repository,
        page_size=config.DOCSYNC_INDEX_PAGE_SIZE.as_(int),
    )

    chat_stream_client = providers.Singleton(
        ChatStreamClient,
        http_client=providers.Object(requests.post),
        api_url=config.LLM_API_URL.as_(str),
        api_key=config.LLM_API_KEY,
        model=config.LLM_MODEL_NAME.as_(str),
        temperature=config.LLM_TEMPERATURE.as_(float),
        timeout=providers.Callable(lambda t: max(t, 60), config.HTTP_TIMEOUT.as_(int)),
    )

    # In-flight reconciliation runs and their stop events, shared by the API routes.
    run_registry = providers.Singleton(InMemoryRunRegistry)
