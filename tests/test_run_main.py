"""
Tests for run.py main() and the dependency injection container.
"""
from unittest.mock import Mock, patch

from run import main
from docsync.container import Container
from docsync.services.chunker import TextChunker


def _container():
    container = Container()
    container.config.DATABASE_URL.from_value(None)
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.HTTP_TIMEOUT.from_value(10)
    return container


def test_container_creates_services_without_database():
    container = _container()

    assert container.documents_repository() is not None
    assert container.runs_repository() is not None
    assert container.config_service() is not None
    assert container.site_crawler() is not None
    assert container.reconciliation_service().page_size == container.config.DOCSYNC_INDEX_PAGE_SIZE()
    assert container.http_service().user_agent == "TestBot/1.0"


def test_container_chunker_uses_configured_bounds():
    container = _container()
    container.config.DOCSYNC_CHUNK_DELIMITER.from_value("\n")
    container.config.DOCSYNC_CHUNK_MIN_LENGTH.from_value(10)
    container.config.DOCSYNC_CHUNK_MAX_LENGTH.from_value(20)

    chunker = container.chunker()
    assert isinstance(chunker, TextChunker)
    assert (chunker.delimiter, chunker.min_length, chunker.max_length) == ("\n", 10, 20)


def test_main_accepts_injected_container():
    container = _container()
    container.config_service.override(Mock(list_configs=Mock(return_value=[])))

    with patch('run.uvicorn.run') as mock_uvicorn, patch('run.init_orm') as mock_init_orm:
        main(container=container)

        assert mock_uvicorn.called
        mock_init_orm.assert_not_called()
