import pytest

from docsync.domain import (
    ChunkingOptions,
    ReconciliationReport,
    SiteConfig,
    StreamBuffer,
    StreamEvent,
    TextSegment,
)


def test_text_segment_length_and_slice():
    segment = TextSegment(2, 5, delimited=True)
    assert segment.length == 3
    assert segment.slice("abcdefg") == "cde"


def test_report_summary_and_dict():
    report = ReconciliationReport(
        to_add=frozenset({"b", "a"}),
        to_remove=frozenset({"z"}),
        redirected=frozenset({"r"}),
        failed=frozenset(),
        indexed_count=10,
        crawled_count=11,
    )
    assert report.summary() == "Last crawl: 10 | This crawl: 11 | Redirected: 1 | Removed: 1 | New: 2 | Failed: 0"
    assert report.as_dict()["to_add"] == ["a", "b"]


def test_report_is_immutable():
    report = ReconciliationReport(frozenset(), frozenset(), frozenset(), frozenset(), 0, 0)
    with pytest.raises(AttributeError):
        report.indexed_count = 1


def test_site_config_derives_chunks_collection():
    cfg = SiteConfig(
        config_path="next.yml",
        sitemap_url="https://docs.example/sitemap.xml",
        collection="next-docs",
        fetch_mode="http",
    )
    assert cfg.name == "next"
    assert cfg.chunks_collection == "next-chunks"
    assert cfg.chunking == ChunkingOptions()


@pytest.mark.parametrize("fetch_mode, collection", [(None, "docs"), ("  ", "docs"), ("http", "")])
def test_site_config_requires_mode_and_collection(fetch_mode, collection):
    with pytest.raises(ValueError):
        SiteConfig(config_path="x.yml", sitemap_url="https://d/s.xml", collection=collection, fetch_mode=fetch_mode)


def test_stream_buffer_tracks_pending_separately():
    buffer = StreamBuffer()
    buffer.append("a")
    buffer.append("b")
    assert buffer.pending_since_last_flush == "ab"
    buffer.clear_pending()
    assert not buffer.has_pending()
    buffer.append("c")
    assert buffer.pending_since_last_flush == "c"
    assert buffer.accumulated_all == "abc"


def test_stream_event_terminal_only_on_stop():
    assert StreamEvent("x", "stop").is_terminal
    assert not StreamEvent("x", "length").is_terminal
    assert not StreamEvent("x").is_terminal
