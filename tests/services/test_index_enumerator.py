import threading
from unittest.mock import Mock

import pytest

from docsync.exceptions import EnumerationCancelledError, EnumerationError, IndexTransportError
from docsync.services.index_enumerator import IndexEnumerator


def _pages(*pages):
    def fetch(page_number, page_size):
        index = page_number - 1
        return list(pages[index]) if index < len(pages) else []
    return Mock(side_effect=fetch)


def test_collects_union_until_empty_page():
    fetch = _pages(["x", "y"], ["z"], [])
    result = IndexEnumerator(fetch).enumerate_all(page_size=2)
    assert result == frozenset({"x", "y", "z"})
    assert [c.args for c in fetch.call_args_list] == [(1, 2), (2, 2), (3, 2)]


def test_empty_first_page_returns_empty_set():
    fetch = _pages([])
    assert IndexEnumerator(fetch).enumerate_all(page_size=250) == frozenset()
    fetch.assert_called_once_with(1, 250)


def test_short_page_does_not_end_enumeration():
    fetch = _pages(["a"], ["b", "c"], [])
    assert IndexEnumerator(fetch).enumerate_all(page_size=2) == {"a", "b", "c"}
    assert fetch.call_count == 3


def test_duplicates_across_pages_collapse():
    fetch = _pages(["a", "b"], ["b", "c"], [])
    assert IndexEnumerator(fetch).enumerate_all(page_size=2) == {"a", "b", "c"}


def test_transport_error_becomes_enumeration_error_with_page_number():
    cause = IndexTransportError("docs", RuntimeError("connection reset"))
    fetch = Mock(side_effect=[["a"], cause])
    with pytest.raises(EnumerationError) as excinfo:
        IndexEnumerator(fetch).enumerate_all(page_size=1)
    assert excinfo.value.page_number == 2
    assert excinfo.value.__cause__ is cause


def test_unexpected_errors_propagate_unchanged():
    fetch = Mock(side_effect=KeyError("boom"))
    with pytest.raises(KeyError):
        IndexEnumerator(fetch).enumerate_all(page_size=1)


def test_stop_event_checked_before_each_page():
    stop = threading.Event()

    def fetch(page_number, page_size):
        stop.set()
        return ["a"]

    with pytest.raises(EnumerationCancelledError) as excinfo:
        IndexEnumerator(fetch, stop_event=stop).enumerate_all(page_size=1)
    assert excinfo.value.page_number == 2
    assert isinstance(excinfo.value, EnumerationError)


def test_already_stopped_fetches_nothing():
    stop = threading.Event()
    stop.set()
    fetch = Mock(return_value=["a"])
    with pytest.raises(EnumerationCancelledError):
        IndexEnumerator(fetch, stop_event=stop).enumerate_all(page_size=1)
    fetch.assert_not_called()


@pytest.mark.parametrize("page_size", [0, -5])
def test_page_size_must_be_positive(page_size):
    with pytest.raises(ValueError):
        IndexEnumerator(Mock()).enumerate_all(page_size=page_size)


def test_stop_event_must_be_an_event():
    fetch = Mock(return_value=[])
    with pytest.raises(AttributeError):
        IndexEnumerator(fetch, stop_event=object()).enumerate_all(page_size=1)
    fetch.assert_not_called()
