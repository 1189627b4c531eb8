from unittest.mock import Mock

import pytest
import requests

from docsync.exceptions import HttpFetchError
from docsync.services.http_service import HttpService


def _client(status=200, text="ok", headers=None, url="http://example.com/"):
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = status
    mock_http_client.return_value.text = text
    mock_http_client.return_value.headers = headers or {}
    mock_http_client.return_value.url = url
    return mock_http_client


def test_fetch_success_follows_redirects_with_user_agent():
    client = _client(text="hello world")
    http = HttpService(user_agent="TestAgent", http_client=client, timeout=7)
    response = http.fetch("http://example.com/")
    assert response.status_code == 200
    assert response.text == "hello world"
    client.assert_called_once_with(
        "http://example.com/", headers={"User-Agent": "TestAgent"}, timeout=7, allow_redirects=True
    )


def test_fetch_reports_final_url_after_redirect():
    client = _client(url="http://example.com/new")
    response = HttpService(user_agent="ua", http_client=client).fetch("http://example.com/old")
    assert response.url == "http://example.com/new"


def test_fetch_falls_back_to_requested_url():
    client = _client()
    client.return_value.url = None
    response = HttpService(user_agent="ua", http_client=client).fetch("http://example.com/a")
    assert response.url == "http://example.com/a"


def test_fetch_content_type_from_headers():
    client = _client(headers={"Content-Type": "text/html; charset=utf-8"})
    response = HttpService(user_agent="ua", http_client=client).fetch("http://example.com/")
    assert response.content_type == "text/html; charset=utf-8"


def test_fetch_wraps_requests_exception():
    client = Mock(side_effect=requests.exceptions.Timeout("timed out"))
    http = HttpService(user_agent="ua", http_client=client)
    with pytest.raises(HttpFetchError) as excinfo:
        http.fetch("http://example.com")
    assert "http://example.com" in str(excinfo.value)
    assert isinstance(excinfo.value.original, requests.exceptions.Timeout)
