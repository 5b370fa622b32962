"""Tests for page fetching."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from referent.errors import FetchTimeoutError, NetworkError, UpstreamError, ValidationError
from referent.sources.web import fetch_page, parse_url

HTML = "<html><body><article><h1>X</h1><p>Hello world. This is a test.</p></article></body></html>"


def _patched_client(mock_client_class: MagicMock) -> MagicMock:
    client = MagicMock()
    mock_client_class.return_value.__enter__.return_value = client
    return client


def _response(status: int, text: str = "") -> httpx.Response:
    request = httpx.Request("GET", "https://example.com/a")
    return httpx.Response(status, text=text, request=request)


class TestFetchPage:
    """Tests for fetch_page."""

    @patch("referent.sources.web.httpx.Client")
    def test_success(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.return_value = _response(200, HTML)

        page = fetch_page("https://example.com/a", timeout=5)

        assert page.status_code == 200
        assert page.html == HTML
        assert mock_client_class.call_args.kwargs["timeout"] == 5

    @patch("referent.sources.web.httpx.Client")
    def test_error_status(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.return_value = _response(404)

        with pytest.raises(UpstreamError) as exc_info:
            fetch_page("https://example.com/a")

        assert exc_info.value.status_code == 404
        assert "Failed to fetch URL" in exc_info.value.message

    @patch("referent.sources.web.httpx.Client")
    def test_timeout(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(FetchTimeoutError) as exc_info:
            fetch_page("https://example.com/a", timeout=30)

        assert exc_info.value.status_code == 504
        assert exc_info.value.category == "timeout"

    @patch("referent.sources.web.httpx.Client")
    def test_network_error(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.side_effect = httpx.ConnectError("refused")

        with pytest.raises(NetworkError) as exc_info:
            fetch_page("https://example.com/a")

        assert exc_info.value.category == "network"

    @patch("referent.sources.web.httpx.Client")
    def test_invalid_url(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.side_effect = httpx.InvalidURL("bad")

        with pytest.raises(ValidationError):
            fetch_page("not a url")

    @patch("referent.sources.web.httpx.Client")
    def test_missing_scheme(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.side_effect = httpx.UnsupportedProtocol("missing protocol")

        with pytest.raises(ValidationError):
            fetch_page("example.com/article")


class TestParseUrl:
    """Tests for parse_url."""

    @patch("referent.sources.web.httpx.Client")
    def test_fetch_and_extract(self, mock_client_class: MagicMock) -> None:
        client = _patched_client(mock_client_class)
        client.get.return_value = _response(200, HTML)

        article = parse_url("https://example.com/a")

        assert article.title == "X"
        assert article.body == "Hello world. This is a test."
