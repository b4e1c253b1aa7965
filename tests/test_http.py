"""Tests for create_async_client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx

from forum_markup.core.processing.options import DEFAULT_USER_AGENT, ProcessingOptions
from forum_markup.core.utils.http import create_async_client


class TestCreateAsyncClient:
    def test_calls_with_http2(self):
        with patch("forum_markup.core.utils.http.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value = MagicMock()
            create_async_client()
            kwargs = mock_cls.call_args[1]
            assert kwargs["http2"] is True

    def test_default_limits(self):
        with patch("forum_markup.core.utils.http.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value = MagicMock()
            create_async_client()
            kwargs = mock_cls.call_args[1]
            assert kwargs["timeout"] == httpx.Timeout(5.0)
            assert kwargs["follow_redirects"] is True
            assert kwargs["max_redirects"] == 3

    def test_headers(self):
        with patch("forum_markup.core.utils.http.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value = MagicMock()
            create_async_client()
            headers = mock_cls.call_args[1]["headers"]
            assert headers["User-Agent"] == DEFAULT_USER_AGENT
            assert headers["Accept-Encoding"] == "gzip, deflate"

    def test_options_applied(self):
        options = ProcessingOptions(request_timeout=1.5, max_redirects=0, user_agent="bot/1.0")
        with patch("forum_markup.core.utils.http.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value = MagicMock()
            create_async_client(options)
            kwargs = mock_cls.call_args[1]
            assert kwargs["timeout"] == httpx.Timeout(1.5)
            assert kwargs["max_redirects"] == 0
            assert kwargs["headers"]["User-Agent"] == "bot/1.0"

    def test_custom_kwargs_forwarded(self):
        with patch("forum_markup.core.utils.http.httpx.AsyncClient") as mock_cls:
            mock_cls.return_value = MagicMock()
            create_async_client(base_url="https://example.com")
            kwargs = mock_cls.call_args[1]
            assert kwargs["base_url"] == "https://example.com"
