"""Shared httpx client configuration for remote page fetches."""

from __future__ import annotations

from typing import Any

import httpx

from forum_markup.core.processing.options import ProcessingOptions


def create_async_client(options: ProcessingOptions | None = None, **kwargs: Any) -> httpx.AsyncClient:
    """Create a pre-configured httpx.AsyncClient with HTTP/2 support.

    Redirects are followed up to ``options.max_redirects`` hops and every
    request carries the fixed user agent.  httpx decodes gzip and deflate
    bodies on its own.

    The caller is responsible for using this within an async context manager
    or calling ``aclose()`` when done.
    """
    options = options or ProcessingOptions()
    return httpx.AsyncClient(
        http2=True,
        timeout=httpx.Timeout(options.request_timeout),
        follow_redirects=True,
        max_redirects=options.max_redirects,
        headers={
            "User-Agent": options.user_agent,
            "Accept-Encoding": "gzip, deflate",
        },
        **kwargs,
    )
