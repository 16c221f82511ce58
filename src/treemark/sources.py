#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/treemark/sources.py
"""Reading HTML sources and writing Markdown results.

These helpers sit outside the conversion core and are used by the
command-line entry point: a source is an ``http(s)`` URL, a file path, or
``-`` for standard input.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx

from treemark.constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_USER_AGENT
from treemark.exceptions import FetchError, OutputWriteError, ValidationError

logger = logging.getLogger(__name__)

STDIN_SOURCE = "-"


def is_url(source: str) -> bool:
    """Return True when ``source`` is an http or https URL."""
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def create_http_client(
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    user_agent: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the httpx client used to fetch HTML documents.

    Parameters
    ----------
    timeout : float, default 30.0
        Request timeout in seconds
    user_agent : str, optional
        User-Agent header; ``TREEMARK_USER_AGENT`` or the package default
        when not given
    transport : httpx.BaseTransport, optional
        Custom transport, e.g. ``httpx.MockTransport`` in tests

    Returns
    -------
    httpx.Client
        Client following redirects

    """
    effective_user_agent = user_agent or os.getenv("TREEMARK_USER_AGENT") or DEFAULT_USER_AGENT
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": effective_user_agent},
        transport=transport,
    )


def fetch_html(
    url: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    user_agent: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> bytes:
    """Fetch an HTML document over HTTP.

    Parameters
    ----------
    url : str
        http or https URL
    timeout : float, default 30.0
        Request timeout in seconds
    user_agent : str, optional
        User-Agent header
    transport : httpx.BaseTransport, optional
        Custom transport for the client

    Returns
    -------
    bytes
        Response body

    Raises
    ------
    ValidationError
        If ``url`` is not an http(s) URL
    FetchError
        If the request fails or the server answers with an error status

    """
    if not is_url(url):
        raise ValidationError(f"Not an http(s) URL: {url}", parameter_name="url", parameter_value=url)

    try:
        with create_http_client(timeout=timeout, user_agent=user_agent, transport=transport) as client:
            response = client.get(url)
            response.raise_for_status()
            content = response.content
    except httpx.HTTPStatusError as e:
        raise FetchError(
            f"HTTP {e.response.status_code} fetching {url}",
            url=url,
            status_code=e.response.status_code,
            original_error=e,
        ) from e
    except httpx.HTTPError as e:
        raise FetchError(f"HTTP request failed for {url}: {e}", url=url, original_error=e) from e

    logger.debug(f"Fetched {len(content)} bytes from {url}")
    return content


def read_source(source: str, timeout: float = DEFAULT_FETCH_TIMEOUT, **fetch_kwargs: Any) -> bytes:
    """Read HTML from a URL, a file path, or standard input.

    Raises
    ------
    FetchError
        If a URL cannot be fetched or a file cannot be read

    """
    if source == STDIN_SOURCE:
        return sys.stdin.buffer.read()
    if is_url(source):
        return fetch_html(source, timeout=timeout, **fetch_kwargs)

    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as e:
        raise FetchError(f"Cannot read {path}: {e.strerror or e}", url=str(path), original_error=e) from e


def write_markdown(markdown: str, output_path: str | Path) -> Path:
    """Write Markdown to ``output_path`` as UTF-8, creating parent directories.

    Raises
    ------
    OutputWriteError
        If the file cannot be written

    """
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(
            f"Cannot write {path}: {e.strerror or e}", output_path=str(path), original_error=e
        ) from e

    logger.debug(f"Wrote {len(markdown)} characters to {path}")
    return path
