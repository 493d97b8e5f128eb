"""URL helpers and a simple file downloader."""

from __future__ import annotations

from urllib.parse import urlsplit

import requests


class Downloader:
    """Downloads content from URLs, optionally with a timeout in seconds."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout or None

    def download_from_url(self, url: str) -> bytes:
        """Return the body found at ``url``; raises ``ValueError`` for bad URLs."""
        if not is_valid_url(url):
            raise ValueError(f"{url} is not a valid URL")
        response = requests.get(url, timeout=self.timeout)
        return response.content


def download_from_url(url: str) -> bytes:
    """Download ``url`` with a default :class:`Downloader`."""
    return Downloader().download_from_url(url)


def is_valid_url(url: str) -> bool:
    """Return whether ``url`` is an absolute URL with a scheme and a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def trim_http_scheme(url: str) -> str:
    """Remove a leading ``https://`` or ``http://``."""
    if url.startswith("https://"):
        return url.removeprefix("https://")
    if url.startswith("http://"):
        return url.removeprefix("http://")
    return url