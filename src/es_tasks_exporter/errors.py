"""
Errors raised while scraping an Elasticsearch endpoint.

Collectors catch ScrapeError as a whole; the subclasses only exist so
callers (and logs) can tell a dead cluster from a bad payload.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base for anything that makes a single pull fail."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class TransportError(ScrapeError):
    """The request couldn't be sent, or the connection dropped mid-body."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(url, f"failed to get from {url}: {cause}")
        self.cause = cause


class StatusError(ScrapeError):

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP request to {url} failed with code {status_code}")
        self.status_code = status_code


class DecodeError(ScrapeError):
    """Body wasn't JSON, or didn't match the shape we read from it."""

    def __init__(self, url: str, reason: str):
        super().__init__(url, f"failed to decode response from {url}: {reason}")
        self.reason = reason
