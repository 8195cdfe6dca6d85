"""
One HTTP round trip against the cluster, with the response always released.

The httpx.Client is owned by whoever builds the exporter and shared across
collectors, so timeouts and TLS settings live in one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

import httpx

from es_tasks_exporter.errors import StatusError, TransportError

log = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def join_url(base_url: str, path: str) -> str:
    """Append path to base_url, keeping any path prefix the base already has."""
    return base_url.rstrip("/") + "/" + path.lstrip("/")


@dataclass(frozen=True)
class ScrapeRequest:
    method: str
    url: str
    body: Optional[bytes] = None
    headers: Mapping[str, str] = field(default_factory=dict)


class ScrapeClient:

    def __init__(self, client: httpx.Client):
        self._client = client

    def fetch(self, request: ScrapeRequest) -> bytes:
        """Send the request and return the body of a 200 response.

        Raises TransportError when the request can't complete and
        StatusError for any other status code.
        """
        try:
            http_request = self._client.build_request(
                request.method,
                request.url,
                content=request.body,
                headers=dict(request.headers),
            )
            response = self._client.send(http_request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(request.url, e) from e

        try:
            if response.status_code != httpx.codes.OK:
                raise StatusError(request.url, response.status_code)
            try:
                return response.read()
            except httpx.HTTPError as e:
                raise TransportError(request.url, e) from e
        finally:
            self._release(response, request.url)

    @staticmethod
    def _release(response: httpx.Response, url: str):
        # The body may already be fully read; a close failure doesn't undo that.
        try:
            response.close()
        except httpx.HTTPError as e:
            log.warning("failed to close response from %s: %s", url, e)
