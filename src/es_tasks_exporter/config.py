"""Runtime settings for the exporter, filled in from CLI flags."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from es_tasks_exporter.collector.base import DEFAULT_NAMESPACE

DEFAULT_ES_URI = "http://localhost:9200"
DEFAULT_PORT = 9114


@dataclass(frozen=True)
class ExporterConfig:
    es_uri: str = DEFAULT_ES_URI
    es_timeout: float = 5.0
    es_insecure: bool = False
    listen_address: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    namespace: str = DEFAULT_NAMESPACE
    log_level: str = "INFO"

    def validate(self) -> "ExporterConfig":
        """Raise ValueError on settings that would only fail later, at scrape time."""
        parts = urlsplit(self.es_uri)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"es_uri must be an http(s) URL, got {self.es_uri!r}")
        if self.es_timeout <= 0:
            raise ValueError(f"es_timeout must be positive, got {self.es_timeout}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if not self.namespace:
            raise ValueError("namespace must not be empty")
        return self
