"""
Base collector shared by every Elasticsearch endpoint we scrape.

A collector plugs into prometheus_client's custom-collector protocol:
describe() lists every metric it can ever emit, collect() does one
fetch/decode/extract cycle per registry pull. Subclasses only say which
request to send, how to decode the body and which values to extract;
the bookkeeping (up, total_scrapes, json_parse_failures) lives here so
each endpoint is observable on its own even when the cluster is down.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Generic, List, Sequence, TypeVar, Union

from prometheus_client import Counter, Gauge
from prometheus_client.core import Metric
from prometheus_client.registry import Collector

from es_tasks_exporter.collector.http_client import ScrapeClient, ScrapeRequest
from es_tasks_exporter.errors import DecodeError, ScrapeError
from es_tasks_exporter.metrics import (
    COUNTER,
    GAUGE,
    ExtractedMetric,
    MetricDescriptor,
    build_fq_name,
)

log = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "elasticsearch"

R = TypeVar("R")


class ElasticsearchCollector(Collector, Generic[R]):
    """Fetch, decode, extract and emit, with per-collector bookkeeping."""

    subsystem: str = ""

    def __init__(
        self,
        client: ScrapeClient,
        base_url: str,
        metrics: Sequence[ExtractedMetric[R]],
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self._client = client
        self._base_url = base_url
        self._namespace = namespace
        self._metrics = tuple(metrics)

        self._up_desc = MetricDescriptor(
            self.fq_name("up"),
            f"Was the last scrape of the Elasticsearch {self.subsystem} endpoint successful.",
            GAUGE,
        )
        self._total_scrapes_desc = MetricDescriptor(
            self.fq_name("total_scrapes"),
            f"Current total Elasticsearch {self.subsystem} scrapes.",
            COUNTER,
        )
        self._json_parse_failures_desc = MetricDescriptor(
            self.fq_name("json_parse_failures"),
            "Number of errors while parsing JSON.",
            COUNTER,
        )

        # Unregistered metric objects: we emit them ourselves, and they
        # carry their own locks so overlapping pulls can't lose increments.
        self._up = Gauge(self._up_desc.name, self._up_desc.help_text, registry=None)
        self._total_scrapes = Counter(
            self._total_scrapes_desc.name, self._total_scrapes_desc.help_text, registry=None
        )
        self._json_parse_failures = Counter(
            self._json_parse_failures_desc.name,
            self._json_parse_failures_desc.help_text,
            registry=None,
        )

    def fq_name(self, name: str) -> str:
        return build_fq_name(self._namespace, self.subsystem, name)

    @property
    def descriptors(self) -> List[MetricDescriptor]:
        """Extraction descriptors first, bookkeeping last (emission order)."""
        return [metric.descriptor for metric in self._metrics] + [
            self._up_desc,
            self._total_scrapes_desc,
            self._json_parse_failures_desc,
        ]

    @abstractmethod
    def build_request(self) -> ScrapeRequest:
        """The single upstream request issued per pull."""
        ...

    @abstractmethod
    def decode(self, body: Union[bytes, str]) -> R:
        """Turn a response body into a typed response; raise ValueError if it doesn't fit."""
        ...

    def describe(self) -> List[Metric]:
        return [descriptor.family() for descriptor in self.descriptors]

    def collect(self) -> List[Metric]:
        families: List[Metric] = []
        self._total_scrapes.inc()
        try:
            families.extend(self._scrape())
        finally:
            families.extend(self._up.collect())
            families.extend(self._total_scrapes.collect())
            families.extend(self._json_parse_failures.collect())
        return families

    def fetch_and_decode(self) -> R:
        request = self.build_request()
        body = self._client.fetch(request)
        try:
            return self.decode(body)
        except ValueError as e:
            self._json_parse_failures.inc()
            raise DecodeError(request.url, str(e)) from e

    def _scrape(self) -> List[Metric]:
        try:
            response = self.fetch_and_decode()
        except ScrapeError as e:
            self._up.set(0)
            log.warning(
                "failed to fetch and decode %s: %s", self.subsystem, e,
                extra={"collector": self.subsystem, "url": e.url},
            )
            return []

        self._up.set(1)

        families = []
        for metric in self._metrics:
            try:
                value = float(metric.value(response))
            except Exception:
                log.warning(
                    "failed to extract %s", metric.descriptor.name,
                    exc_info=True, extra={"collector": self.subsystem},
                )
                continue
            families.append(metric.descriptor.family(value))
        return families
