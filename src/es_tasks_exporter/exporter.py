"""
Wiring: one shared HTTP client, both collectors, one registry, one server.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from prometheus_client import CollectorRegistry, start_http_server

from es_tasks_exporter.collector.base import ElasticsearchCollector
from es_tasks_exporter.collector.http_client import ScrapeClient
from es_tasks_exporter.collector.logs_query import ErrorQueryCollector
from es_tasks_exporter.collector.tasks import TasksCollector
from es_tasks_exporter.config import ExporterConfig

log = logging.getLogger(__name__)


@dataclass
class ProbeSample:
    collector: str
    name: str
    kind: str
    value: float


def build_http_client(config: ExporterConfig) -> httpx.Client:
    return httpx.Client(timeout=config.es_timeout, verify=not config.es_insecure)


def build_collectors(client: httpx.Client, config: ExporterConfig) -> List[ElasticsearchCollector]:
    """Both collectors share the same client (and so its pool, timeout and TLS setup)."""
    scrape_client = ScrapeClient(client)
    return [
        TasksCollector(scrape_client, config.es_uri, namespace=config.namespace),
        ErrorQueryCollector(scrape_client, config.es_uri, namespace=config.namespace),
    ]


def build_registry(collectors: List[ElasticsearchCollector]) -> CollectorRegistry:
    # register() calls describe(), so a name clash fails here, not mid-scrape
    registry = CollectorRegistry(auto_describe=True)
    for collector in collectors:
        registry.register(collector)
    return registry


def probe(collectors: List[ElasticsearchCollector]) -> List[ProbeSample]:
    """Run one pull on every collector and flatten what came back."""
    samples = []
    for collector in collectors:
        for family in collector.collect():
            for sample in family.samples:
                samples.append(ProbeSample(
                    collector=collector.subsystem,
                    name=sample.name,
                    kind=family.type,
                    value=sample.value,
                ))
    return samples


def up_by_collector(samples: List[ProbeSample]) -> Dict[str, Optional[float]]:
    result: Dict[str, Optional[float]] = {}
    for sample in samples:
        result.setdefault(sample.collector, None)
        if sample.name.endswith("_up"):
            result[sample.collector] = sample.value
    return result


def serve(config: ExporterConfig, poll_interval: float = 1.0):
    """Serve /metrics until interrupted."""
    client = build_http_client(config)
    try:
        collectors = build_collectors(client, config)
        registry = build_registry(collectors)
        server, _thread = start_http_server(config.port, addr=config.listen_address, registry=registry)
        log.info(
            "Serving metrics on %s:%d for %s", config.listen_address, config.port, config.es_uri
        )
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            pass
        finally:
            server.shutdown()
            server.server_close()
            log.info("Exporter stopped")
    finally:
        client.close()
