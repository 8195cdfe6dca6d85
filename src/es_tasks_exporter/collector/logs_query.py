"""
Collector for network discovery errors found in the cluster's own logs.

Runs a fixed search against the log indices for "send message failed" and
NodeNotConnectedException entries from the last five minutes. Entries
mentioning 0.0.0.0 are excluded.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union

from es_tasks_exporter.collector.base import DEFAULT_NAMESPACE, ElasticsearchCollector
from es_tasks_exporter.collector.http_client import (
    JSON_HEADERS,
    ScrapeClient,
    ScrapeRequest,
    join_url,
)
from es_tasks_exporter.collector.responses import ErrorQueryResponse
from es_tasks_exporter.metrics import GAUGE, ExtractedMetric, MetricDescriptor, build_fq_name

SUBSYSTEM = "queries"

SEARCH_PATH = "/elasticsearch-*/_search"

NETWORK_DISCOVERY_ERROR_QUERY: Mapping[str, Any] = {
    "query": {
        "bool": {
            "must": [
                {"match_all": {}},
                {
                    "bool": {
                        "should": [
                            {"match_phrase": {"message": "send message failed"}},
                            {"match_phrase": {"message": "NodeNotConnectedException"}},
                        ]
                    }
                },
                {
                    "range": {
                        "@timestamp": {
                            "gt": "now-5m",
                            "format": "epoch_millis",
                        }
                    }
                },
            ],
            "must_not": [
                {"match_phrase": {"message": {"query": "0.0.0.0"}}},
            ],
        }
    }
}


def network_discovery_errors(response: ErrorQueryResponse) -> float:
    return float(response.total)


class ErrorQueryCollector(ElasticsearchCollector[ErrorQueryResponse]):

    subsystem = SUBSYSTEM

    def __init__(
        self,
        client: ScrapeClient,
        base_url: str,
        namespace: str = DEFAULT_NAMESPACE,
        query: Optional[Mapping[str, Any]] = None,
    ):
        metrics = [
            ExtractedMetric(
                MetricDescriptor(
                    build_fq_name(namespace, SUBSYSTEM, "total_network_discovery_error"),
                    "Number of network discovery errors logged in the last 5 minutes",
                    GAUGE,
                ),
                network_discovery_errors,
            ),
        ]
        super().__init__(client, base_url, metrics, namespace=namespace)
        self._url = join_url(base_url, SEARCH_PATH)
        # Serialized once; the query never changes between pulls
        query = query if query is not None else NETWORK_DISCOVERY_ERROR_QUERY
        self._body = json.dumps(query).encode("utf-8")

    def build_request(self) -> ScrapeRequest:
        return ScrapeRequest(method="POST", url=self._url, body=self._body, headers=JSON_HEADERS)

    def decode(self, body: Union[bytes, str]) -> ErrorQueryResponse:
        return ErrorQueryResponse.from_json(body)
