"""
Collector for the cluster task list (GET /_tasks).

Reports how many tasks are in flight across all nodes and how many of
those have been running for more than a second.
"""

from __future__ import annotations

from typing import Union

from es_tasks_exporter.collector.base import DEFAULT_NAMESPACE, ElasticsearchCollector
from es_tasks_exporter.collector.http_client import ScrapeClient, ScrapeRequest, join_url
from es_tasks_exporter.collector.responses import TasksResponse
from es_tasks_exporter.metrics import GAUGE, ExtractedMetric, MetricDescriptor, build_fq_name

SUBSYSTEM = "tasks"

# Tasks running longer than this count as slow
SLOW_TASK_THRESHOLD_MS = 1000


def total_tasks(tasks: TasksResponse) -> float:
    return float(sum(len(node.tasks) for node in tasks.nodes.values()))


def total_tasks_over_1s(tasks: TasksResponse) -> float:
    count = 0
    for node in tasks.nodes.values():
        for task in node.tasks.values():
            if task.running_time_ms > SLOW_TASK_THRESHOLD_MS:
                count += 1
    return float(count)


class TasksCollector(ElasticsearchCollector[TasksResponse]):

    subsystem = SUBSYSTEM

    def __init__(self, client: ScrapeClient, base_url: str, namespace: str = DEFAULT_NAMESPACE):
        metrics = [
            ExtractedMetric(
                MetricDescriptor(
                    build_fq_name(namespace, SUBSYSTEM, "total"),
                    "Number of tasks",
                    GAUGE,
                ),
                total_tasks,
            ),
            ExtractedMetric(
                MetricDescriptor(
                    build_fq_name(namespace, SUBSYSTEM, "total_gt_1s"),
                    "Number of tasks running longer than 1 second",
                    GAUGE,
                ),
                total_tasks_over_1s,
            ),
        ]
        super().__init__(client, base_url, metrics, namespace=namespace)
        self._url = join_url(base_url, "/_tasks")

    def build_request(self) -> ScrapeRequest:
        return ScrapeRequest(method="GET", url=self._url)

    def decode(self, body: Union[bytes, str]) -> TasksResponse:
        return TasksResponse.from_json(body)
