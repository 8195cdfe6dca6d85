"""
Metric identities for the exporter.

A MetricDescriptor is fixed when a collector is built and is what the
registry sees at describe() time, before any scrape has happened. The
same descriptor later renders the value-carrying family in collect().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

GAUGE = "gauge"
COUNTER = "counter"

R = TypeVar("R")


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join non-empty parts with underscores, e.g. elasticsearch_tasks_up."""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    help_text: str
    kind: str = GAUGE

    def __post_init__(self):
        if self.kind not in (GAUGE, COUNTER):
            raise ValueError(f"unsupported metric kind: {self.kind}")
        if not self.name:
            raise ValueError("metric name must not be empty")

    def family(self, value: Optional[float] = None) -> Metric:
        """Build a metric family, empty when value is None (describe-only)."""
        family_cls = GaugeMetricFamily if self.kind == GAUGE else CounterMetricFamily
        if value is None:
            return family_cls(self.name, self.help_text)
        return family_cls(self.name, self.help_text, value=value)


@dataclass(frozen=True)
class ExtractedMetric(Generic[R]):
    """A descriptor plus the function that reads its value off a response."""

    descriptor: MetricDescriptor
    value: Callable[[R], float]
