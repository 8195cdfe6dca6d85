"""Prometheus exporter for Elasticsearch task backlog and discovery errors."""

__version__ = "0.1.0"
