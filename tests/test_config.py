"""Tests for ExporterConfig validation."""

import pytest

from es_tasks_exporter.config import ExporterConfig


def test_defaults_are_valid():
    config = ExporterConfig().validate()
    assert config.es_uri == "http://localhost:9200"
    assert config.port == 9114
    assert config.namespace == "elasticsearch"


def test_https_uri_with_path_is_valid():
    assert ExporterConfig(es_uri="https://es.internal:9243/cluster").validate()


@pytest.mark.parametrize("overrides", [
    {"es_uri": ""},
    {"es_uri": "localhost:9200"},
    {"es_uri": "ftp://es:21"},
    {"es_timeout": 0},
    {"es_timeout": -1.5},
    {"port": 0},
    {"port": 70000},
    {"namespace": ""},
])
def test_invalid_settings_raise(overrides):
    with pytest.raises(ValueError):
        ExporterConfig(**overrides).validate()
