"""Shared fixtures: a fake Elasticsearch on a background thread and a client for it."""

import socket

import httpx
import pytest

from es_tasks_exporter.collector.http_client import ScrapeClient
from es_tasks_exporter.mock.fake_es_server import FakeElasticsearchServer
from es_tasks_exporter.mock.generator import FakeCluster


@pytest.fixture
def fake_es():
    server = FakeElasticsearchServer(cluster=FakeCluster(seed=7))
    with server:
        yield server


@pytest.fixture
def http_client():
    client = httpx.Client(timeout=5.0)
    yield client
    client.close()


@pytest.fixture
def scrape_client(http_client):
    return ScrapeClient(http_client)


@pytest.fixture
def free_port():
    """A local port nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def dead_url(free_port):
    return f"http://127.0.0.1:{free_port}"
