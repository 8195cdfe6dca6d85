"""Tests for decoding /_tasks and _search bodies."""

import pytest

from es_tasks_exporter.collector.responses import (
    ErrorQueryResponse,
    TasksResponse,
    load_json,
)

SAMPLE_TASKS = b"""{
  "nodes": {
    "oTUltX4IQMOUUVeiohTt8A": {
      "name": "H5dfFeA",
      "transport_address": "127.0.0.1:9300",
      "host": "127.0.0.1",
      "ip": "127.0.0.1:9300",
      "roles": ["data", "ingest", "master"],
      "attributes": {"ml.enabled": "true"},
      "tasks": {
        "oTUltX4IQMOUUVeiohTt8A:124": {
          "node": "oTUltX4IQMOUUVeiohTt8A",
          "id": 124,
          "type": "direct",
          "action": "cluster:monitor/tasks/lists[n]",
          "start_time_in_millis": 1458585884904,
          "running_time_in_nanos": 47402,
          "cancellable": false,
          "parent_task_id": "oTUltX4IQMOUUVeiohTt8A:123",
          "headers": {"X-Opaque-Id": "abc"}
        },
        "oTUltX4IQMOUUVeiohTt8A:123": {
          "node": "oTUltX4IQMOUUVeiohTt8A",
          "id": 123,
          "type": "transport",
          "action": "cluster:monitor/tasks/lists",
          "start_time_in_millis": 1458585884904,
          "running_time_in_nanos": 1236042000,
          "cancellable": false,
          "headers": {}
        }
      }
    }
  }
}"""


def test_decode_tasks_response():
    resp = TasksResponse.from_json(SAMPLE_TASKS)
    node = resp.nodes["oTUltX4IQMOUUVeiohTt8A"]

    assert node.name == "H5dfFeA"
    assert node.roles == ["data", "ingest", "master"]
    assert len(node.tasks) == 2

    task = node.tasks["oTUltX4IQMOUUVeiohTt8A:124"]
    assert task.id == 124
    assert task.action == "cluster:monitor/tasks/lists[n]"
    assert task.parent_task_id == "oTUltX4IQMOUUVeiohTt8A:123"
    assert task.headers == {"X-Opaque-Id": "abc"}
    assert task.cancellable is False


def test_running_time_ms_truncates():
    resp = TasksResponse.from_json(SAMPLE_TASKS)
    task = resp.nodes["oTUltX4IQMOUUVeiohTt8A"].tasks["oTUltX4IQMOUUVeiohTt8A:123"]
    assert task.running_time_ms == 1236


def test_missing_fields_default_to_zero_values():
    resp = TasksResponse.from_json(b'{"nodes": {"n1": {"tasks": {"t1": {}}}}}')
    task = resp.nodes["n1"].tasks["t1"]

    assert resp.nodes["n1"].name == ""
    assert resp.nodes["n1"].roles == []
    assert task.id == 0
    assert task.running_time_in_nanos == 0
    assert task.headers == {}


def test_nulls_decode_like_missing_fields():
    resp = TasksResponse.from_json(b'{"nodes": {"n1": {"name": null, "tasks": null}}}')
    assert resp.nodes["n1"].name == ""
    assert resp.nodes["n1"].tasks == {}


def test_empty_and_null_documents():
    assert TasksResponse.from_json(b"{}").nodes == {}
    assert TasksResponse.from_json(b'{"nodes": {}}').nodes == {}
    assert TasksResponse.from_json(b"null").nodes == {}


def test_unknown_fields_are_ignored():
    resp = TasksResponse.from_json(b'{"nodes": {}, "node_failures": [], "extra": 1}')
    assert resp.nodes == {}


@pytest.mark.parametrize("body", [
    b"not json",
    b'{"nodes": ',
    b"[]",
    b'{"nodes": []}',
    b'{"nodes": {"n1": {"tasks": {"t1": {"running_time_in_nanos": "slow"}}}}}',
    b'{"nodes": {"n1": {"tasks": {"t1": {"id": 1.5}}}}}',
    b'{"nodes": {"n1": {"tasks": {"t1": {"id": true}}}}}',
    b'{"nodes": {"n1": {"roles": "data"}}}',
    b"\x80\x81",
])
def test_schema_mismatch_raises_value_error(body):
    with pytest.raises(ValueError):
        TasksResponse.from_json(body)


def test_decode_error_query_response():
    assert ErrorQueryResponse.from_json(b'{"hits": {"total": 7}}').total == 7


def test_decode_error_query_total_object():
    body = b'{"hits": {"total": {"value": 12, "relation": "eq"}, "hits": []}}'
    assert ErrorQueryResponse.from_json(body).total == 12


def test_error_query_missing_hits_is_zero():
    assert ErrorQueryResponse.from_json(b"{}").total == 0
    assert ErrorQueryResponse.from_json(b'{"hits": {}}').total == 0


@pytest.mark.parametrize("body", [b'{"hits": {"total": "7"}}', b'{"hits": 3}', b""])
def test_error_query_mismatch_raises_value_error(body):
    with pytest.raises(ValueError):
        ErrorQueryResponse.from_json(body)


def test_deeply_nested_json_raises_value_error():
    body = b"[" * 100_000 + b"]" * 100_000
    with pytest.raises(ValueError, match="nested too deeply"):
        TasksResponse.from_json(body)


def test_load_json_accepts_str():
    assert load_json('{"a": 1}') == {"a": 1}
