"""
Typed views of the two Elasticsearch payloads the collectors read.

Decoding is lenient about shape (unknown keys ignored, missing keys and
nulls become zero values) but strict about type: a string where a number
belongs raises ValueError, which the collector reports as a parse failure.
Only the fields we actually consume are guaranteed to be meaningful.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union


def load_json(body: Union[bytes, str]) -> Any:
    """Parse raw JSON, raising ValueError on malformed input."""
    try:
        return json.loads(body)
    except UnicodeDecodeError as e:
        raise ValueError(f"body is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"malformed JSON: {e}") from e
    except RecursionError as e:
        raise ValueError(f"JSON nested too deeply: {e}") from e


def _as_object(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected object, got {type(value).__name__}")
    return value


def _get_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected string, got {type(value).__name__}")
    return value


def _get_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass, but true/false is never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key}: expected integer, got {type(value).__name__}")
    return value


def _get_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected boolean, got {type(value).__name__}")
    return value


def _get_str_list(data: Mapping[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key}: expected list of strings")
    return list(value)


@dataclass
class Task:
    node: str = ""
    id: int = 0
    type: str = ""
    action: str = ""
    start_time_in_millis: int = 0
    running_time_in_nanos: int = 0
    cancellable: bool = False
    parent_task_id: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def running_time_ms(self) -> int:
        return self.running_time_in_nanos // 1_000_000

    @classmethod
    def from_dict(cls, data: Any) -> "Task":
        data = _as_object(data, "task")
        headers = _as_object(data.get("headers"), "headers")
        if not all(isinstance(v, str) for v in headers.values()):
            raise ValueError("headers: expected string values")
        return cls(
            node=_get_str(data, "node"),
            id=_get_int(data, "id"),
            type=_get_str(data, "type"),
            action=_get_str(data, "action"),
            start_time_in_millis=_get_int(data, "start_time_in_millis"),
            running_time_in_nanos=_get_int(data, "running_time_in_nanos"),
            cancellable=_get_bool(data, "cancellable"),
            parent_task_id=_get_str(data, "parent_task_id"),
            headers=dict(headers),
        )


@dataclass
class Node:
    name: str = ""
    transport_address: str = ""
    host: str = ""
    ip: str = ""
    roles: List[str] = field(default_factory=list)
    tasks: Dict[str, Task] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Node":
        data = _as_object(data, "node")
        tasks = _as_object(data.get("tasks"), "tasks")
        return cls(
            name=_get_str(data, "name"),
            transport_address=_get_str(data, "transport_address"),
            host=_get_str(data, "host"),
            ip=_get_str(data, "ip"),
            roles=_get_str_list(data, "roles"),
            tasks={task_id: Task.from_dict(task) for task_id, task in tasks.items()},
        )


@dataclass
class TasksResponse:
    """Body of GET /_tasks, keyed by node id."""

    nodes: Dict[str, Node] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "TasksResponse":
        data = _as_object(data, "response")
        nodes = _as_object(data.get("nodes"), "nodes")
        return cls(nodes={node_id: Node.from_dict(node) for node_id, node in nodes.items()})

    @classmethod
    def from_json(cls, body: Union[bytes, str]) -> "TasksResponse":
        return cls.from_dict(load_json(body))


@dataclass
class ErrorQueryResponse:
    """The part of a _search response we care about: the hit count."""

    total: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "ErrorQueryResponse":
        data = _as_object(data, "response")
        hits = _as_object(data.get("hits"), "hits")
        total = hits.get("total")
        # 7.x+ reports {"value": n, "relation": "eq"} instead of a bare int
        if isinstance(total, dict):
            return cls(total=_get_int(total, "value"))
        return cls(total=_get_int(hits, "total"))

    @classmethod
    def from_json(cls, body: Union[bytes, str]) -> "ErrorQueryResponse":
        return cls.from_dict(load_json(body))
