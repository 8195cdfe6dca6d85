"""
Synthetic Elasticsearch payloads.

Produces fake but plausible /_tasks and _search bodies so the exporter can
be developed without a cluster. Most tasks finish in well under a second;
roughly one in ten is a slow search or bulk that runs for several.
"""

import random
from typing import Any, Dict, List

ACTIONS = [
    "indices:data/read/search",
    "indices:data/write/bulk",
    "indices:data/write/bulk[s]",
    "cluster:monitor/nodes/stats",
    "cluster:monitor/tasks/lists",
]

ROLES = ["data", "ingest", "master"]


class FakeCluster:

    def __init__(self, seed: int = 42, node_count: int = 3, max_tasks_per_node: int = 8):
        self._rng = random.Random(seed)
        self._node_count = node_count
        self._max_tasks = max_tasks_per_node
        self._next_task_id = 1
        self.start_time_ms = 1_700_000_000_000

    def _task(self, node_id: str) -> Dict[str, Any]:
        task_id = self._next_task_id
        self._next_task_id += 1

        if self._rng.random() > 0.9:
            running_ms = self._rng.randint(1_001, 8_000)
        else:
            running_ms = self._rng.randint(1, 900)

        return {
            "node": node_id,
            "id": task_id,
            "type": "transport",
            "action": self._rng.choice(ACTIONS),
            "start_time_in_millis": self.start_time_ms + task_id,
            "running_time_in_nanos": running_ms * 1_000_000 + self._rng.randint(0, 999_999),
            "cancellable": self._rng.random() > 0.5,
            "headers": {},
        }

    def tasks_payload(self) -> Dict[str, Any]:
        """One /_tasks body, with a fresh set of tasks per call."""
        nodes: Dict[str, Any] = {}
        for i in range(self._node_count):
            node_id = f"node-{i}"
            tasks: List[Dict[str, Any]] = [
                self._task(node_id) for _ in range(self._rng.randint(0, self._max_tasks))
            ]
            nodes[node_id] = {
                "name": f"es-{i}",
                "transport_address": f"10.0.0.{i + 1}:9300",
                "host": f"10.0.0.{i + 1}",
                "ip": f"10.0.0.{i + 1}:9300",
                "roles": list(ROLES),
                "tasks": {f"{node_id}:{t['id']}": t for t in tasks},
            }
        return {"nodes": nodes}

    def search_payload(self) -> Dict[str, Any]:
        # Discovery errors are rare; mostly zero with the odd burst
        total = self._rng.randint(1, 25) if self._rng.random() > 0.8 else 0
        return {
            "took": self._rng.randint(1, 40),
            "timed_out": False,
            "hits": {"total": total, "max_score": None, "hits": []},
        }
