"""
Fake Elasticsearch server for testing without a cluster.

    python -m es_tasks_exporter.mock.fake_es_server
    es-tasks-exporter --es-uri http://localhost:9200 probe

Serves GET /_tasks and POST /<index>/_search from a FakeCluster. Tests can
pin a route to a fixed status and body with set_response().
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Optional, Tuple, Union

from es_tasks_exporter.mock.generator import FakeCluster

TASKS = "tasks"
SEARCH = "search"


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes


def _route(method: str, path: str) -> Optional[str]:
    path = path.split("?", 1)[0]
    if method == "GET" and path.endswith("/_tasks"):
        return TASKS
    if method == "POST" and path.endswith("/_search"):
        return SEARCH
    return None


class FakeElasticsearchServer:

    def __init__(self, host: str = "127.0.0.1", port: int = 0, cluster: Optional[FakeCluster] = None):
        self.cluster = cluster or FakeCluster()
        self.requests: List[RecordedRequest] = []
        self._overrides: Dict[str, Tuple[int, bytes]] = {}
        self._lock = threading.Lock()
        self._httpd = ThreadingHTTPServer((host, port), self._handler_class())
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def set_response(self, route: str, status: int = 200, body: Union[bytes, str, dict] = b""):
        """Pin a route to a fixed response for every following request."""
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        with self._lock:
            self._overrides[route] = (status, body)

    def start(self) -> "FakeElasticsearchServer":
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self):
        self._httpd.shutdown()
        self._httpd.server_close()

    def __enter__(self) -> "FakeElasticsearchServer":
        return self.start()

    def __exit__(self, *exc):
        self.stop()

    def _respond(self, route: str) -> Tuple[int, bytes]:
        with self._lock:
            if route in self._overrides:
                return self._overrides[route]
            payload = self.cluster.tasks_payload() if route == TASKS else self.cluster.search_payload()
        return 200, json.dumps(payload).encode("utf-8")

    def _record(self, request: RecordedRequest):
        with self._lock:
            self.requests.append(request)

    def _handler_class(self):
        fake = self

        class _Handler(BaseHTTPRequestHandler):

            def _handle(self):
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                fake._record(RecordedRequest(
                    method=self.command,
                    path=self.path,
                    headers={k.lower(): v for k, v in self.headers.items()},
                    body=body,
                ))

                route = _route(self.command, self.path)
                if route is None:
                    status, payload = 404, b'{"error":"no handler found"}'
                else:
                    status, payload = fake._respond(route)

                self.send_response(status)
                self.send_header("Content-Type", "application/json; charset=UTF-8")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            do_GET = _handle
            do_POST = _handle

            def log_message(self, format, *args):
                pass  # Suppress request logging noise

        return _Handler


def run_fake_server(host: str = "127.0.0.1", port: int = 9200):
    server = FakeElasticsearchServer(host=host, port=port)
    print(f"Fake Elasticsearch running at {server.url}")
    print("Press Ctrl+C to stop.\n")
    server.start()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    server.stop()
    print("\nServer stopped.")


if __name__ == "__main__":
    run_fake_server()
