"""
Shared fixtures for the test suite.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from cm_mcp.client import ClouderaManagerClient, TransportOptions, set_client
from cm_mcp.config import Config

BASE_URL = "https://cm.example.com:7183"

CONFIG = Config(base_url=BASE_URL, username="admin", password="s3cret")


# ---------------------------------------------------------------------------
# Fake Cloudera Manager
# ---------------------------------------------------------------------------

class FakeCM:
    """Routes httpx requests to canned responses and records every request.

    Routes are keyed by (method, decoded path). Unrouted requests get a 404 so
    a test never silently talks to a real server.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.set_version('"v54"')

    def set_version(self, body: str, status: int = 200) -> None:
        self.routes[("GET", "/api/version")] = httpx.Response(status, text=body)

    def route(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
    ) -> None:
        if text is not None:
            self.routes[(method, path)] = httpx.Response(status, text=text)
        else:
            self.routes[(method, path)] = httpx.Response(status, json=json_body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    # -- helpers for assertions --------------------------------------------

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    def api_calls(self) -> list[httpx.Request]:
        """Requests other than version discovery."""
        return [r for r in self.requests if r.url.path != "/api/version"]

    def last_json_body(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fake_cm() -> FakeCM:
    return FakeCM()


def make_client(fake: FakeCM, cfg: Config = CONFIG) -> ClouderaManagerClient:
    return ClouderaManagerClient(cfg, TransportOptions(transport=httpx.MockTransport(fake.handler)))


@pytest.fixture
def cm_client(fake_cm):
    """A client wired to ``fake_cm`` and installed as the process client."""
    client = make_client(fake_cm)
    set_client(client)
    yield client
    set_client(None)


@pytest.fixture
def writes_enabled(monkeypatch):
    monkeypatch.setattr("cm_mcp.tools.write.ALLOW_WRITES", True)


@pytest.fixture
def writes_disabled(monkeypatch):
    monkeypatch.setattr("cm_mcp.tools.write.ALLOW_WRITES", False)


# ---------------------------------------------------------------------------
# Sample Cloudera Manager JSON responses
# ---------------------------------------------------------------------------

CLUSTERS_JSON = {
    "items": [
        {
            "name": "Cluster 1",
            "displayName": "Cluster 1",
            "fullVersion": "7.1.9",
            "entityStatus": "GOOD_HEALTH",
        }
    ]
}

SERVICES_JSON = {
    "items": [
        {"name": "hdfs", "type": "HDFS", "serviceState": "STARTED", "healthSummary": "GOOD"},
        {"name": "yarn", "type": "YARN", "serviceState": "STARTED", "healthSummary": "CONCERNING"},
    ]
}

COMMAND_JSON = {
    "id": 1234,
    "name": "Restart",
    "startTime": "2026-10-17T10:00:00.000Z",
    "active": True,
    "serviceRef": {"clusterName": "Cluster 1", "serviceName": "hdfs"},
}

PARCELS_JSON = {
    "items": [
        {"product": "CDH", "version": f"7.1.9-1.cdh7.1.9.p{i}", "stage": "ACTIVATED"}
        for i in range(25)
    ]
}
