"""
Shared fixtures for unit tests. Nothing here talks to a real event store.
"""
from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest


class FakeConnection:
    """Scripted stand-in for EventStoreConnection."""

    def __init__(self, pages: list[Any]) -> None:
        self._pages = list(pages)
        self.requests: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def search(self, index: str, doc_type: str, body: dict[str, Any]) -> dict[str, Any]:
        self.requests.append((index, doc_type, body))
        page = self._pages.pop(0) if self._pages else []
        if isinstance(page, Exception):
            raise page
        return {"hits": {"total": {"value": len(page)}, "hits": [{"_source": doc} for doc in page]}}

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def make_audit_doc(n: int = 0, **details: Any) -> dict[str, Any]:
    return {
        "category": "auditd",
        "hostname": f"host{n}.example.com",
        "timestamp": "2024-01-30T10:00:00+00:00",
        "utctimestamp": "2024-01-30T10:00:00+00:00",
        "summary": f"audit event {n}",
        "details": dict(details),
    }


@pytest.fixture
def make_page():
    def build(size: int, start: int = 0) -> list[dict[str, Any]]:
        return [make_audit_doc(start + i) for i in range(size)]

    return build


@pytest.fixture
def fake_connection_factory():
    """Returns (factory, connections); each factory call hands out the next script."""

    def build(*scripts: list[Any]):
        connections = [FakeConnection(script) for script in scripts]
        pending = list(connections)

        def factory() -> FakeConnection:
            return pending.pop(0)

        return factory, connections

    return build


@pytest.fixture
def mock_opensearch_client():
    client = MagicMock()
    client.transport = MagicMock()
    client.transport.perform_request = MagicMock(
        return_value={"hits": {"hits": [], "total": {"value": 0}}}
    )
    return client


@pytest.fixture
def execve_document():
    return {
        "category": "auditd",
        "hostname": "",
        "timestamp": "2024-01-30T10:15:00+00:00",
        "utctimestamp": "2024-01-30T10:15:00Z",
        "summary": "  Execve: ls -la\n",
        "details": {
            "dhost": "web1.example.com",
            "hostname": "web1",
            "command": "ls -la",
            "dproc": "/bin/ls",
            "duser": "root",
            "suser": "alice",
            "fname": "/bin/ls",
            "name": "Unix Exec",
        },
    }


@pytest.fixture
def syslog_document():
    return {
        "category": "syslog",
        "hostname": "mail.example.com",
        "timestamp": "2024-01-30T11:00:00+00:00",
        "utctimestamp": "2024-01-30T11:00:00+00:00",
        "summary": "postfix/smtpd[123]: connect from unknown\n",
        "details": {"hostname": "mail01", "program": "postfix/smtpd"},
    }


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    # keep a developer's .env and shell settings out of unit tests
    monkeypatch.chdir(tmp_path)
    for name in ("MOZDEFESHOST", "LOG_LEVEL", "MOZDEF_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
