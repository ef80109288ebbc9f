"""
Shared fixtures: a default connection, a recording MockTransport and a
working directory holding config.json
"""
import json

import httpx
import pytest

from models import Connection


@pytest.fixture
def conn():
    return Connection(url="localhost", port=8080)


class Recorder:
    """MockTransport handler that remembers every request it answers."""

    def __init__(self, body=b'{"ok":true}', fail=None):
        self.body = body
        self.fail = fail or (lambda n: False)
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        if self.fail(len(self.requests)):
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, content=self.body)

    @property
    def urls(self):
        return [str(r.url) for r in self.requests]

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self), timeout=None)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory with a valid config.json and no orders."""
    (tmp_path / "config.json").write_text(json.dumps({"url": "localhost", "port": 8080}))
    monkeypatch.chdir(tmp_path)
    return tmp_path
