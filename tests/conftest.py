"""Shared fixtures: a fake Gigapipe host behind httpx.MockTransport."""

import httpx
import pytest
import pytest_asyncio

from gigapipe_mcp.config import BackendConfig
from gigapipe_mcp.executor import HTTPExecutor


class FakeUpstream:
    """Records every request and answers with a configurable response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = b'{"status":"success","data":[]}'
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest_asyncio.fixture
async def executor(upstream):
    client = upstream.client()
    yield HTTPExecutor(client=client, timeout=5.0)
    await client.aclose()


@pytest.fixture
def plain_config():
    return BackendConfig(host="gigapipe.test:3100")


@pytest.fixture
def auth_config():
    return BackendConfig(host="gigapipe.test:3100", username="alice", password="s3cret")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's GIGAPIPE_* variables out of the tests."""
    for name in ("GIGAPIPE_HOST", "GIGAPIPE_USERNAME", "GIGAPIPE_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
