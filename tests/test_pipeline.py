"""End-to-end tests of tool dispatch against a mocked Gigapipe host."""

import base64
import json

import httpx
import pytest

from gigapipe_mcp.config import BackendConfig
from gigapipe_mcp.errors import TransportError, UnknownOperationError, UpstreamError, ValidationError
from gigapipe_mcp.executor import HTTPExecutor
from gigapipe_mcp.operations import OPERATIONS
from gigapipe_mcp.pipeline import QueryDispatcher, ToolOutcome


@pytest.mark.asyncio
async def test_metrics_query_scenario(upstream, executor):
    upstream.body = b'{"status":"success","data":{"resultType":"matrix","result":[]}}'
    dispatcher = QueryDispatcher(executor, config_provider=lambda: BackendConfig(host="gp:3100"))

    text = await dispatcher.dispatch(
        "prometheus_query",
        {"query": "up", "start": "0", "end": "100", "step": "15s"},
    )

    request = upstream.requests[0]
    assert str(request.url) == "http://gp:3100/api/v1/query_range?query=up&start=0&end=100&step=15s"
    assert request.method == "GET"
    assert "Authorization" not in request.headers
    assert json.loads(text) == {"status": "success", "data": {"resultType": "matrix", "result": []}}


@pytest.mark.asyncio
async def test_trace_tags_scenario_with_credentials(upstream, executor, auth_config):
    upstream.body = b'{"tagNames":["service.name","http.method"]}'
    dispatcher = QueryDispatcher(executor, config_provider=lambda: auth_config)

    text = await dispatcher.dispatch("tempo_tags", {})

    request = upstream.requests[0]
    assert str(request.url) == "https://gigapipe.test:3100/api/search/tags"
    assert request.headers["Authorization"] == "Basic " + base64.b64encode(b"alice:s3cret").decode()
    assert json.loads(text) == {"tagNames": ["service.name", "http.method"]}


@pytest.mark.asyncio
@pytest.mark.parametrize("name", [name for name, spec in OPERATIONS.items() if spec.required_args])
async def test_missing_required_argument_makes_no_request(upstream, executor, plain_config, name):
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    with pytest.raises(ValidationError):
        await dispatcher.dispatch(name, {})

    assert upstream.requests == []


@pytest.mark.asyncio
async def test_arguments_may_be_none(upstream, executor, plain_config):
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    await dispatcher.dispatch("loki_labels", None)

    assert str(upstream.requests[0].url) == "http://gigapipe.test:3100/loki/api/v1/label"


@pytest.mark.asyncio
async def test_unknown_tool(executor):
    dispatcher = QueryDispatcher(executor)

    with pytest.raises(UnknownOperationError, match="Unknown tool: grafana_query"):
        await dispatcher.dispatch("grafana_query", {})


@pytest.mark.asyncio
async def test_environment_is_read_per_call(upstream, executor, monkeypatch):
    dispatcher = QueryDispatcher(executor)

    monkeypatch.setenv("GIGAPIPE_HOST", "first:3100")
    await dispatcher.dispatch("tempo_tags", {})

    monkeypatch.setenv("GIGAPIPE_HOST", "second:3100")
    monkeypatch.setenv("GIGAPIPE_USERNAME", "alice")
    monkeypatch.setenv("GIGAPIPE_PASSWORD", "s3cret")
    await dispatcher.dispatch("tempo_tags", {})

    assert [str(r.url) for r in upstream.requests] == [
        "http://first:3100/api/search/tags",
        "https://second:3100/api/search/tags",
    ]


@pytest.mark.asyncio
async def test_default_host(upstream, executor):
    await QueryDispatcher(executor).dispatch("prometheus_labels", {})

    assert str(upstream.requests[0].url) == "http://localhost:3100/api/v1/labels"


@pytest.mark.asyncio
async def test_upstream_500_is_upstream_error(upstream, executor, plain_config):
    upstream.status_code = 500
    upstream.body = b'{"status":"success"}'
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    with pytest.raises(UpstreamError) as exc_info:
        await dispatcher.dispatch("loki_query", {"query": '{job="api"}'})

    assert exc_info.value.status == 500


@pytest.mark.asyncio
async def test_invoke_success(upstream, executor, plain_config):
    upstream.body = b'{"status":"success","data":["job","instance"]}'
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    outcome = await dispatcher.invoke("prometheus_labels", {"start": "0"})

    assert outcome == ToolOutcome(text='{"status":"success","data":["job","instance"]}')


@pytest.mark.asyncio
async def test_invoke_reports_each_error_kind_distinctly(upstream, executor, plain_config):
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    missing = await dispatcher.invoke("tempo_query", {})

    upstream.status_code = 503
    status = await dispatcher.invoke("tempo_query", {"trace_id": "abc123"})

    upstream.status_code = 200
    upstream.body = b"<html>oops</html>"
    undecodable = await dispatcher.invoke("tempo_query", {"trace_id": "abc123"})

    upstream.error = httpx.ConnectError("connection refused")
    unreachable = await dispatcher.invoke("tempo_query", {"trace_id": "abc123"})

    unknown = await dispatcher.invoke("nope", {})

    assert missing == ToolOutcome(text='required argument "trace_id" not found', is_error=True)
    assert status == ToolOutcome(text="request failed with status 503", is_error=True)
    assert undecodable.is_error and undecodable.text.startswith("failed to decode response:")
    assert unreachable == ToolOutcome(text="failed to make request: connection refused", is_error=True)
    assert unknown == ToolOutcome(text="Unknown tool: nope", is_error=True)


@pytest.mark.asyncio
async def test_failed_request_is_not_retried(upstream, executor, plain_config):
    upstream.error = httpx.ConnectError("connection refused")
    dispatcher = QueryDispatcher(executor, config_provider=lambda: plain_config)

    with pytest.raises(TransportError):
        await dispatcher.dispatch("tempo_tags", {})

    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_invoke_redirect_loop_is_error_outcome(plain_config):
    def loop(request):
        return httpx.Response(302, headers={"Location": str(request.url)})

    async with httpx.AsyncClient(transport=httpx.MockTransport(loop), follow_redirects=True) as client:
        dispatcher = QueryDispatcher(HTTPExecutor(client=client), config_provider=lambda: plain_config)

        outcome = await dispatcher.invoke("tempo_tags", {})

    assert outcome.is_error
    assert outcome.text.startswith("failed to make request:")
