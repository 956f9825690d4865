import logging

import httpx
import pytest

from conftest import BASE_URL, FakeRegistry
from fleetwatch.services.client import DashboardClient


def _client_for(handler) -> DashboardClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DashboardClient(BASE_URL, http=http)


@pytest.mark.asyncio
async def test_list_devices_parses_records(registry):
    result = await registry.client().list_devices()

    assert result.ok
    assert [device.device_id for device in result.items] == ["A", "B"]
    assert result.items[0].is_online
    assert not result.items[1].is_online
    assert registry.requests[0].url == httpx.URL(f"{BASE_URL}/api/devices/list")


@pytest.mark.asyncio
async def test_list_logs_sends_configured_limit(registry):
    result = await registry.client(log_limit=50).list_logs()

    assert result.ok
    assert result.items[0].event == "connected"
    assert registry.requests[0].url.params["limit"] == "50"


@pytest.mark.asyncio
async def test_list_logs_explicit_limit_wins():
    registry = FakeRegistry(logs=[{"id": str(i), "device_id": "A"} for i in range(10)])

    result = await registry.client(log_limit=50).list_logs(3)

    assert registry.requests[0].url.params["limit"] == "3"
    assert [log.id for log in result.items] == ["0", "1", "2"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"devices": None}])
async def test_missing_field_is_empty_success(body):
    client = _client_for(lambda request: httpx.Response(200, json=body))

    result = await client.list_devices()

    assert result.ok
    assert result.items == []


@pytest.mark.asyncio
async def test_numeric_ids_become_strings():
    client = _client_for(lambda request: httpx.Response(200, json={"logs": [{"id": 7, "device_id": 42}]}))

    result = await client.list_logs()

    assert result.items[0].id == "7"
    assert result.items[0].device_id == "42"


@pytest.mark.asyncio
async def test_server_error_is_status_failure(registry, caplog):
    registry.devices_status = 503

    with caplog.at_level(logging.WARNING):
        result = await registry.client().list_devices()

    assert not result.ok
    assert result.items == []
    assert result.error.reason == "status"
    assert result.error.detail == "HTTP 503"
    assert "Error fetching devices" in caplog.text


@pytest.mark.asyncio
async def test_connection_failure_is_transport_failure(registry):
    registry.fail_logs = httpx.ConnectError("connection refused")

    result = await registry.client().list_logs()

    assert result.error.reason == "transport"
    assert "connection refused" in result.error.detail
    assert result.error.url.endswith("/api/devices/logs")


@pytest.mark.asyncio
async def test_timeout_is_reported_separately(registry):
    registry.fail_devices = httpx.ReadTimeout("read timed out")

    result = await registry.client().list_devices()

    assert result.error.reason == "timeout"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"devices": {"device_id": "A"}}),
        httpx.Response(200, json={"devices": [{"device_name": "no id"}]}),
    ],
)
async def test_malformed_payloads_are_parse_failures(response):
    client = _client_for(lambda request: response)

    result = await client.list_devices()

    assert not result.ok
    assert result.error.reason == "parse"
    assert result.items == []


@pytest.mark.asyncio
async def test_malformed_base_url_is_transport_failure(registry):
    http = httpx.AsyncClient(transport=httpx.MockTransport(registry.handler))
    client = DashboardClient("http://bad host\x00.test", http=http)

    result = await client.list_devices()

    assert not result.ok
    assert result.error.reason == "transport"
    assert registry.requests == []
