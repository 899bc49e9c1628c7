"""Enhanced Service Client — failure mapping for every transport outcome.

Tests cover:
    - ok envelope → data
    - timeout, connection error, non-2xx, non-JSON, not-ok → EnhancedServiceError(reason)
    - whole-call deadline: a body trickling past timeout_seconds is a timeout
    - headers and JSON body forwarded unchanged
"""

import httpx
import pytest

from tms_core.core.errors import EnhancedServiceError
from tms_core.infrastructure.enhanced_client import EnhancedServiceClient
from tests.fakes import FakeEnhancedService, body_of, slow_response

PATH = "/api/internal/system/status"


def _client(remote: FakeEnhancedService) -> EnhancedServiceClient:
    return EnhancedServiceClient(
        "http://enhanced.test/", timeout_seconds=1, transport=remote.transport,
    )


async def _reason(remote) -> str:
    with pytest.raises(EnhancedServiceError) as exc_info:
        await _client(remote).request("GET", PATH, headers={})
    return exc_info.value.reason


async def test_returns_envelope_data(remote):
    remote.respond(PATH, {"ok": True, "data": {"licenseStatus": "active"}})
    data = await _client(remote).request("GET", PATH, headers={})
    assert data == {"licenseStatus": "active"}


async def test_forwards_headers_and_body(remote):
    await _client(remote).request(
        "POST", "/api/internal/license/activate",
        headers={"x-core-instance-id": "inst"}, json_body={"licenseKey": "K"},
    )
    request = remote.requests[0]
    assert str(request.url) == "http://enhanced.test/api/internal/license/activate"
    assert request.headers["x-core-instance-id"] == "inst"
    assert body_of(request) == {"licenseKey": "K"}


async def test_timeout_maps_to_timeout(remote):
    remote.respond(PATH, httpx.ReadTimeout)
    assert await _reason(remote) == "timeout"


async def test_trickling_body_exceeding_deadline_is_timeout(remote):
    remote.respond(PATH, slow_response({"ok": True, "data": {}}, chunk_size=1, delay=0.1))
    client = EnhancedServiceClient(
        "http://enhanced.test", timeout_seconds=0.2, transport=remote.transport,
    )
    with pytest.raises(EnhancedServiceError) as exc_info:
        await client.request("GET", PATH, headers={})
    assert exc_info.value.reason == "timeout"


async def test_connect_error_maps_to_connection_error(remote):
    remote.respond(PATH, httpx.ConnectError)
    assert await _reason(remote) == "connection_error"


async def test_http_500_maps_to_http_status(remote):
    remote.respond(PATH, (500, {"ok": False}))
    with pytest.raises(EnhancedServiceError) as exc_info:
        await _client(remote).request("GET", PATH, headers={})
    assert exc_info.value.reason == "http_status"
    assert exc_info.value.status_code == 500


async def test_ok_envelope_with_error_status_still_fails(remote):
    remote.respond(PATH, (401, {"ok": True}))
    assert await _reason(remote) == "http_status"


async def test_non_json_body(remote):
    remote.respond(PATH, (200, "<html>gateway</html>"))
    assert await _reason(remote) == "invalid_json"


async def test_envelope_not_ok(remote):
    remote.respond(PATH, {"ok": False, "error": {"code": "NOPE"}})
    assert await _reason(remote) == "envelope_not_ok"


async def test_unexpected_exception_is_mapped(remote):
    remote.respond(PATH, RuntimeError("surprise"))
    assert await _reason(remote) == "unknown"
