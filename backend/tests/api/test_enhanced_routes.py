"""Enhanced Routes — dashboard status, activation, and provider config.

Tests cover:
    - Session verifier: missing → 503, no principal → 401, wrong role → 403
    - Status scenarios (not configured, HTTP 500 remote, active license)
    - Activation success/failure and input validation
    - Platform config: blank fields dropped, project admins allowed
"""

import pytest

from tms_core.config import Settings, get_settings
from tms_core.core.enhanced_protocol import (
    STATUS_PATH, ACTIVATE_PATH, PLATFORM_API_CONFIG_PATH,
)
from tms_core.main import app
from tests.fakes import ADMIN, MEMBER, PROJECT_ADMIN, body_of


# ─── Session verifier ───────────────────────────────────────────

async def test_status_without_verifier_is_503(client):
    res = await client.get("/api/v1/enhanced/status")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "SESSION_VERIFIER_UNAVAILABLE"


async def test_status_without_principal_is_401(client, login, remote):
    login(None)
    res = await client.get("/api/v1/enhanced/status")
    assert res.status_code == 401
    assert remote.requests == []


async def test_activate_requires_system_admin(client, login, remote):
    login(PROJECT_ADMIN)
    res = await client.post(
        "/api/v1/enhanced/license/activate", json={"licenseKey": "LICENSE-XYZ"},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"
    assert remote.requests == []


async def test_config_forbidden_for_plain_member(client, login):
    login(MEMBER)
    res = await client.post(
        "/api/v1/enhanced/platform-api-config", json={"llmProvider": "OpenAI"},
    )
    assert res.status_code == 403


# ─── Status ─────────────────────────────────────────────────────

async def test_status_not_configured(client, login, remote):
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, database_url="sqlite+aiosqlite:///:memory:",
    )
    login(MEMBER)
    res = await client.get("/api/v1/enhanced/status")
    assert res.status_code == 200
    assert res.json() == {
        "ok": True,
        "data": {
            "connected": False, "reason": "not_configured",
            "licenseStatus": "unknown", "expiresAt": None,
        },
    }
    assert remote.requests == []


async def test_status_remote_500(client, login, remote):
    remote.respond(STATUS_PATH, (500, {"ok": False}))
    login(MEMBER)
    data = (await client.get("/api/v1/enhanced/status")).json()["data"]
    assert data == {
        "connected": False, "reason": "unreachable",
        "licenseStatus": "unknown", "expiresAt": None,
    }


async def test_status_active_license(client, login, remote):
    remote.respond(STATUS_PATH, {
        "ok": True,
        "data": {"licenseStatus": "active", "expiresAt": "2027-01-01T00:00:00Z"},
    })
    login(MEMBER)
    data = (await client.get("/api/v1/enhanced/status")).json()["data"]
    assert data["connected"] is True
    assert data["reason"] is None
    assert data["licenseStatus"] == "active"
    assert data["expiresAt"] == "2027-01-01T00:00:00Z"


# ─── Activation ─────────────────────────────────────────────────

async def test_activate_ok(client, login, remote):
    remote.respond(ACTIVATE_PATH, (200, {"ok": True}))
    login(ADMIN)
    res = await client.post(
        "/api/v1/enhanced/license/activate", json={"licenseKey": "  LICENSE-XYZ "},
    )
    assert res.json() == {"ok": True, "data": {"connected": True, "reason": None}}
    assert body_of(remote.calls_to(ACTIVATE_PATH)[0]) == {"licenseKey": "LICENSE-XYZ"}


async def test_activate_rejected_by_remote(client, login, remote):
    remote.respond(ACTIVATE_PATH, {"ok": False})
    login(ADMIN)
    res = await client.post(
        "/api/v1/enhanced/license/activate", json={"licenseKey": "LICENSE-XYZ"},
    )
    assert res.status_code == 200
    assert res.json()["data"] == {"connected": False, "reason": "unreachable"}


@pytest.mark.parametrize("body", [{}, {"licenseKey": ""}, {"licenseKey": "   "}])
async def test_activate_validates_key(client, login, remote, body):
    login(ADMIN)
    res = await client.post("/api/v1/enhanced/license/activate", json=body)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert res.json()["error"]["category"] == "validation"
    assert res.json()["error"]["severity"] == "error"
    assert remote.requests == []


# ─── Platform API config ────────────────────────────────────────

async def test_project_admin_saves_config(client, login, remote):
    login(PROJECT_ADMIN)
    res = await client.post(
        "/api/v1/enhanced/platform-api-config",
        json={
            "llmProvider": "OpenAI", "llmModel": "gpt-4o-mini",
            "llmApiKey": "", "mtProvider": "  ",
        },
    )
    assert res.json()["data"]["connected"] is True
    assert body_of(remote.calls_to(PLATFORM_API_CONFIG_PATH)[0]) == {
        "llmProvider": "OpenAI", "llmModel": "gpt-4o-mini",
    }


async def test_config_remote_down(client, login, remote):
    remote.respond(PLATFORM_API_CONFIG_PATH, (503, "maintenance"))
    login(ADMIN)
    res = await client.post(
        "/api/v1/enhanced/platform-api-config", json={"mtProvider": "DeepL"},
    )
    assert res.json()["data"] == {"connected": False, "reason": "unreachable"}
