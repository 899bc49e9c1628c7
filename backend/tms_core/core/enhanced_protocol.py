"""Enhanced Service Wire Protocol — paths, header contract, and envelope parsing.

Invariants:
    - content-type and x-core-instance-id are present on every call
    - x-core-secret only when a secret is configured
    - x-tms-session-token only when the caller passes a current token (heartbeat)
    - unwrap_envelope returns None for anything that is not {ok: truthy}
    - parse_license_status never raises: unknown or missing values → UNKNOWN

Design Decisions:
    - Pure functions, no IO: the same helpers serve the HTTP client and the tests
"""

from typing import Any

from tms_core.core.domain_types import LicenseStatus

STATUS_PATH = "/api/internal/system/status"
ACTIVATE_PATH = "/api/internal/license/activate"
PLATFORM_API_CONFIG_PATH = "/api/internal/platform-api-config"
HEARTBEAT_PATH = "/api/internal/heartbeat"

HEADER_CORE_SECRET = "x-core-secret"
HEADER_INSTANCE_ID = "x-core-instance-id"
HEADER_SESSION_TOKEN = "x-tms-session-token"


def build_headers(
    instance_id: str,
    core_secret: str | None = None,
    session_token: str | None = None,
) -> dict[str, str]:
    """Headers for one outbound call."""
    headers = {"content-type": "application/json"}
    if core_secret:
        headers[HEADER_CORE_SECRET] = core_secret
    headers[HEADER_INSTANCE_ID] = instance_id
    if session_token:
        headers[HEADER_SESSION_TOKEN] = session_token
    return headers


def unwrap_envelope(payload: Any) -> dict | None:
    """Return the envelope's data (empty dict if absent), or None if not ok."""
    if not isinstance(payload, dict) or not payload.get("ok"):
        return None
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def parse_license_status(data: dict) -> tuple[LicenseStatus, str | None]:
    """Extract (licenseStatus, expiresAt) from a status payload."""
    try:
        status = LicenseStatus(data.get("licenseStatus"))
    except ValueError:
        status = LicenseStatus.UNKNOWN
    expires_at = data.get("expiresAt")
    if not isinstance(expires_at, str) or not expires_at:
        expires_at = None
    return status, expires_at


def extract_session_token(data: dict) -> str | None:
    """Non-empty sessionToken from a heartbeat payload, else None."""
    token = data.get("sessionToken")
    if isinstance(token, str) and token:
        return token
    return None
