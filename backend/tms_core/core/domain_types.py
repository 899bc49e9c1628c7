"""Domain Types — value objects for the enhanced connectivity layer.

Invariants:
    - ConnectionState is transient, never persisted
    - connected=True ⇔ reason is None; connected=False ⇔ reason is set
    - LicenseStatus is derived from the remote response only (unknown by default)
    - SessionTokenPair.previous is only set after at least one rotation
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - Frozen dataclasses: results can be compared and shared without defensive copies
    - str Enums: serialize to JSON without custom encoders (ADR: dashboard API is JSON)
"""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InstanceId = NewType("InstanceId", str)


# ─── Enums ───────────────────────────────────────────────────────

class DisconnectReason(str, Enum):
    """Why the enhanced service is not connected."""
    NOT_CONFIGURED = "not_configured"  # no URL, no network attempt made
    UNREACHABLE = "unreachable"        # attempt made, failed in any way


class LicenseStatus(str, Enum):
    """License state as reported by the enhanced service."""
    UNKNOWN = "unknown"
    UNACTIVATED = "unactivated"
    ACTIVE = "active"
    EXPIRED = "expired"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ConnectionState:
    """Connected | Disconnected{reason}."""
    connected: bool
    reason: DisconnectReason | None = None

    @classmethod
    def ok(cls) -> "ConnectionState":
        return cls(connected=True)

    @classmethod
    def not_configured(cls) -> "ConnectionState":
        return cls(connected=False, reason=DisconnectReason.NOT_CONFIGURED)

    @classmethod
    def unreachable(cls) -> "ConnectionState":
        return cls(connected=False, reason=DisconnectReason.UNREACHABLE)

    def to_dict(self) -> dict:
        return {
            "connected": self.connected,
            "reason": self.reason.value if self.reason else None,
        }


@dataclass(frozen=True)
class SystemStatus:
    """Connection state plus the license view reported by the remote service."""
    connection: ConnectionState
    license_status: LicenseStatus = LicenseStatus.UNKNOWN
    expires_at: str | None = None

    @property
    def connected(self) -> bool:
        return self.connection.connected

    @property
    def reason(self) -> DisconnectReason | None:
        return self.connection.reason

    def to_dict(self) -> dict:
        return {
            **self.connection.to_dict(),
            "licenseStatus": self.license_status.value,
            "expiresAt": self.expires_at,
        }


@dataclass(frozen=True)
class SessionTokenPair:
    """Two-slot rotating credential: most recent token and the one before it."""
    current: str | None = None
    previous: str | None = None


@dataclass(frozen=True)
class HeartbeatReport:
    """What the scheduler sees after a trigger."""
    connected: bool
    last_successful_heartbeat_at: datetime | None

    def to_dict(self) -> dict:
        return {
            "connected": self.connected,
            "lastSuccessfulHeartbeatAt": (
                self.last_successful_heartbeat_at.isoformat()
                if self.last_successful_heartbeat_at else None
            ),
        }


@dataclass(frozen=True)
class PlatformApiConfig:
    """LLM and machine-translation provider settings pushed to the enhanced service."""
    llm_provider: str | None = None
    llm_base_url: str | None = None
    llm_api_key: str | None = None
    llm_model: str | None = None
    mt_provider: str | None = None
    mt_base_url: str | None = None
    mt_api_key: str | None = None

    def to_payload(self) -> dict[str, str]:
        """camelCase wire body; unset fields omitted."""
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                head, *rest = f.name.split("_")
                payload[head + "".join(p.capitalize() for p in rest)] = value
        return payload


@dataclass(frozen=True)
class Principal:
    """Dashboard user as resolved by the external session verifier."""
    user_id: str
    is_system_admin: bool = False
    is_project_admin: bool = False
