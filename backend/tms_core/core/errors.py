"""Error Hierarchy — typed, categorized exceptions for every connectivity failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the same {ok, error} envelope the dashboard API returns
    - EnhancedServiceError never crosses the gateway boundary (absorbed into ConnectionState)
    - DatabaseError is the only infrastructure error allowed to reach HTTP callers
    - No secrets, tokens, or license keys in messages

Design Decisions:
    - Single hierarchy with CoreError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class CoreError(Exception):
    """Base exception for all core-instance errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard {ok: false, error} envelope."""
        return {
            "ok": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Boundary Errors (400-level) ────────────────────────────────

class UnauthorizedError(CoreError):
    """Caller presented no credential, or a wrong one."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(CoreError):
    """Caller is authenticated but lacks the required role."""
    def __init__(self, message: str = "Forbidden", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CoreError):
    """Key-value store unavailable or a statement failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class EnhancedServiceError(CoreError):
    """Enhanced service call failed (transport, status, or envelope)."""
    def __init__(
        self, message: str, reason: str, status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Enhanced service error ({reason}): {message}",
            "ENHANCED_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )
        self.reason = reason
        self.status_code = status_code


class SessionVerifierUnavailableError(CoreError):
    """Host application did not install a session verifier."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Session verifier is not configured",
            "SESSION_VERIFIER_UNAVAILABLE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 503,
        )
