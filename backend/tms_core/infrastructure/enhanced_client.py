"""Enhanced Service Client — one bounded JSON request to the enhanced service.

Invariants:
    - Every request bounded by timeout_seconds end to end (asyncio.timeout around
      the whole call) as well as per phase (httpx connect, read, write, pool)
    - A fresh httpx.AsyncClient per request: no connection or cookie state shared
      across requests or processes
    - Returns the envelope's data only for HTTP 2xx + JSON object + truthy ok
    - Every failure mapped to EnhancedServiceError (core/errors.py) with a reason:
      timeout | connection_error | http_status | invalid_json | envelope_not_ok | unknown

Design Decisions:
    - No retry: the scheduler is the retry loop, and a failed heartbeat must not
      be re-sent with a token the remote may already have rotated
    - transport injectable: tests use httpx.MockTransport, production the default pool
"""

import asyncio
import logging
from typing import Any

import httpx

from tms_core.core.enhanced_protocol import unwrap_envelope
from tms_core.core.errors import EnhancedServiceError

logger = logging.getLogger(__name__)


class EnhancedServiceClient:
    """Issues JSON calls against the enhanced service base URL."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str],
        json_body: dict[str, Any] | None = None,
    ) -> dict:
        """Send one request; return envelope data or raise EnhancedServiceError."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method, path, headers=headers, json=json_body,
                    )
        except (httpx.TimeoutException, TimeoutError) as e:
            raise EnhancedServiceError(
                f"{method} {path} timed out", "timeout",
            ) from e
        except httpx.HTTPError as e:
            raise EnhancedServiceError(
                f"{method} {path}: {type(e).__name__}", "connection_error",
            ) from e
        except Exception as e:
            logger.error(
                f"Unexpected enhanced service error: {e}", exc_info=True,
            )
            raise EnhancedServiceError(str(e), "unknown") from e

        return self._read_envelope(method, path, response)

    def _read_envelope(
        self, method: str, path: str, response: httpx.Response,
    ) -> dict:
        if not response.is_success:
            raise EnhancedServiceError(
                f"{method} {path} returned {response.status_code}",
                "http_status",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise EnhancedServiceError(
                f"{method} {path} returned a non-JSON body", "invalid_json",
                status_code=response.status_code,
            ) from e
        data = unwrap_envelope(payload)
        if data is None:
            raise EnhancedServiceError(
                f"{method} {path} envelope not ok", "envelope_not_ok",
                status_code=response.status_code,
            )
        return data
