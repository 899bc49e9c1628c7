"""Enhanced Schemas — dashboard requests and {ok, data} responses.

Invariants:
    - LicenseActivationRequest.licenseKey: stripped, 1-200 chars
    - PlatformApiConfigRequest: every field optional; blank strings become None
      and are not forwarded
    - Responses always carry ok=true; failures use the CoreError envelope

Design Decisions:
    - Field aliases over camelCase attribute names: Python side stays snake_case
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tms_core.core.domain_types import PlatformApiConfig


class LicenseActivationRequest(BaseModel):
    """License activation — validates key presence."""
    model_config = ConfigDict(populate_by_name=True)

    license_key: str = Field(alias="licenseKey", min_length=1, max_length=200)

    @field_validator("license_key", mode="before")
    @classmethod
    def strip_license_key(cls, v):
        return v.strip() if isinstance(v, str) else v


class PlatformApiConfigRequest(BaseModel):
    """LLM / MT provider configuration form."""
    model_config = ConfigDict(populate_by_name=True)

    llm_provider: str | None = Field(None, alias="llmProvider", max_length=100)
    llm_base_url: str | None = Field(None, alias="llmBaseUrl", max_length=500)
    llm_api_key: str | None = Field(None, alias="llmApiKey", max_length=500)
    llm_model: str | None = Field(None, alias="llmModel", max_length=200)
    mt_provider: str | None = Field(None, alias="mtProvider", max_length=100)
    mt_base_url: str | None = Field(None, alias="mtBaseUrl", max_length=500)
    mt_api_key: str | None = Field(None, alias="mtApiKey", max_length=500)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def to_domain(self) -> PlatformApiConfig:
        return PlatformApiConfig(**self.model_dump())


class ConnectionStateData(BaseModel):
    connected: bool
    reason: Literal["not_configured", "unreachable"] | None = None


class SystemStatusData(ConnectionStateData):
    licenseStatus: Literal["unknown", "unactivated", "active", "expired"]
    expiresAt: str | None = None


class HeartbeatTriggerData(BaseModel):
    connected: bool
    lastSuccessfulHeartbeatAt: str | None = None


class ConnectionStateResponse(BaseModel):
    ok: Literal[True] = True
    data: ConnectionStateData


class SystemStatusResponse(BaseModel):
    ok: Literal[True] = True
    data: SystemStatusData


class HeartbeatTriggerResponse(BaseModel):
    ok: Literal[True] = True
    data: HeartbeatTriggerData
