"""Enhanced Routes — dashboard-facing status, license activation, and provider config.

Invariants:
    - status: any verified principal; activate: system admins; platform-api-config:
      system or project admins
    - Remote failures come back as 200 with connected=false and a reason; the
      dashboard disables actions instead of showing an error page
    - License keys and API keys are forwarded, never logged or echoed back
"""

import logging

from fastapi import APIRouter, Depends

from tms_core.api.dependencies import (
    get_enhanced_gateway, get_principal,
    require_platform_config_access, require_system_admin,
)
from tms_core.core.domain_types import Principal
from tms_core.schemas.enhanced import (
    ConnectionStateResponse, LicenseActivationRequest,
    PlatformApiConfigRequest, SystemStatusResponse,
)
from tms_core.services.enhanced_gateway import EnhancedGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/enhanced", tags=["enhanced"])


@router.get("/status", response_model=SystemStatusResponse)
async def get_status(
    _: Principal = Depends(get_principal),
    gateway: EnhancedGateway = Depends(get_enhanced_gateway),
):
    """Connection and license status for the system settings page."""
    result = await gateway.status()
    return {"ok": True, "data": result.to_dict()}


@router.post("/license/activate", response_model=ConnectionStateResponse)
async def activate_license(
    body: LicenseActivationRequest,
    principal: Principal = Depends(require_system_admin),
    gateway: EnhancedGateway = Depends(get_enhanced_gateway),
):
    """Forward a license key to the enhanced service."""
    result = await gateway.activate(body.license_key)
    logger.info(
        f"License activation requested by {principal.user_id}",
        extra={"connected": result.connected},
    )
    return {"ok": True, "data": result.to_dict()}


@router.post("/platform-api-config", response_model=ConnectionStateResponse)
async def save_platform_api_config(
    body: PlatformApiConfigRequest,
    principal: Principal = Depends(require_platform_config_access),
    gateway: EnhancedGateway = Depends(get_enhanced_gateway),
):
    """Push LLM/MT provider settings to the enhanced service."""
    result = await gateway.save_config(body.to_domain())
    logger.info(
        f"Platform API config saved by {principal.user_id}",
        extra={"connected": result.connected},
    )
    return {"ok": True, "data": result.to_dict()}
