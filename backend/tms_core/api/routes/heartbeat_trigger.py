"""Heartbeat Trigger Route — scheduler-facing POST that renews the enhanced session.

Invariants:
    - 401 envelope when a cron secret is configured and x-cron-secret is missing/wrong
    - Otherwise always 200: a disconnected heartbeat is reported, not raised
"""

from fastapi import APIRouter, Depends, Header

from tms_core.api.dependencies import get_heartbeat_trigger
from tms_core.schemas.enhanced import HeartbeatTriggerResponse
from tms_core.services.heartbeat_trigger import HeartbeatTrigger

router = APIRouter(tags=["cron"])


@router.post("/heartbeat-trigger", response_model=HeartbeatTriggerResponse)
async def trigger_heartbeat(
    x_cron_secret: str | None = Header(None),
    trigger: HeartbeatTrigger = Depends(get_heartbeat_trigger),
):
    """Run one heartbeat and report connection plus last success time."""
    report = await trigger.invoke(x_cron_secret)
    return {"ok": True, "data": report.to_dict()}
