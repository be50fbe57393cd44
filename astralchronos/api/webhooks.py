"""
Page load beacon endpoint.
"""
from fastapi import APIRouter, Depends

from astralchronos.api.dependencies import get_page_load_beacon
from astralchronos.models.schemas import PageLoadEvent, WebhookAck
from astralchronos.services.beacon import PageLoadBeacon

router = APIRouter(prefix="/api/webhook", tags=["webhooks"])


@router.post(
    "/send",
    response_model=WebhookAck,
    summary="Page load beacon",
    description="Forwards the page load event to the page load workflow. Never fails the caller."
)
async def send_page_load(event: PageLoadEvent, beacon: PageLoadBeacon = Depends(get_page_load_beacon)):
    return await beacon.send(event)
