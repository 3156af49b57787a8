from __future__ import annotations

from fastapi import APIRouter

from .schemas import BroadcastOut
from .service import broadcast_summary

router = APIRouter(tags=["display"])


@router.get("/campaigns/{campaign_id}/broadcast", response_model=BroadcastOut)
def api_broadcast(campaign_id: int) -> BroadcastOut:
    return broadcast_summary(campaign_id)
