from __future__ import annotations

from typing import List

from fastapi import APIRouter

from .schemas import CampaignHistoryEntryOut, LedgerAdjustIn, LedgerEntryOut, ProgressionOut
from .service import add_experience, add_gold, campaign_history, campaign_progression, warband_progression

router = APIRouter(tags=["history"])


@router.post("/warbands/{warband_id}/gold", response_model=LedgerEntryOut)
def api_add_gold(warband_id: int, body: LedgerAdjustIn) -> LedgerEntryOut:
    return add_gold(warband_id, body.amount, match_id=body.match_id, description=body.description)


@router.post("/warbands/{warband_id}/experience", response_model=LedgerEntryOut)
def api_add_experience(warband_id: int, body: LedgerAdjustIn) -> LedgerEntryOut:
    return add_experience(warband_id, body.amount, match_id=body.match_id, description=body.description)


@router.get("/warbands/{warband_id}/progression", response_model=List[LedgerEntryOut])
def api_warband_progression(warband_id: int) -> List[LedgerEntryOut]:
    return warband_progression(warband_id)


@router.get("/campaigns/{campaign_id}/history", response_model=List[CampaignHistoryEntryOut])
def api_campaign_history(campaign_id: int) -> List[CampaignHistoryEntryOut]:
    return campaign_history(campaign_id)


@router.get("/campaigns/{campaign_id}/progression", response_model=ProgressionOut)
def api_campaign_progression(campaign_id: int) -> ProgressionOut:
    return ProgressionOut(**campaign_progression(campaign_id))
