from __future__ import annotations

from typing import List

from fastapi import APIRouter

from .schemas import (
    CampaignCreateIn,
    CampaignOut,
    CampaignPatchIn,
    LeaderboardsOut,
    WarbandRankOut,
    WarriorBoard,
    WarriorRankOut,
)
from .service import (
    create_campaign,
    games_won,
    get_campaign,
    highest_rated_warbands,
    list_campaigns,
    patch_campaign,
    richest_warbands,
    warrior_leaderboard,
)

router = APIRouter(tags=["campaigns"])


@router.get("/campaigns", response_model=List[CampaignOut])
def api_list_campaigns() -> List[CampaignOut]:
    return list_campaigns()


@router.post("/campaigns", response_model=CampaignOut)
def api_create_campaign(body: CampaignCreateIn) -> CampaignOut:
    return create_campaign(body.model_dump())


@router.get("/campaigns/{campaign_id}", response_model=CampaignOut)
def api_get_campaign(campaign_id: int) -> CampaignOut:
    return get_campaign(campaign_id)


@router.patch("/campaigns/{campaign_id}", response_model=CampaignOut)
def api_patch_campaign(campaign_id: int, body: CampaignPatchIn) -> CampaignOut:
    return patch_campaign(campaign_id, body.model_dump(exclude_unset=True))


@router.get("/campaigns/{campaign_id}/leaderboards", response_model=LeaderboardsOut)
def api_leaderboards(campaign_id: int) -> LeaderboardsOut:
    return LeaderboardsOut(
        games_won=games_won(campaign_id),
        treasury=richest_warbands(campaign_id),
        rating=highest_rated_warbands(campaign_id),
        kills=warrior_leaderboard(campaign_id, "kills"),
        injuries_received=warrior_leaderboard(campaign_id, "injuries_received"),
        injuries_inflicted=warrior_leaderboard(campaign_id, "injuries_inflicted"),
    )


@router.get("/campaigns/{campaign_id}/leaderboards/warriors/{board}", response_model=List[WarriorRankOut])
def api_warrior_leaderboard(campaign_id: int, board: WarriorBoard) -> List[WarriorRankOut]:
    return warrior_leaderboard(campaign_id, board)


@router.get("/campaigns/{campaign_id}/leaderboards/games_won", response_model=List[WarbandRankOut])
def api_games_won(campaign_id: int) -> List[WarbandRankOut]:
    return games_won(campaign_id)
