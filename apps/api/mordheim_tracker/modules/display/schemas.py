from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from mordheim_tracker.modules.campaigns.schemas import CampaignOut
from mordheim_tracker.modules.history.schemas import ProgressionOut
from mordheim_tracker.modules.matches.schemas import MatchStatus, MatchWarbandOut


class StandingOut(BaseModel):
    position: int
    warband_id: int
    name: str
    faction: str
    color: Optional[str] = None
    icon: Optional[str] = None
    rating: int
    treasury: int
    wins: int
    warriors_alive: int


class RecentResultOut(BaseModel):
    id: int
    name: str
    date: str
    status: MatchStatus
    winners: List[MatchWarbandOut] = Field(default_factory=list)
    participants: List[MatchWarbandOut] = Field(default_factory=list)
    kills: int
    injuries: int
    total_moments: int


class BroadcastOut(BaseModel):
    campaign: CampaignOut
    standings: List[StandingOut] = Field(default_factory=list)
    recent_results: List[RecentResultOut] = Field(default_factory=list)
    headline: str
    news: List[str] = Field(default_factory=list)
    progression: ProgressionOut
