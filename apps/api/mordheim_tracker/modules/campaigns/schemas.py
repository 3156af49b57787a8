from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

WarriorBoard = Literal["kills", "injuries_received", "injuries_inflicted"]


class CampaignCreateIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)


class CampaignPatchIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CampaignOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    start_date: str
    end_date: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WarbandBriefOut(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None


class WarriorBriefOut(BaseModel):
    id: int
    name: str
    type: str
    is_alive: bool


class WarbandRankOut(BaseModel):
    warband: WarbandBriefOut
    value: int


class WarriorRankOut(BaseModel):
    warrior: WarriorBriefOut
    warband: WarbandBriefOut
    value: int


class LeaderboardsOut(BaseModel):
    games_won: List[WarbandRankOut] = Field(default_factory=list)
    treasury: List[WarbandRankOut] = Field(default_factory=list)
    rating: List[WarbandRankOut] = Field(default_factory=list)
    kills: List[WarriorRankOut] = Field(default_factory=list)
    injuries_received: List[WarriorRankOut] = Field(default_factory=list)
    injuries_inflicted: List[WarriorRankOut] = Field(default_factory=list)
