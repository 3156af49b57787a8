from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from mordheim_tracker.modules.events.schemas import EventOut
from mordheim_tracker.modules.warriors.schemas import WarriorOut

MatchType = Literal["1v1", "multiplayer", "team", "battle_royale"]
MatchStatus = Literal["scheduled", "active", "ended", "resolved"]
CasualtyType = Literal["out_of_action", "serious_injury", "death"]


class MatchCreateIn(BaseModel):
    name: str = Field(min_length=1)
    match_type: MatchType
    scenario_id: int
    date: Optional[str] = None
    status: Optional[MatchStatus] = None


class MatchPatchIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    date: Optional[str] = None
    match_type: Optional[MatchType] = None
    status: Optional[MatchStatus] = None
    scenario_id: Optional[int] = None


class ParticipantsIn(BaseModel):
    warband_ids: List[int] = Field(min_length=2)


class WinnersIn(BaseModel):
    warband_ids: List[int] = Field(default_factory=list)


class TeamCreateIn(BaseModel):
    name: str = Field(min_length=1)
    warband_ids: List[int] = Field(default_factory=list)


class PlacementIn(BaseModel):
    warband_id: int
    position: int = Field(ge=1)


class PlacementsIn(BaseModel):
    placements: List[PlacementIn] = Field(default_factory=list)


class CasualtyCreateIn(BaseModel):
    type: CasualtyType
    description: Optional[str] = None
    timestamp: Optional[str] = None
    victim_warrior_id: Optional[int] = None
    victim_warband_id: Optional[int] = None
    killer_warrior_id: Optional[int] = None
    killer_warband_id: Optional[int] = None


class MatchWarbandOut(BaseModel):
    id: int
    name: str
    faction: str
    color: Optional[str] = None
    icon: Optional[str] = None


class MatchWarbandRosterOut(MatchWarbandOut):
    warriors: List[WarriorOut] = Field(default_factory=list)


class TeamOut(BaseModel):
    id: int
    name: str
    members: List[MatchWarbandOut] = Field(default_factory=list)


class PlacementOut(BaseModel):
    position: int
    warband: MatchWarbandOut


class CasualtyOut(BaseModel):
    id: int
    match_id: int
    type: CasualtyType
    description: Optional[str] = None
    timestamp: str
    victim_warrior_id: Optional[int] = None
    victim_warband_id: Optional[int] = None
    killer_warrior_id: Optional[int] = None
    killer_warband_id: Optional[int] = None


class MatchOut(BaseModel):
    id: int
    campaign_id: int
    name: str
    date: str
    match_type: MatchType
    status: MatchStatus
    scenario_id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    participants: List[MatchWarbandOut] = Field(default_factory=list)
    winners: List[MatchWarbandOut] = Field(default_factory=list)
    events: List[EventOut] = Field(default_factory=list)


class MatchDetailsOut(MatchOut):
    teams: List[TeamOut] = Field(default_factory=list)
    placements: List[PlacementOut] = Field(default_factory=list)
    casualties: List[CasualtyOut] = Field(default_factory=list)
