from __future__ import annotations

from typing import Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field

from .injuries import InjuryType, OutcomeCategory

EventType = Literal["knock_down", "moment"]


class EventCreateIn(BaseModel):
    type: EventType
    warrior_id: int
    defender_id: Optional[int] = None
    description: Optional[str] = None
    timestamp: Optional[str] = None


class EventPatchIn(BaseModel):
    type: Optional[EventType] = None
    description: Optional[str] = None


class ResolveEventIn(BaseModel):
    injury_type: InjuryType


class ResolveHenchmanIn(BaseModel):
    death: bool


class EventOut(BaseModel):
    id: int
    campaign_id: int
    match_id: int
    type: EventType
    description: Optional[str] = None
    timestamp: str
    warrior_id: int
    defender_id: Optional[int] = None
    resolved: bool = False
    injury_type: Optional[InjuryType] = None
    outcome: Optional[OutcomeCategory] = None
    death: bool = False
    injury: bool = False
    resolved_at: Optional[str] = None
    killed_defender: bool = False


class InjuryOut(BaseModel):
    code: InjuryType
    roll: Union[int, Tuple[int, int]]
    name: str
    outcome: OutcomeCategory
    stat_effect: Optional[str] = None


class GamesPlayedOut(BaseModel):
    match_id: int
    warriors_updated: int = Field(ge=0)
