from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

WarriorType = Literal["hero", "henchman"]


class WarriorCreateIn(BaseModel):
    name: str = Field(min_length=1)
    type: WarriorType
    warrior_class: Optional[str] = None
    is_leader: bool = False
    experience: int = Field(default=0, ge=0)
    equipment: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)


class WarriorPatchIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[WarriorType] = None
    warrior_class: Optional[str] = None
    is_leader: Optional[bool] = None
    experience: Optional[int] = Field(default=None, ge=0)
    kills: Optional[int] = Field(default=None, ge=0)
    injuries_caused: Optional[int] = Field(default=None, ge=0)
    injuries_received: Optional[int] = Field(default=None, ge=0)
    games_played: Optional[int] = Field(default=None, ge=0)
    is_alive: Optional[bool] = None
    death_date: Optional[str] = None
    death_description: Optional[str] = None
    equipment: Optional[List[str]] = None
    skills: Optional[List[str]] = None


class WarriorExperienceIn(BaseModel):
    amount: int
    match_id: Optional[int] = None


class WarriorOut(BaseModel):
    id: int
    campaign_id: int
    warband_id: int
    name: str
    type: WarriorType
    warrior_class: Optional[str] = None
    is_leader: bool = False
    experience: int = 0
    kills: int = 0
    injuries_caused: int = 0
    injuries_received: int = 0
    games_played: int = 0
    is_alive: bool = True
    death_date: Optional[str] = None
    death_description: Optional[str] = None
    equipment: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WarbandRefOut(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None


class WarriorDetailOut(WarriorOut):
    warband: WarbandRefOut
