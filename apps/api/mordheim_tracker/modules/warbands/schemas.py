from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from mordheim_tracker.modules.warriors.schemas import WarriorOut


class WarbandCreateIn(BaseModel):
    name: str = Field(min_length=1)
    faction: str = Field(min_length=1)
    color: Optional[str] = None
    icon: Optional[str] = None
    notes: Optional[str] = None
    treasury: int = 0


# treasury / experience / rating are not patchable; use the ledger endpoints
class WarbandPatchIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    faction: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = None
    icon: Optional[str] = None
    notes: Optional[str] = None


class WarbandOut(BaseModel):
    id: int
    campaign_id: int
    name: str
    faction: str
    color: Optional[str] = None
    icon: Optional[str] = None
    notes: Optional[str] = None
    treasury: int
    experience: int
    rating: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WarbandWithWarriorsOut(WarbandOut):
    warriors: List[WarriorOut] = Field(default_factory=list)
