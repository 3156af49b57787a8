from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# treasury / experience / rating are written only through the state-change ledger
class Warband(SQLModel, table=True):
    __tablename__ = "warbands"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(foreign_key="campaigns.id", index=True)
    name: str
    faction: str
    color: Optional[str] = Field(default=None)
    icon: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)

    treasury: int = Field(default=0)
    experience: int = Field(default=0)
    rating: int = Field(default=0)

    created_at: str
    updated_at: str
