from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Warrior(SQLModel, table=True):
    __tablename__ = "warriors"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(foreign_key="campaigns.id", index=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)
    name: str
    type: str  # hero|henchman
    warrior_class: Optional[str] = Field(default=None)
    is_leader: bool = Field(default=False)

    experience: int = Field(default=0)
    kills: int = Field(default=0)
    injuries_caused: int = Field(default=0)
    injuries_received: int = Field(default=0)
    games_played: int = Field(default=0)

    # alive -> dead is one-way except for a manual revive through the update path
    is_alive: bool = Field(default=True)
    death_date: Optional[str] = Field(default=None)
    death_description: Optional[str] = Field(default=None)

    equipment_json: str = Field(default="[]")
    skills_json: str = Field(default="[]")

    created_at: str
    updated_at: str
