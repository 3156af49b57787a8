from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(foreign_key="campaigns.id", index=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    type: str  # knock_down|moment
    description: Optional[str] = Field(default=None)
    timestamp: str
    warrior_id: int = Field(foreign_key="warriors.id", index=True)
    defender_id: Optional[int] = Field(default=None, foreign_key="warriors.id", index=True)

    # unresolved -> resolved(outcome, resolved_at); re-resolution overwrites
    resolved: bool = Field(default=False)
    injury_type: Optional[str] = Field(default=None)
    outcome: Optional[str] = Field(default=None)  # lethal|injurious|other
    death: bool = Field(default=False)
    injury: bool = Field(default=False)
    resolved_at: Optional[str] = Field(default=None)
    # set when this event's resolution moved the defender from alive to dead
    killed_defender: bool = Field(default=False)

    created_at: str
    updated_at: str
