from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Match(SQLModel, table=True):
    __tablename__ = "matches"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(foreign_key="campaigns.id", index=True)
    name: str
    date: str
    match_type: str  # 1v1|multiplayer|team|battle_royale
    status: str = Field(index=True)  # scheduled|active|ended|resolved
    scenario_id: int

    created_at: str
    updated_at: str


class MatchParticipant(SQLModel, table=True):
    __tablename__ = "match_participants"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)


class MatchWinner(SQLModel, table=True):
    __tablename__ = "match_winners"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    name: str


class TeamMember(SQLModel, table=True):
    __tablename__ = "team_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)


class Placement(SQLModel, table=True):
    __tablename__ = "placements"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)
    position: int


class Casualty(SQLModel, table=True):
    __tablename__ = "casualties"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    type: str  # out_of_action|serious_injury|death
    description: Optional[str] = Field(default=None)
    timestamp: str
    victim_warrior_id: Optional[int] = Field(default=None, foreign_key="warriors.id")
    victim_warband_id: Optional[int] = Field(default=None, foreign_key="warbands.id")
    killer_warrior_id: Optional[int] = Field(default=None, foreign_key="warriors.id")
    killer_warband_id: Optional[int] = Field(default=None, foreign_key="warbands.id")
