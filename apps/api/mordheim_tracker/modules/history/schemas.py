from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

ChangeType = Literal["match_gold", "match_experience", "manual_adjustment", "warrior_experience", "roster_change"]


class LedgerAdjustIn(BaseModel):
    amount: int  # signed; no bounds on the resulting value
    match_id: Optional[int] = None
    description: Optional[str] = Field(default=None, max_length=500)


class LedgerEntryOut(BaseModel):
    id: int
    warband_id: int
    match_id: Optional[int] = None
    treasury_delta: int
    experience_delta: int
    rating_delta: int
    treasury_after: int
    experience_after: int
    rating_after: int
    change_type: ChangeType
    description: Optional[str] = None
    timestamp: str


class CampaignHistoryEntryOut(LedgerEntryOut):
    warband_name: Optional[str] = None
    warband_color: Optional[str] = None
    warband_icon: Optional[str] = None
    match_name: Optional[str] = None
    match_date: Optional[str] = None


class TimeSeriesPointOut(BaseModel):
    timestamp: str
    match_name: str
    warband_id: int
    warband_name: str
    warband_color: Optional[str] = None
    warband_icon: Optional[str] = None
    rating: int
    treasury: int
    experience: int


class WarbandSeriesOut(BaseModel):
    warband_id: int
    warband_name: str
    warband_color: Optional[str] = None
    warband_icon: Optional[str] = None
    points: List[TimeSeriesPointOut] = Field(default_factory=list)


class WarbandMetaOut(BaseModel):
    warband_id: int
    warband_name: str
    warband_color: Optional[str] = None
    warband_icon: Optional[str] = None


class ProgressionOut(BaseModel):
    # callers render an explicit empty state when is_empty
    is_empty: bool
    series: Dict[int, WarbandSeriesOut] = Field(default_factory=dict)
    warbands: List[WarbandMetaOut] = Field(default_factory=list)
    charts: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
