from __future__ import annotations

from typing import List, Optional
from sqlmodel import SQLModel, Field


# append-only (enforced by SQLite triggers below and in migration)
class WarbandStateChange(SQLModel, table=True):
    __tablename__ = "warband_state_changes"

    id: Optional[int] = Field(default=None, primary_key=True)
    warband_id: int = Field(foreign_key="warbands.id", index=True)
    match_id: Optional[int] = Field(default=None, foreign_key="matches.id", index=True)

    treasury_delta: int = Field(default=0)
    experience_delta: int = Field(default=0)
    rating_delta: int = Field(default=0)
    treasury_after: int
    experience_after: int
    rating_after: int

    change_type: str  # match_gold|match_experience|manual_adjustment|warrior_experience|roster_change
    description: Optional[str] = Field(default=None)
    timestamp: str = Field(index=True)


LEDGER_TRIGGERS: List[str] = [
    """
    CREATE TRIGGER IF NOT EXISTS trg_warband_state_changes_no_update
    BEFORE UPDATE ON warband_state_changes
    BEGIN
      SELECT RAISE(ABORT, 'append-only: warband_state_changes cannot be updated');
    END;
    """,
    """
    CREATE TRIGGER IF NOT EXISTS trg_warband_state_changes_no_delete
    BEFORE DELETE ON warband_state_changes
    BEGIN
      SELECT RAISE(ABORT, 'append-only: warband_state_changes cannot be deleted');
    END;
    """,
]
