from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Campaign(SQLModel, table=True):
    __tablename__ = "campaigns"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = Field(default=None)
    start_date: str
    end_date: str

    created_at: str
    updated_at: str
