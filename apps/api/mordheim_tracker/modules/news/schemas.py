from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class NewsIn(BaseModel):
    content: str = Field(min_length=1, max_length=200)

    @field_validator("content", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class NewsOut(BaseModel):
    id: int
    campaign_id: int
    content: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
