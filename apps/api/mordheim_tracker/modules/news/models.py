from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class CustomNewsItem(SQLModel, table=True):
    __tablename__ = "custom_news_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(foreign_key="campaigns.id", index=True)
    content: str

    created_at: str
    updated_at: str
