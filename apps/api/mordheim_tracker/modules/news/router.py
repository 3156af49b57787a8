from __future__ import annotations

from typing import List

from fastapi import APIRouter

from .schemas import NewsIn, NewsOut
from .service import create_news, delete_news, list_news, update_news

router = APIRouter(tags=["news"])


@router.get("/campaigns/{campaign_id}/news", response_model=List[NewsOut])
def api_list_news(campaign_id: int) -> List[NewsOut]:
    return list_news(campaign_id)


@router.post("/campaigns/{campaign_id}/news", response_model=NewsOut)
def api_create_news(campaign_id: int, body: NewsIn) -> NewsOut:
    return create_news(campaign_id, body.content)


@router.patch("/news/{item_id}", response_model=NewsOut)
def api_update_news(item_id: int, body: NewsIn) -> NewsOut:
    return update_news(item_id, body.content)


@router.delete("/news/{item_id}", response_model=NewsOut)
def api_delete_news(item_id: int) -> NewsOut:
    return delete_news(item_id)
