from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from mordheim_tracker.core.db import bad_request, fetch_one, insert_row, reading, transaction, update_row

MAX_CONTENT_LENGTH = 200


def clean_content(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise bad_request("News item is required")
    if len(text) > MAX_CONTENT_LENGTH:
        raise bad_request(f"Keep it under {MAX_CONTENT_LENGTH} characters", length=len(text))
    return text


def _row_to_item(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def list_news(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            "SELECT * FROM custom_news_items WHERE campaign_id=? ORDER BY created_at DESC, id DESC;",
            (campaign_id,),
        ).fetchall()
        return [_row_to_item(r) for r in rows]


def create_news(campaign_id: int, content: str) -> Dict[str, Any]:
    text = clean_content(content)
    with transaction() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        nid = insert_row(conn, "custom_news_items", {"campaign_id": campaign_id, "content": text})
        return _row_to_item(fetch_one(conn, "custom_news_items", nid, label="News item"))


def update_news(item_id: int, content: str) -> Dict[str, Any]:
    text = clean_content(content)
    with transaction() as conn:
        fetch_one(conn, "custom_news_items", item_id, label="News item")
        update_row(conn, "custom_news_items", item_id, {"content": text})
        return _row_to_item(fetch_one(conn, "custom_news_items", item_id, label="News item"))


def delete_news(item_id: int) -> Dict[str, Any]:
    with transaction() as conn:
        row = fetch_one(conn, "custom_news_items", item_id, label="News item")
        conn.execute("DELETE FROM custom_news_items WHERE id=?;", (item_id,))
        return _row_to_item(row)
