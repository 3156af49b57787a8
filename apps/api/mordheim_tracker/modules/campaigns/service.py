from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from mordheim_tracker.core.db import fetch_one, insert_row, reading, reject_nulls, transaction, update_row


def _row_to_campaign(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def _warband_brief(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["warband_id"],
        "name": row["warband_name"],
        "color": row["warband_color"],
        "icon": row["warband_icon"],
    }


def list_campaigns() -> List[Dict[str, Any]]:
    with reading() as conn:
        rows = conn.execute("SELECT * FROM campaigns ORDER BY start_date DESC, id DESC;").fetchall()
        return [_row_to_campaign(r) for r in rows]


def get_campaign(campaign_id: int) -> Dict[str, Any]:
    with reading() as conn:
        return _row_to_campaign(fetch_one(conn, "campaigns", campaign_id, label="Campaign"))


def create_campaign(data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        cid = insert_row(
            conn,
            "campaigns",
            {
                "name": data["name"],
                "description": data.get("description"),
                "start_date": data["start_date"],
                "end_date": data["end_date"],
            },
        )
    return get_campaign(cid)


def patch_campaign(campaign_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    allowed = {"name", "description", "start_date", "end_date"}
    updates = {k: v for k, v in patch.items() if k in allowed}
    reject_nulls(updates, ("name", "start_date", "end_date"))
    with transaction() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        if updates:
            update_row(conn, "campaigns", campaign_id, updates)
    return get_campaign(campaign_id)


# -------------------------
# Leaderboards
# -------------------------
def games_won(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            """
            SELECT w.id AS warband_id, w.name AS warband_name, w.color AS warband_color, w.icon AS warband_icon,
                   COUNT(mw.id) AS value
            FROM warbands w
            JOIN match_winners mw ON mw.warband_id = w.id
            WHERE w.campaign_id=?
            GROUP BY w.id
            ORDER BY value DESC, w.name ASC;
            """,
            (campaign_id,),
        ).fetchall()
        return [{"warband": _warband_brief(r), "value": int(r["value"])} for r in rows]


def _ranked_by_column(campaign_id: int, column: str) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            f"""
            SELECT id AS warband_id, name AS warband_name, color AS warband_color, icon AS warband_icon,
                   {column} AS value
            FROM warbands
            WHERE campaign_id=?
            ORDER BY {column} DESC, name ASC;
            """,
            (campaign_id,),
        ).fetchall()
        return [{"warband": _warband_brief(r), "value": int(r["value"])} for r in rows]


def richest_warbands(campaign_id: int) -> List[Dict[str, Any]]:
    return _ranked_by_column(campaign_id, "treasury")


def highest_rated_warbands(campaign_id: int) -> List[Dict[str, Any]]:
    return _ranked_by_column(campaign_id, "rating")


# event-derived warrior boards: (warrior join column, event flag)
_WARRIOR_BOARDS = {
    "kills": ("warrior_id", "death"),
    "injuries_received": ("defender_id", "injury"),
    "injuries_inflicted": ("warrior_id", "injury"),
}


def warrior_leaderboard(campaign_id: int, board: str) -> List[Dict[str, Any]]:
    join_col, flag = _WARRIOR_BOARDS[board]
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            f"""
            SELECT wr.id AS warrior_id, wr.name AS warrior_name, wr.type AS warrior_type, wr.is_alive AS is_alive,
                   w.id AS warband_id, w.name AS warband_name, w.color AS warband_color, w.icon AS warband_icon,
                   COUNT(e.id) AS value
            FROM events e
            JOIN warriors wr ON wr.id = e.{join_col}
            JOIN warbands w ON w.id = wr.warband_id
            WHERE e.campaign_id=? AND e.{flag}=1
            GROUP BY wr.id, w.id
            ORDER BY value DESC, wr.name ASC;
            """,
            (campaign_id,),
        ).fetchall()
        return [
            {
                "warrior": {
                    "id": r["warrior_id"],
                    "name": r["warrior_name"],
                    "type": r["warrior_type"],
                    "is_alive": bool(r["is_alive"]),
                },
                "warband": _warband_brief(r),
                "value": int(r["value"]),
            }
            for r in rows
        ]
