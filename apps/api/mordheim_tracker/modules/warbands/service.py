from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from fastapi import HTTPException

from mordheim_tracker.core.db import fetch_one, insert_row, reading, reject_nulls, transaction, update_row
from mordheim_tracker.core.observability import audit
from mordheim_tracker.modules.warriors.service import row_to_warrior

# rows that keep a warband alive: (label, table, column)
_REFERENCES = (
    ("warriors", "warriors", "warband_id"),
    ("match_participants", "match_participants", "warband_id"),
    ("match_winners", "match_winners", "warband_id"),
    ("team_members", "team_members", "warband_id"),
    ("placements", "placements", "warband_id"),
    ("casualties_as_victim", "casualties", "victim_warband_id"),
    ("casualties_as_killer", "casualties", "killer_warband_id"),
    ("state_changes", "warband_state_changes", "warband_id"),
)

_PATCHABLE = ("name", "faction", "color", "icon", "notes")


def row_to_warband(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def list_warbands(campaign_id: int, *, with_warriors: bool = False) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            "SELECT * FROM warbands WHERE campaign_id=? ORDER BY name ASC, id ASC;",
            (campaign_id,),
        ).fetchall()
        out = [row_to_warband(r) for r in rows]
        if with_warriors:
            for wb in out:
                wrs = conn.execute(
                    "SELECT * FROM warriors WHERE warband_id=? ORDER BY created_at ASC, id ASC;",
                    (wb["id"],),
                ).fetchall()
                wb["warriors"] = [row_to_warrior(w) for w in wrs]
        return out


def get_warband(warband_id: int) -> Dict[str, Any]:
    with reading() as conn:
        return row_to_warband(fetch_one(conn, "warbands", warband_id, label="Warband"))


def create_warband(campaign_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        wid = insert_row(
            conn,
            "warbands",
            {
                "campaign_id": campaign_id,
                "name": data["name"],
                "faction": data["faction"],
                "color": data.get("color"),
                "icon": data.get("icon"),
                "notes": data.get("notes"),
                # initial values are the starting point of the ledger's running totals
                "treasury": int(data.get("treasury") or 0),
                "experience": 0,
                "rating": 0,
            },
        )
    return get_warband(wid)


def patch_warband(warband_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    updates = {k: v for k, v in patch.items() if k in _PATCHABLE}
    reject_nulls(updates, ("name", "faction"))
    with transaction() as conn:
        fetch_one(conn, "warbands", warband_id, label="Warband")
        if updates:
            update_row(conn, "warbands", warband_id, updates)
    return get_warband(warband_id)


def _reference_counts(conn: sqlite3.Connection, warband_id: int) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for label, table, column in _REFERENCES:
        n = conn.execute(f"SELECT COUNT(1) AS n FROM {table} WHERE {column}=?;", (warband_id,)).fetchone()["n"]
        if n:
            counts[label] = int(n)
    return counts


def delete_warband(warband_id: int) -> Dict[str, Any]:
    """Delete an unreferenced warband; anything still pointing at it blocks the delete (409)."""
    with transaction() as conn:
        row = fetch_one(conn, "warbands", warband_id, label="Warband")
        counts = _reference_counts(conn, warband_id)
        if counts:
            audit("warband.delete_blocked", __name__, warband_id=warband_id, references=counts)
            raise HTTPException(
                status_code=409,
                detail={
                    "error": "conflict",
                    "message": f"Warband with id {warband_id} is still referenced",
                    "details": {"references": counts},
                },
            )
        conn.execute("DELETE FROM warbands WHERE id=?;", (warband_id,))
    audit("warband.deleted", __name__, warband_id=warband_id)
    return row_to_warband(row)


def warband_warriors(warband_id: int) -> List[Dict[str, Any]]:
    """Roster in creation order; kills counted from resolved lethal events."""
    with reading() as conn:
        fetch_one(conn, "warbands", warband_id, label="Warband")
        rows = conn.execute(
            """
            SELECT wr.*, COUNT(e.id) AS event_kills
            FROM warriors wr
            LEFT JOIN events e ON e.warrior_id = wr.id AND e.death = 1
            WHERE wr.warband_id=?
            GROUP BY wr.id
            ORDER BY wr.created_at ASC, wr.id ASC;
            """,
            (warband_id,),
        ).fetchall()
        out = []
        for r in rows:
            w = row_to_warrior(r)
            w["kills"] = int(r["event_kills"])
            out.append(w)
        return out
