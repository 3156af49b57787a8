from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from mordheim_tracker.core.db import (
    as_bool,
    dump_list,
    fetch_one,
    insert_row,
    json_list,
    now_iso,
    reading,
    reject_nulls,
    transaction,
    update_row,
)
from mordheim_tracker.modules.history.ledger import CHANGE_ROSTER, sync_rating

_PATCHABLE = (
    "name",
    "type",
    "warrior_class",
    "is_leader",
    "experience",
    "kills",
    "injuries_caused",
    "injuries_received",
    "games_played",
    "is_alive",
    "death_date",
    "death_description",
)

# every patchable field except the death record and class is NOT NULL
_NOT_NULL = tuple(k for k in _PATCHABLE if k not in ("warrior_class", "death_date", "death_description")) + (
    "equipment",
    "skills",
)


def row_to_warrior(row: sqlite3.Row) -> Dict[str, Any]:
    d = dict(row)
    d["is_leader"] = as_bool(d.get("is_leader"))
    d["is_alive"] = as_bool(d.get("is_alive"))
    d["equipment"] = json_list(d.pop("equipment_json", None))
    d["skills"] = json_list(d.pop("skills_json", None))
    return d


def _warband_brief(conn: sqlite3.Connection, warband_id: int) -> Dict[str, Any]:
    wb = fetch_one(conn, "warbands", warband_id, label="Warband")
    return {"id": wb["id"], "name": wb["name"], "color": wb["color"], "icon": wb["icon"]}


def get_warrior(warrior_id: int) -> Dict[str, Any]:
    with reading() as conn:
        w = row_to_warrior(fetch_one(conn, "warriors", warrior_id, label="Warrior"))
        w["warband"] = _warband_brief(conn, w["warband_id"])
        return w


def list_campaign_warriors(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            "SELECT * FROM warriors WHERE campaign_id=? ORDER BY warband_id ASC, created_at ASC, id ASC;",
            (campaign_id,),
        ).fetchall()
        return [row_to_warrior(r) for r in rows]


def create_warrior(warband_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        wb = fetch_one(conn, "warbands", warband_id, label="Warband")
        wid = insert_row(
            conn,
            "warriors",
            {
                "campaign_id": wb["campaign_id"],
                "warband_id": warband_id,
                "name": data["name"],
                "type": data["type"],
                "warrior_class": data.get("warrior_class"),
                "is_leader": 1 if data.get("is_leader") else 0,
                "experience": int(data.get("experience") or 0),
                "kills": 0,
                "injuries_caused": 0,
                "injuries_received": 0,
                "games_played": 0,
                "is_alive": 1,
                "equipment_json": dump_list(data.get("equipment")),
                "skills_json": dump_list(data.get("skills")),
            },
        )
        sync_rating(conn, warband_id, change_type=CHANGE_ROSTER, description=f"Recruited {data['name']}")
    return get_warrior(wid)


def patch_warrior(warrior_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update a warrior. Alive/dead and experience changes go back through the ledger
    as a rating resync; a death without a date is stamped now, a revive clears
    the death record.
    """
    reject_nulls(patch, _NOT_NULL)
    updates = {k: v for k, v in patch.items() if k in _PATCHABLE}
    if "equipment" in patch:
        updates["equipment_json"] = dump_list(patch["equipment"])
    if "skills" in patch:
        updates["skills_json"] = dump_list(patch["skills"])

    with transaction() as conn:
        current = row_to_warrior(fetch_one(conn, "warriors", warrior_id, label="Warrior"))

        if "is_alive" in updates:
            alive = bool(updates["is_alive"])
            updates["is_alive"] = 1 if alive else 0
            if not alive and current["is_alive"] and not updates.get("death_date"):
                updates["death_date"] = now_iso()
            if alive and not current["is_alive"]:
                updates.setdefault("death_date", None)
                updates.setdefault("death_description", None)
        if "is_leader" in updates:
            updates["is_leader"] = 1 if updates["is_leader"] else 0

        if updates:
            update_row(conn, "warriors", warrior_id, updates)

        if "is_alive" in updates or "experience" in updates:
            sync_rating(
                conn,
                current["warband_id"],
                change_type=CHANGE_ROSTER,
                description=f"Roster update for {updates.get('name') or current['name']}",
            )
    return get_warrior(warrior_id)
