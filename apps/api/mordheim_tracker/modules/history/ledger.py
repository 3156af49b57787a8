"""
Warband state-change ledger writer.

Every change to a warband's treasury, experience or rating goes through
apply_state_change(), which updates the warband row and appends exactly one
ledger row inside the caller's transaction. The *_after columns always hold the
warband's value right after the delta, so per warband the ledger is a running
total starting from the warband's initial values.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from mordheim_tracker.core.db import fetch_one, insert_row, now_iso, update_row

CHANGE_MATCH_GOLD = "match_gold"
CHANGE_MATCH_EXPERIENCE = "match_experience"
CHANGE_MANUAL_ADJUSTMENT = "manual_adjustment"
CHANGE_WARRIOR_EXPERIENCE = "warrior_experience"
CHANGE_ROSTER = "roster_change"

CHANGE_TYPES = (
    CHANGE_MATCH_GOLD,
    CHANGE_MATCH_EXPERIENCE,
    CHANGE_MANUAL_ADJUSTMENT,
    CHANGE_WARRIOR_EXPERIENCE,
    CHANGE_ROSTER,
)

RATING_PER_WARRIOR = 5


def rating_for(warrior_count: int, total_experience: int) -> int:
    """Rating of a roster: 5 per warrior plus their summed experience."""
    return warrior_count * RATING_PER_WARRIOR + total_experience


def compute_rating(conn: sqlite3.Connection, warband_id: int) -> int:
    """Rating of the current roster; the roster is the living warriors, the dead are off it."""
    row = conn.execute(
        "SELECT COUNT(1) AS n, COALESCE(SUM(experience), 0) AS xp FROM warriors WHERE warband_id=? AND is_alive=1;",
        (warband_id,),
    ).fetchone()
    return rating_for(int(row["n"]), int(row["xp"]))


def row_to_entry(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def apply_state_change(
    conn: sqlite3.Connection,
    warband_id: int,
    *,
    change_type: str,
    match_id: Optional[int] = None,
    treasury_delta: int = 0,
    experience_delta: int = 0,
    rating_delta: int = 0,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    if change_type not in CHANGE_TYPES:
        raise ValueError(f"unknown change_type: {change_type!r}")

    wb = fetch_one(conn, "warbands", warband_id, label="Warband")
    if match_id is not None:
        fetch_one(conn, "matches", match_id, label="Match")

    treasury_after = int(wb["treasury"]) + int(treasury_delta)
    experience_after = int(wb["experience"]) + int(experience_delta)
    rating_after = int(wb["rating"]) + int(rating_delta)

    update_row(
        conn,
        "warbands",
        warband_id,
        {"treasury": treasury_after, "experience": experience_after, "rating": rating_after},
    )

    entry: Dict[str, Any] = {
        "warband_id": warband_id,
        "match_id": match_id,
        "treasury_delta": int(treasury_delta),
        "experience_delta": int(experience_delta),
        "rating_delta": int(rating_delta),
        "treasury_after": treasury_after,
        "experience_after": experience_after,
        "rating_after": rating_after,
        "change_type": change_type,
        "description": description,
        "timestamp": now_iso(),
    }
    entry["id"] = insert_row(conn, "warband_state_changes", entry)
    return entry


def sync_rating(
    conn: sqlite3.Connection,
    warband_id: int,
    *,
    change_type: str,
    match_id: Optional[int] = None,
    description: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Bring the stored rating in line with the roster; no entry when it already matches."""
    wb = fetch_one(conn, "warbands", warband_id, label="Warband")
    delta = compute_rating(conn, warband_id) - int(wb["rating"])
    if delta == 0:
        return None
    return apply_state_change(
        conn,
        warband_id,
        change_type=change_type,
        match_id=match_id,
        rating_delta=delta,
        description=description,
    )
