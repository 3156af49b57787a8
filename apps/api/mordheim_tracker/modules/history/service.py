from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from mordheim_tracker.core.db import fetch_one, reading, transaction
from mordheim_tracker.core.observability import audit

from .ledger import (
    CHANGE_MANUAL_ADJUSTMENT,
    CHANGE_MATCH_EXPERIENCE,
    CHANGE_MATCH_GOLD,
    apply_state_change,
    row_to_entry,
)
from .progression import (
    METRICS,
    build_per_match_points,
    build_progress_chart_data,
    build_time_series,
    group_by_warband,
    warbands_from_points,
)


def audit_ledger_entry(entry: Dict[str, Any]) -> None:
    audit(
        "ledger.append",
        __name__,
        ledger_id=entry["id"],
        warband_id=entry["warband_id"],
        match_id=entry["match_id"],
        change_type=entry["change_type"],
        treasury_delta=entry["treasury_delta"],
        experience_delta=entry["experience_delta"],
        rating_delta=entry["rating_delta"],
    )


def add_gold(warband_id: int, amount: int, match_id: Optional[int] = None, description: Optional[str] = None) -> Dict[str, Any]:
    change_type = CHANGE_MATCH_GOLD if match_id is not None else CHANGE_MANUAL_ADJUSTMENT
    with transaction() as conn:
        entry = apply_state_change(
            conn,
            warband_id,
            change_type=change_type,
            match_id=match_id,
            treasury_delta=amount,
            description=description,
        )
    audit_ledger_entry(entry)
    return entry


def add_experience(warband_id: int, amount: int, match_id: Optional[int] = None, description: Optional[str] = None) -> Dict[str, Any]:
    change_type = CHANGE_MATCH_EXPERIENCE if match_id is not None else CHANGE_MANUAL_ADJUSTMENT
    with transaction() as conn:
        entry = apply_state_change(
            conn,
            warband_id,
            change_type=change_type,
            match_id=match_id,
            experience_delta=amount,
            description=description,
        )
    audit_ledger_entry(entry)
    return entry


def campaign_history(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            """
            SELECT sc.*,
                   w.name AS warband_name, w.color AS warband_color, w.icon AS warband_icon,
                   m.name AS match_name, m.date AS match_date
            FROM warband_state_changes sc
            JOIN warbands w ON w.id = sc.warband_id
            LEFT JOIN matches m ON m.id = sc.match_id
            WHERE w.campaign_id=?
            ORDER BY sc.timestamp ASC, sc.id ASC;
            """,
            (campaign_id,),
        ).fetchall()
        return [dict(r) for r in rows]


def warband_progression(warband_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "warbands", warband_id, label="Warband")
        rows = conn.execute(
            "SELECT * FROM warband_state_changes WHERE warband_id=? ORDER BY timestamp ASC, id ASC;",
            (warband_id,),
        ).fetchall()
        return [row_to_entry(r) for r in rows]


def campaign_progression(campaign_id: int) -> Dict[str, Any]:
    records = campaign_history(campaign_id)
    series = group_by_warband(build_time_series(records))
    match_points = build_per_match_points(records)
    return {
        "is_empty": not series,
        "series": {wid: asdict(s) for wid, s in series.items()},
        "warbands": [asdict(m) for m in warbands_from_points(match_points)],
        "charts": {metric: build_progress_chart_data(match_points, metric) for metric in METRICS},
    }
