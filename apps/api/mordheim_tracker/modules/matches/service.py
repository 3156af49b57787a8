from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from mordheim_tracker.core.db import bad_request, fetch_one, insert_row, now_iso, reading, reject_nulls, transaction, update_row
from mordheim_tracker.modules.events.service import row_to_event
from mordheim_tracker.modules.warriors.service import row_to_warrior

STATUS_SCHEDULED = "scheduled"
STATUS_ENDED = "ended"
STATUS_RESOLVED = "resolved"

FINISHED_STATUSES = (STATUS_ENDED, STATUS_RESOLVED)

_PATCHABLE = ("name", "date", "match_type", "status", "scenario_id")


def row_to_match(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def _warband_brief(row: sqlite3.Row) -> Dict[str, Any]:
    return {"id": row["id"], "name": row["name"], "faction": row["faction"], "color": row["color"], "icon": row["icon"]}


def _linked_warbands(conn: sqlite3.Connection, table: str, match_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        f"""
        SELECT w.* FROM {table} t
        JOIN warbands w ON w.id = t.warband_id
        WHERE t.match_id=?
        ORDER BY t.id ASC;
        """,
        (match_id,),
    ).fetchall()
    return [_warband_brief(r) for r in rows]


def _participant_ids(conn: sqlite3.Connection, match_id: int) -> List[int]:
    rows = conn.execute("SELECT warband_id FROM match_participants WHERE match_id=?;", (match_id,)).fetchall()
    return [int(r["warband_id"]) for r in rows]


def _require_participants(conn: sqlite3.Connection, match_id: int, warband_ids: Iterable[int], *, what: str) -> None:
    participants = set(_participant_ids(conn, match_id))
    outsiders = sorted(set(warband_ids) - participants)
    if outsiders:
        raise bad_request(f"{what} must be match participants", match_id=match_id, warband_ids=outsiders)


def _with_summary(conn: sqlite3.Connection, match: Dict[str, Any]) -> Dict[str, Any]:
    mid = match["id"]
    match["participants"] = _linked_warbands(conn, "match_participants", mid)
    match["winners"] = _linked_warbands(conn, "match_winners", mid)
    rows = conn.execute("SELECT * FROM events WHERE match_id=? ORDER BY timestamp ASC, id ASC;", (mid,)).fetchall()
    match["events"] = [row_to_event(r) for r in rows]
    return match


def list_matches(campaign_id: int, status: Optional[str] = None) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        sql = "SELECT * FROM matches WHERE campaign_id=?"
        params: List[Any] = [campaign_id]
        if status:
            sql += " AND status=?"
            params.append(status)
        sql += " ORDER BY date DESC, id DESC;"
        rows = conn.execute(sql, params).fetchall()
        return [_with_summary(conn, row_to_match(r)) for r in rows]


def get_match(match_id: int) -> Dict[str, Any]:
    with reading() as conn:
        return _with_summary(conn, row_to_match(fetch_one(conn, "matches", match_id, label="Match")))


def get_match_details(match_id: int) -> Dict[str, Any]:
    """Match summary plus teams (with members), placements and casualties."""
    with reading() as conn:
        match = _with_summary(conn, row_to_match(fetch_one(conn, "matches", match_id, label="Match")))

        teams = []
        for t in conn.execute("SELECT * FROM teams WHERE match_id=? ORDER BY id ASC;", (match_id,)).fetchall():
            members = conn.execute(
                """
                SELECT w.* FROM team_members tm
                JOIN warbands w ON w.id = tm.warband_id
                WHERE tm.team_id=?
                ORDER BY tm.id ASC;
                """,
                (t["id"],),
            ).fetchall()
            teams.append({"id": t["id"], "name": t["name"], "members": [_warband_brief(m) for m in members]})
        match["teams"] = teams

        placements = conn.execute(
            """
            SELECT p.position, w.* FROM placements p
            JOIN warbands w ON w.id = p.warband_id
            WHERE p.match_id=?
            ORDER BY p.position ASC;
            """,
            (match_id,),
        ).fetchall()
        match["placements"] = [{"position": int(p["position"]), "warband": _warband_brief(p)} for p in placements]

        casualties = conn.execute(
            "SELECT * FROM casualties WHERE match_id=? ORDER BY timestamp ASC, id ASC;",
            (match_id,),
        ).fetchall()
        match["casualties"] = [dict(c) for c in casualties]
        return match


def match_warbands(match_id: int) -> List[Dict[str, Any]]:
    """Participating warbands, each with its living warriors."""
    with reading() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        rows = conn.execute(
            """
            SELECT w.* FROM match_participants mp
            JOIN warbands w ON w.id = mp.warband_id
            WHERE mp.match_id=?
            ORDER BY mp.id ASC;
            """,
            (match_id,),
        ).fetchall()
        out = []
        for r in rows:
            wb = _warband_brief(r)
            warriors = conn.execute(
                "SELECT * FROM warriors WHERE warband_id=? AND is_alive=1 ORDER BY created_at ASC, id ASC;",
                (r["id"],),
            ).fetchall()
            wb["warriors"] = [row_to_warrior(w) for w in warriors]
            out.append(wb)
        return out


def create_match(campaign_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        mid = insert_row(
            conn,
            "matches",
            {
                "campaign_id": campaign_id,
                "name": data["name"],
                "date": data.get("date") or now_iso(),
                "match_type": data["match_type"],
                "status": data.get("status") or STATUS_SCHEDULED,
                "scenario_id": data["scenario_id"],
            },
        )
    return get_match(mid)


def add_participants(match_id: int, warband_ids: List[int]) -> Dict[str, Any]:
    ids = list(dict.fromkeys(warband_ids))
    if len(ids) < 2:
        raise bad_request("A match needs at least two distinct warbands", warband_ids=ids)
    with transaction() as conn:
        match = fetch_one(conn, "matches", match_id, label="Match")
        existing = set(_participant_ids(conn, match_id))
        for wid in ids:
            wb = fetch_one(conn, "warbands", wid, label="Warband")
            if wb["campaign_id"] != match["campaign_id"]:
                raise bad_request("Warband belongs to another campaign", warband_id=wid, match_id=match_id)
            if wid not in existing:
                insert_row(conn, "match_participants", {"match_id": match_id, "warband_id": wid})
    return get_match(match_id)


def patch_match(match_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    updates = {k: v for k, v in patch.items() if k in _PATCHABLE}
    reject_nulls(updates, _PATCHABLE)
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        if updates:
            update_row(conn, "matches", match_id, updates)
    return get_match(match_id)


def set_winners(match_id: int, warband_ids: List[int]) -> Dict[str, Any]:
    """Replace the winner set and end the match."""
    ids = list(dict.fromkeys(warband_ids))
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        _require_participants(conn, match_id, ids, what="Winners")
        conn.execute("DELETE FROM match_winners WHERE match_id=?;", (match_id,))
        for wid in ids:
            insert_row(conn, "match_winners", {"match_id": match_id, "warband_id": wid})
        update_row(conn, "matches", match_id, {"status": STATUS_ENDED})
    return get_match(match_id)


def create_team(match_id: int, name: str, warband_ids: List[int]) -> Dict[str, Any]:
    ids = list(dict.fromkeys(warband_ids))
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        _require_participants(conn, match_id, ids, what="Team members")
        tid = insert_row(conn, "teams", {"match_id": match_id, "name": name})
        for wid in ids:
            insert_row(conn, "team_members", {"team_id": tid, "warband_id": wid})
    return get_match_details(match_id)


def set_placements(match_id: int, placements: List[Dict[str, int]]) -> Dict[str, Any]:
    """Replace the finishing order; positions and warbands must each be unique."""
    positions = [int(p["position"]) for p in placements]
    warbands = [int(p["warband_id"]) for p in placements]
    if len(set(positions)) != len(positions):
        raise bad_request("Placement positions must be unique", positions=positions)
    if len(set(warbands)) != len(warbands):
        raise bad_request("A warband can only be placed once", warband_ids=warbands)
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        _require_participants(conn, match_id, warbands, what="Placed warbands")
        conn.execute("DELETE FROM placements WHERE match_id=?;", (match_id,))
        for wid, pos in zip(warbands, positions):
            insert_row(conn, "placements", {"match_id": match_id, "warband_id": wid, "position": pos})
    return get_match_details(match_id)


def record_casualty(match_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        row: Dict[str, Any] = {
            "match_id": match_id,
            "type": data["type"],
            "description": data.get("description"),
            "timestamp": data.get("timestamp") or now_iso(),
        }
        for side in ("victim", "killer"):
            warrior_id = data.get(f"{side}_warrior_id")
            warband_id = data.get(f"{side}_warband_id")
            if warrior_id is not None:
                w = fetch_one(conn, "warriors", warrior_id, label="Warrior")
                # a warrior implies its warband
                warband_id = warband_id if warband_id is not None else w["warband_id"]
            if warband_id is not None:
                fetch_one(conn, "warbands", warband_id, label="Warband")
            row[f"{side}_warrior_id"] = warrior_id
            row[f"{side}_warband_id"] = warband_id
        cid = insert_row(conn, "casualties", row)
        return dict(fetch_one(conn, "casualties", cid, label="Casualty"))
