"""
Match resolution workflow.

An event is created unresolved and resolved by choosing a serious injury result.
Resolution is a small state machine on the event row:

    unresolved -> resolved(outcome, resolved_at)

Re-resolving overwrites the outcome. The event remembers whether its own
resolution killed the defender (killed_defender), so switching a lethal result
to a non-lethal one revives exactly the warrior it killed and nobody else,
unless another resolved lethal event on that warrior still stands; that event
then holds the kill.
Event, warrior, warband rating and ledger row are written in one transaction.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from mordheim_tracker.core.db import (
    as_bool,
    bad_request,
    fetch_one,
    insert_row,
    now_iso,
    reading,
    reject_nulls,
    transaction,
    update_row,
)
from mordheim_tracker.core.observability import audit
from mordheim_tracker.modules.history.ledger import CHANGE_ROSTER, CHANGE_WARRIOR_EXPERIENCE, sync_rating
from mordheim_tracker.modules.history.service import audit_ledger_entry

from .injuries import INJURY_TYPES, INJURIOUS, LETHAL, OTHER, outcome_category

_PATCHABLE = ("type", "description")


def row_to_event(row: sqlite3.Row) -> Dict[str, Any]:
    d = dict(row)
    for k in ("resolved", "death", "injury", "killed_defender"):
        d[k] = as_bool(d.get(k))
    return d


def get_event(event_id: int) -> Dict[str, Any]:
    with reading() as conn:
        return row_to_event(fetch_one(conn, "events", event_id, label="Event"))


def list_campaign_events(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            "SELECT * FROM events WHERE campaign_id=? ORDER BY timestamp DESC, id DESC;",
            (campaign_id,),
        ).fetchall()
        return [row_to_event(r) for r in rows]


def list_match_events(match_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        rows = conn.execute(
            "SELECT * FROM events WHERE match_id=? ORDER BY timestamp ASC, id ASC;",
            (match_id,),
        ).fetchall()
        return [row_to_event(r) for r in rows]


def create_event(match_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    with transaction() as conn:
        match = fetch_one(conn, "matches", match_id, label="Match")
        fetch_one(conn, "warriors", data["warrior_id"], label="Warrior")
        if data.get("defender_id") is not None:
            fetch_one(conn, "warriors", data["defender_id"], label="Warrior")
        eid = insert_row(
            conn,
            "events",
            {
                "campaign_id": match["campaign_id"],
                "match_id": match_id,
                "type": data["type"],
                "description": data.get("description"),
                "timestamp": data.get("timestamp") or now_iso(),
                "warrior_id": data["warrior_id"],
                "defender_id": data.get("defender_id"),
                "resolved": 0,
                "death": 0,
                "injury": 0,
                "killed_defender": 0,
            },
        )
    return get_event(eid)


def patch_event(event_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    updates = {k: v for k, v in patch.items() if k in _PATCHABLE}
    reject_nulls(updates, ("type",))
    with transaction() as conn:
        fetch_one(conn, "events", event_id, label="Event")
        if updates:
            update_row(conn, "events", event_id, updates)
    return get_event(event_id)


def _apply_resolution(event_id: int, *, outcome: str, injury_type: Optional[str]) -> Dict[str, Any]:
    ledger_entries: List[Dict[str, Any]] = []
    with transaction() as conn:
        ev = fetch_one(conn, "events", event_id, label="Event")
        killed = as_bool(ev["killed_defender"])
        now = now_iso()

        if ev["defender_id"] is not None:
            defender = fetch_one(conn, "warriors", ev["defender_id"], label="Warrior")
            roster_changed = False

            if outcome == LETHAL:
                # an already dead defender keeps its original death record
                if as_bool(defender["is_alive"]):
                    update_row(
                        conn,
                        "warriors",
                        defender["id"],
                        {"is_alive": 0, "death_date": now, "death_description": ev["description"]},
                    )
                    killed = True
                    roster_changed = True
            elif killed:
                # another lethal event on the same defender keeps them dead and takes over the kill
                other = conn.execute(
                    """
                    SELECT id FROM events
                    WHERE defender_id=? AND id<>? AND resolved=1 AND death=1
                    ORDER BY resolved_at ASC, id ASC
                    LIMIT 1;
                    """,
                    (defender["id"], event_id),
                ).fetchone()
                if other is not None:
                    update_row(conn, "events", other["id"], {"killed_defender": 1})
                else:
                    update_row(
                        conn,
                        "warriors",
                        defender["id"],
                        {"is_alive": 1, "death_date": None, "death_description": None},
                    )
                    roster_changed = True
                killed = False

            if roster_changed:
                entry = sync_rating(
                    conn,
                    defender["warband_id"],
                    change_type=CHANGE_ROSTER,
                    match_id=ev["match_id"],
                    description=f"{defender['name']} {'died' if killed else 'returned to the roster'}",
                )
                if entry is not None:
                    ledger_entries.append(entry)

        update_row(
            conn,
            "events",
            event_id,
            {
                "resolved": 1,
                "injury_type": injury_type,
                "outcome": outcome,
                "death": 1 if outcome == LETHAL else 0,
                "injury": 1 if outcome == INJURIOUS else 0,
                "resolved_at": now,
                "killed_defender": 1 if killed else 0,
            },
        )

    for entry in ledger_entries:
        audit_ledger_entry(entry)
    audit(
        "event.resolved",
        __name__,
        event_id=event_id,
        match_id=ev["match_id"],
        injury_type=injury_type,
        outcome=outcome,
        killed_defender=killed,
    )
    return get_event(event_id)


def resolve_event(event_id: int, injury_type: str) -> Dict[str, Any]:
    category = outcome_category(injury_type)
    if category is None:
        raise bad_request(f"Unknown injury type {injury_type!r}", injury_type=injury_type, allowed=list(INJURY_TYPES))
    return _apply_resolution(event_id, outcome=category, injury_type=injury_type)


def resolve_henchman_event(event_id: int, death: bool) -> Dict[str, Any]:
    # henchmen have no injury table: they die or they walk away
    if death:
        return _apply_resolution(event_id, outcome=LETHAL, injury_type="dead")
    return _apply_resolution(event_id, outcome=OTHER, injury_type=None)


def add_experience_to_warrior(warrior_id: int, amount: int, match_id: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Add experience to a warrior; the warband's rating follows through the ledger when it changes."""
    with transaction() as conn:
        w = fetch_one(conn, "warriors", warrior_id, label="Warrior")
        if match_id is not None:
            fetch_one(conn, "matches", match_id, label="Match")
        update_row(conn, "warriors", warrior_id, {"experience": int(w["experience"]) + int(amount)})
        entry = sync_rating(
            conn,
            w["warband_id"],
            change_type=CHANGE_WARRIOR_EXPERIENCE,
            match_id=match_id,
            description=f"{w['name']} gained {amount} experience",
        )
    if entry is not None:
        audit_ledger_entry(entry)
    return entry


def increment_games_played(match_id: int) -> int:
    """+1 games played for every living warrior of the match's participating warbands."""
    with transaction() as conn:
        fetch_one(conn, "matches", match_id, label="Match")
        cur = conn.execute(
            """
            UPDATE warriors
            SET games_played = games_played + 1, updated_at = ?
            WHERE is_alive = 1
              AND warband_id IN (SELECT warband_id FROM match_participants WHERE match_id = ?);
            """,
            (now_iso(), match_id),
        )
        return int(cur.rowcount)
