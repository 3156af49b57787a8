"""
Broadcast summary for the passive display screen.

One read that bundles everything the rotating slides show: standings, the
latest finished matches, a breaking headline, the news ticker and the
progression charts. Clients poll it; nothing here writes.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from mordheim_tracker.core.config import load_settings
from mordheim_tracker.core.db import as_bool, fetch_one, reading
from mordheim_tracker.modules.history.service import campaign_progression
from mordheim_tracker.modules.matches.service import FINISHED_STATUSES, list_matches

PLACEHOLDER_HEADLINE = "BREAKING: The broadcast desk is ready, waiting for the first clash."
TICKER_EVENT_LINES = 10
TICKER_LINE_LENGTH = 110


def truncate(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[: max(0, limit - 1)].rstrip() + "…"


def _event_icon(ev: Dict[str, Any]) -> str:
    if ev["death"]:
        return "☠️"
    if ev["injury"]:
        return "🩸"
    return "⚔️"


def event_detail(ev: Dict[str, Any]) -> str:
    if ev.get("description"):
        return ev["description"]
    attacker = ev.get("warrior_name") or "Unknown warrior"
    defender = ev.get("defender_name")
    if defender:
        return f"{attacker} overwhelmed {defender}"
    return f"{attacker} seized the spotlight"


def _recent_events(campaign_id: int, limit: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        rows = conn.execute(
            """
            SELECT e.*, a.name AS warrior_name, d.name AS defender_name, m.name AS match_name
            FROM events e
            LEFT JOIN warriors a ON a.id = e.warrior_id
            LEFT JOIN warriors d ON d.id = e.defender_id
            LEFT JOIN matches m ON m.id = e.match_id
            WHERE e.campaign_id=?
            ORDER BY e.timestamp DESC, e.id DESC
            LIMIT ?;
            """,
            (campaign_id, limit),
        ).fetchall()
    out = []
    for r in rows:
        d = dict(r)
        d["death"] = as_bool(d["death"])
        d["injury"] = as_bool(d["injury"])
        out.append(d)
    return out


def standings(campaign_id: int) -> List[Dict[str, Any]]:
    with reading() as conn:
        fetch_one(conn, "campaigns", campaign_id, label="Campaign")
        rows = conn.execute(
            """
            SELECT w.*,
                   (SELECT COUNT(1) FROM match_winners mw WHERE mw.warband_id = w.id) AS wins,
                   (SELECT COUNT(1) FROM warriors wr WHERE wr.warband_id = w.id AND wr.is_alive = 1) AS warriors_alive
            FROM warbands w
            WHERE w.campaign_id=?
            ORDER BY w.rating DESC, wins DESC, w.name ASC;
            """,
            (campaign_id,),
        ).fetchall()
    return [
        {
            "position": i,
            "warband_id": r["id"],
            "name": r["name"],
            "faction": r["faction"],
            "color": r["color"],
            "icon": r["icon"],
            "rating": int(r["rating"]),
            "treasury": int(r["treasury"]),
            "wins": int(r["wins"]),
            "warriors_alive": int(r["warriors_alive"]),
        }
        for i, r in enumerate(rows, start=1)
    ]


def recent_results(campaign_id: int, limit: int) -> List[Dict[str, Any]]:
    finished = [m for m in list_matches(campaign_id) if m["status"] in FINISHED_STATUSES]
    finished.sort(key=lambda m: (m["date"], m["id"]), reverse=True)
    return [
        {
            "id": m["id"],
            "name": m["name"],
            "date": m["date"],
            "status": m["status"],
            "winners": m["winners"],
            "participants": m["participants"],
            "kills": sum(1 for e in m["events"] if e["death"]),
            "injuries": sum(1 for e in m["events"] if e["injury"] and not e["death"]),
            "total_moments": len(m["events"]),
        }
        for m in finished[:limit]
    ]


def breaking_headline(latest_event: Optional[Dict[str, Any]], leader_name: Optional[str]) -> str:
    """Latest event first, then the games-won leader, then a placeholder."""
    if latest_event is not None:
        label = latest_event.get("match_name") or "Campaign feed"
        return f"{_event_icon(latest_event)} BREAKING: {label}: {event_detail(latest_event)}"
    if leader_name:
        return f"📣 BREAKING: {leader_name} set the pace in the ruins"
    return f"📣 {PLACEHOLDER_HEADLINE}"


def news_ticker(headline: str, custom: List[str], events: List[Dict[str, Any]]) -> List[str]:
    lines = [headline] + list(custom)
    for ev in events:
        lines.append(truncate(f"{_event_icon(ev)} {ev.get('match_name') or 'Match'}: {event_detail(ev)}", TICKER_LINE_LENGTH))

    seen = set()
    out: List[str] = []
    for line in (s.strip() for s in lines):
        if not line or line in seen:
            continue
        seen.add(line)
        out.append(line)
    return out


def broadcast_summary(campaign_id: int) -> Dict[str, Any]:
    settings = load_settings()
    with reading() as conn:
        campaign = dict(fetch_one(conn, "campaigns", campaign_id, label="Campaign"))
        leader = conn.execute(
            """
            SELECT w.name, COUNT(mw.id) AS wins
            FROM warbands w
            JOIN match_winners mw ON mw.warband_id = w.id
            WHERE w.campaign_id=?
            GROUP BY w.id
            ORDER BY wins DESC, w.name ASC
            LIMIT 1;
            """,
            (campaign_id,),
        ).fetchone()
        custom = [
            r["content"]
            for r in conn.execute(
                "SELECT content FROM custom_news_items WHERE campaign_id=? ORDER BY created_at DESC, id DESC;",
                (campaign_id,),
            ).fetchall()
        ]

    events = _recent_events(campaign_id, TICKER_EVENT_LINES)
    headline = breaking_headline(events[0] if events else None, leader["name"] if leader else None)
    return {
        "campaign": campaign,
        "standings": standings(campaign_id),
        "recent_results": recent_results(campaign_id, settings.recent_results_limit),
        "headline": headline,
        "news": news_ticker(headline, custom, events),
        "progression": campaign_progression(campaign_id),
    }
