"""
Reshape the campaign ledger into per-warband progression series.

All functions are pure: the same ledger input always yields the same output.
Points carry the ledger's *_after snapshot values, so a chart never replays deltas.
Input records are ledger rows joined with warband_name/color/icon and
match_name/date, sorted ascending by timestamp.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

ProgressMetric = Literal["rating", "treasury", "experience"]

METRICS = ("rating", "treasury", "experience")

UNKNOWN_MATCH = "Unknown Match"
UNKNOWN_WARBAND = "Unknown Warband"


@dataclass(frozen=True)
class TimeSeriesPoint:
    timestamp: str
    match_name: str
    warband_id: int
    warband_name: str
    warband_color: Optional[str]
    warband_icon: Optional[str]
    rating: int
    treasury: int
    experience: int


@dataclass
class WarbandSeries:
    warband_id: int
    warband_name: str
    warband_color: Optional[str]
    warband_icon: Optional[str]
    points: List[TimeSeriesPoint] = field(default_factory=list)


@dataclass(frozen=True)
class WarbandMeta:
    warband_id: int
    warband_name: str
    warband_color: Optional[str]
    warband_icon: Optional[str]


@dataclass(frozen=True)
class MatchWarbandPoint:
    x: int
    match_id: Optional[int]
    match_name: str
    warband_id: int
    warband_name: str
    warband_color: Optional[str]
    warband_icon: Optional[str]
    rating: int
    treasury: int
    experience: int


def to_millis(ts: str) -> int:
    dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def build_time_series(records: Iterable[Mapping[str, Any]]) -> List[TimeSeriesPoint]:
    return [
        TimeSeriesPoint(
            timestamp=r["timestamp"],
            match_name=r.get("match_name") or UNKNOWN_MATCH,
            warband_id=int(r["warband_id"]),
            warband_name=r.get("warband_name") or UNKNOWN_WARBAND,
            warband_color=r.get("warband_color"),
            warband_icon=r.get("warband_icon"),
            rating=int(r["rating_after"]),
            treasury=int(r["treasury_after"]),
            experience=int(r["experience_after"]),
        )
        for r in records
    ]


def group_by_warband(points: Iterable[TimeSeriesPoint]) -> Dict[int, WarbandSeries]:
    """One series per warband, in order of first appearance; empty input gives {}."""
    out: Dict[int, WarbandSeries] = {}
    for p in points:
        series = out.get(p.warband_id)
        if series is None:
            series = WarbandSeries(
                warband_id=p.warband_id,
                warband_name=p.warband_name,
                warband_color=p.warband_color,
                warband_icon=p.warband_icon,
            )
            out[p.warband_id] = series
        series.points.append(p)
    return out


def build_per_match_points(records: Iterable[Mapping[str, Any]]) -> List[MatchWarbandPoint]:
    """Last ledger record per (match, warband); x is the match date in ms (record timestamp as fallback)."""
    latest: Dict[tuple, Mapping[str, Any]] = {}
    for r in records:
        latest[(r.get("match_id"), int(r["warband_id"]))] = r

    points = [
        MatchWarbandPoint(
            x=to_millis(r.get("match_date") or r["timestamp"]),
            match_id=r.get("match_id"),
            match_name=r.get("match_name") or UNKNOWN_MATCH,
            warband_id=int(r["warband_id"]),
            warband_name=r.get("warband_name") or UNKNOWN_WARBAND,
            warband_color=r.get("warband_color"),
            warband_icon=r.get("warband_icon"),
            rating=int(r["rating_after"]),
            treasury=int(r["treasury_after"]),
            experience=int(r["experience_after"]),
        )
        for r in latest.values()
    ]
    points.sort(key=lambda p: (p.x, p.match_id if p.match_id is not None else -1, p.warband_id))
    return points


def warbands_from_points(points: Iterable[MatchWarbandPoint]) -> List[WarbandMeta]:
    by_id: Dict[int, WarbandMeta] = {}
    for p in points:
        if p.warband_id not in by_id:
            by_id[p.warband_id] = WarbandMeta(p.warband_id, p.warband_name, p.warband_color, p.warband_icon)
    return sorted(by_id.values(), key=lambda m: (m.warband_name.lower(), m.warband_id))


def series_key_for(warband_id: int, metric: str) -> str:
    return f"warband_{warband_id}_{metric}"


def build_progress_chart_data(points: List[MatchWarbandPoint], metric: ProgressMetric) -> List[Dict[str, Any]]:
    """
    Wide rows for a multi-line chart: one row per match, one column per warband.

    Rows are numbered 1..N by match date; a warband's missing values are carried
    forward from its previous row and stay None until its first value.
    """
    if metric not in METRICS:
        raise ValueError(f"unknown metric: {metric!r}")

    rows_by_match: Dict[Any, Dict[str, Any]] = {}
    warband_ids: List[int] = []

    for p in points:
        if p.warband_id not in warband_ids:
            warband_ids.append(p.warband_id)
        row = rows_by_match.get(p.match_id)
        if row is None:
            row = {"x": 0, "match_date": p.x, "match_id": p.match_id, "match_name": p.match_name}
            rows_by_match[p.match_id] = row
        if p.x < row["match_date"]:
            row["match_date"] = p.x
        row[series_key_for(p.warband_id, metric)] = getattr(p, metric)

    rows = sorted(
        rows_by_match.values(),
        key=lambda r: (r["match_date"], r["match_id"] if r["match_id"] is not None else -1),
    )
    for i, row in enumerate(rows, start=1):
        row["x"] = i

    for warband_id in warband_ids:
        key = series_key_for(warband_id, metric)
        last: Optional[int] = None
        for row in rows:
            current = row.get(key)
            if current is not None:
                last = current
            else:
                row[key] = last

    return rows
