import pytest

from mordheim_tracker.modules.history.progression import (
    build_per_match_points,
    build_progress_chart_data,
    build_time_series,
    group_by_warband,
    series_key_for,
    to_millis,
    warbands_from_points,
)


def _record(id, warband_id, warband_name, timestamp, treasury, match_id=None, match_name=None, match_date=None, rating=0, experience=0):
    return {
        "id": id,
        "warband_id": warband_id,
        "warband_name": warband_name,
        "warband_color": None,
        "warband_icon": None,
        "match_id": match_id,
        "match_name": match_name,
        "match_date": match_date,
        "timestamp": timestamp,
        "treasury_after": treasury,
        "experience_after": experience,
        "rating_after": rating,
    }


RECORDS = [
    _record(1, 1, "Reds", "2024-03-01T10:00:00.000000Z", 150, match_id=10, match_name="Opening", match_date="2024-03-01T00:00:00Z"),
    _record(2, 2, "Blues", "2024-03-01T10:00:01.000000Z", 40, match_id=10, match_name="Opening", match_date="2024-03-01T00:00:00Z"),
    _record(3, 1, "Reds", "2024-03-01T10:00:02.000000Z", 170, match_id=10, match_name="Opening", match_date="2024-03-01T00:00:00Z"),
    _record(4, 2, "Blues", "2024-04-01T10:00:00.000000Z", 90, match_id=11, match_name="Rematch", match_date="2024-04-01T00:00:00Z"),
]


def test_empty_ledger_groups_to_nothing() -> None:
    assert group_by_warband(build_time_series([])) == {}
    assert build_per_match_points([]) == []
    assert build_progress_chart_data([], "treasury") == []


def test_series_use_snapshot_values_per_warband() -> None:
    series = group_by_warband(build_time_series(RECORDS))

    assert list(series) == [1, 2]
    assert [p.treasury for p in series[1].points] == [150, 170]
    assert [p.treasury for p in series[2].points] == [40, 90]
    assert series[2].warband_name == "Blues"
    assert series[1].points[0].match_name == "Opening"


def test_aggregation_is_deterministic() -> None:
    assert group_by_warband(build_time_series(RECORDS)) == group_by_warband(build_time_series(RECORDS))
    assert build_progress_chart_data(build_per_match_points(RECORDS), "treasury") == build_progress_chart_data(
        build_per_match_points(RECORDS), "treasury"
    )


def test_missing_match_falls_back_to_unknown_match() -> None:
    points = build_time_series([_record(1, 1, "Reds", "2024-01-01T00:00:00Z", 5)])

    assert points[0].match_name == "Unknown Match"


def test_per_match_points_keep_last_record_per_match_and_warband() -> None:
    points = build_per_match_points(RECORDS)

    assert [(p.match_id, p.warband_id, p.treasury) for p in points] == [(10, 1, 170), (10, 2, 40), (11, 2, 90)]
    assert points[0].x == to_millis("2024-03-01T00:00:00Z")


def test_warbands_from_points_sorted_by_name() -> None:
    metas = warbands_from_points(build_per_match_points(RECORDS))

    assert [m.warband_name for m in metas] == ["Blues", "Reds"]


def test_chart_rows_forward_fill_and_start_empty() -> None:
    late = [_record(5, 3, "Greens", "2024-04-01T11:00:00Z", 7, match_id=11, match_name="Rematch", match_date="2024-04-01T00:00:00Z")]
    rows = build_progress_chart_data(build_per_match_points(RECORDS + late), "treasury")

    assert [r["x"] for r in rows] == [1, 2]
    assert [r["match_name"] for r in rows] == ["Opening", "Rematch"]
    reds, greens = series_key_for(1, "treasury"), series_key_for(3, "treasury")
    assert reds == "warband_1_treasury"
    assert rows[0][reds] == 170
    assert rows[1][reds] == 170
    assert rows[0][greens] is None
    assert rows[1][greens] == 7


def test_chart_rejects_unknown_metric() -> None:
    with pytest.raises(ValueError):
        build_progress_chart_data(build_per_match_points(RECORDS), "morale")


def test_campaign_progression_endpoint(client, seed) -> None:
    campaign = seed.campaign()
    empty = client.get(f"/campaigns/{campaign['id']}/progression").json()
    wb = seed.warband(campaign["id"], "Reds", treasury=100)
    client.post(f"/warbands/{wb['id']}/gold", json={"amount": 25})

    filled = client.get(f"/campaigns/{campaign['id']}/progression").json()

    assert empty["is_empty"] is True
    assert empty["series"] == {}
    assert filled["is_empty"] is False
    assert filled["series"][str(wb["id"])]["points"][0]["treasury"] == 125
    assert filled["warbands"][0]["warband_name"] == "Reds"
    assert filled["charts"]["treasury"][0][f"warband_{wb['id']}_treasury"] == 125
