import sqlite3

import pytest
from fastapi import HTTPException

from mordheim_tracker.core.db import reading
from mordheim_tracker.modules.history.ledger import compute_rating, rating_for
from mordheim_tracker.modules.history.service import add_experience, add_gold, warband_progression
from mordheim_tracker.modules.warbands.service import get_warband


def _ledger_count() -> int:
    with reading() as conn:
        return conn.execute("SELECT COUNT(1) AS n FROM warband_state_changes;").fetchone()["n"]


def test_add_gold_keeps_running_treasury_totals(seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats", treasury=100)

    first = add_gold(wb["id"], 50)
    second = add_gold(wb["id"], 20)

    assert first["treasury_after"] == 150
    assert second["treasury_after"] == 170
    assert second["treasury_delta"] == 20
    assert get_warband(wb["id"])["treasury"] == 170
    assert [e["treasury_after"] for e in warband_progression(wb["id"])] == [150, 170]


def test_gold_with_match_is_match_gold_and_without_is_manual(seed) -> None:
    campaign = seed.campaign()
    a = seed.warband(campaign["id"], "Grey Hats")
    b = seed.warband(campaign["id"], "Rat Pack")
    match = seed.match(campaign["id"], [a["id"], b["id"]])

    with_match = add_gold(a["id"], 30, match_id=match["id"])
    manual = add_gold(a["id"], 5)

    assert with_match["change_type"] == "match_gold"
    assert with_match["match_id"] == match["id"]
    assert manual["change_type"] == "manual_adjustment"
    assert manual["match_id"] is None


def test_negative_amounts_can_go_below_zero(seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats", treasury=10)

    entry = add_gold(wb["id"], -25)
    xp = add_experience(wb["id"], -3)

    assert entry["treasury_after"] == -15
    assert xp["experience_after"] == -3
    assert xp["treasury_after"] == -15
    assert get_warband(wb["id"])["treasury"] == -15


def test_missing_warband_writes_nothing(seed) -> None:
    with pytest.raises(HTTPException) as exc:
        add_gold(999, 10)

    assert exc.value.status_code == 404
    assert exc.value.detail["error"] == "not_found"
    assert _ledger_count() == 0


def test_missing_match_rolls_back_the_warband_update(seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats", treasury=40)

    with pytest.raises(HTTPException) as exc:
        add_gold(wb["id"], 10, match_id=12345)

    assert exc.value.status_code == 404
    assert get_warband(wb["id"])["treasury"] == 40
    assert _ledger_count() == 0


def test_ledger_rows_cannot_be_updated_or_deleted(seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats")
    entry = add_gold(wb["id"], 10)

    with reading() as conn:
        with pytest.raises(sqlite3.DatabaseError):
            conn.execute("UPDATE warband_state_changes SET treasury_after=0 WHERE id=?;", (entry["id"],))
        with pytest.raises(sqlite3.DatabaseError):
            conn.execute("DELETE FROM warband_state_changes WHERE id=?;", (entry["id"],))

    assert warband_progression(wb["id"])[0]["treasury_after"] == 10


def test_recruiting_warriors_moves_rating_through_the_ledger(seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats")

    seed.warrior(wb["id"], "Captain Ulf", experience=20)
    seed.warrior(wb["id"], "Youngblood", experience=0)

    entries = warband_progression(wb["id"])
    assert [e["change_type"] for e in entries] == ["roster_change", "roster_change"]
    assert [e["rating_after"] for e in entries] == [25, 30]
    assert get_warband(wb["id"])["rating"] == rating_for(2, 20) == 30
    with reading() as conn:
        assert compute_rating(conn, wb["id"]) == 30


def test_api_gold_endpoint_and_missing_warband(client, seed) -> None:
    campaign = seed.campaign()
    wb = seed.warband(campaign["id"], "Grey Hats", treasury=100)

    ok = client.post(f"/warbands/{wb['id']}/gold", json={"amount": 50, "description": "Wyrdstone sold"})
    missing = client.post("/warbands/999/gold", json={"amount": 50})

    assert ok.status_code == 200
    assert ok.json()["treasury_after"] == 150
    assert ok.json()["description"] == "Wyrdstone sold"
    assert missing.status_code == 404
    body = missing.json()
    assert body["error"] == "not_found"
    assert body["request_id"] == missing.headers["X-Request-Id"]
