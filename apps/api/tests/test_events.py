import pytest
from fastapi import HTTPException

from mordheim_tracker.core.db import reading
from mordheim_tracker.modules.events.service import (
    add_experience_to_warrior,
    get_event,
    increment_games_played,
    resolve_event,
    resolve_henchman_event,
)
from mordheim_tracker.modules.history.service import warband_progression
from mordheim_tracker.modules.warbands.service import get_warband
from mordheim_tracker.modules.warriors.service import get_warrior


@pytest.fixture
def skirmish(seed):
    campaign = seed.campaign()
    reds = seed.warband(campaign["id"], "Reds")
    blues = seed.warband(campaign["id"], "Blues")
    attacker = seed.warrior(reds["id"], "Gunther", experience=10)
    defender = seed.warrior(blues["id"], "Marius", experience=8)
    match = seed.match(campaign["id"], [reds["id"], blues["id"]])
    event = seed.knock_down(match["id"], attacker["id"], defender["id"], "Marius falls from the rooftops")
    return {
        "campaign": campaign,
        "reds": reds,
        "blues": blues,
        "attacker": attacker,
        "defender": defender,
        "match": match,
        "event": event,
    }


def test_new_event_is_unresolved(skirmish) -> None:
    event = skirmish["event"]

    assert event["resolved"] is False
    assert event["outcome"] is None
    assert event["campaign_id"] == skirmish["campaign"]["id"]


def test_dead_result_kills_the_defender(skirmish) -> None:
    resolved = resolve_event(skirmish["event"]["id"], "dead")

    assert resolved["resolved"] is True
    assert resolved["outcome"] == "lethal"
    assert resolved["death"] is True
    assert resolved["injury"] is False
    assert resolved["killed_defender"] is True
    assert resolved["resolved_at"]

    defender = get_warrior(skirmish["defender"]["id"])
    assert defender["is_alive"] is False
    assert defender["death_date"]
    assert defender["death_description"] == "Marius falls from the rooftops"


def test_death_drops_the_defender_warband_rating(skirmish) -> None:
    blues = skirmish["blues"]
    assert get_warband(blues["id"])["rating"] == 13

    resolve_event(skirmish["event"]["id"], "dead")

    assert get_warband(blues["id"])["rating"] == 0
    last = warband_progression(blues["id"])[-1]
    assert last["change_type"] == "roster_change"
    assert last["rating_delta"] == -13
    assert last["match_id"] == skirmish["match"]["id"]


def test_repeating_a_lethal_resolution_keeps_the_first_death(skirmish) -> None:
    event_id = skirmish["event"]["id"]
    resolve_event(event_id, "dead")
    first = get_warrior(skirmish["defender"]["id"])
    entries_before = len(warband_progression(skirmish["blues"]["id"]))

    again = resolve_event(event_id, "dead")

    second = get_warrior(skirmish["defender"]["id"])
    assert again["killed_defender"] is True
    assert second["death_date"] == first["death_date"]
    assert len(warband_progression(skirmish["blues"]["id"])) == entries_before


@pytest.mark.parametrize("code, outcome, injury", [("leg_wound", "injurious", True), ("full_recovery", "other", False)])
def test_non_lethal_results_leave_warriors_alone(skirmish, code, outcome, injury) -> None:
    resolved = resolve_event(skirmish["event"]["id"], code)

    assert resolved["outcome"] == outcome
    assert resolved["injury"] is injury
    assert resolved["death"] is False
    assert resolved["killed_defender"] is False
    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is True
    assert get_warrior(skirmish["attacker"]["id"])["is_alive"] is True


def test_switching_lethal_to_non_lethal_revives_the_defender(skirmish) -> None:
    event_id = skirmish["event"]["id"]
    resolve_event(event_id, "dead")

    corrected = resolve_event(event_id, "chest_wound")

    defender = get_warrior(skirmish["defender"]["id"])
    assert corrected["outcome"] == "injurious"
    assert corrected["killed_defender"] is False
    assert defender["is_alive"] is True
    assert defender["death_date"] is None
    assert get_warband(skirmish["blues"]["id"])["rating"] == 13


def test_lethal_on_an_already_dead_defender_does_not_claim_the_kill(skirmish, seed) -> None:
    first = skirmish["event"]
    second = seed.knock_down(skirmish["match"]["id"], skirmish["attacker"]["id"], skirmish["defender"]["id"])
    resolve_event(first["id"], "dead")

    resolved = resolve_event(second["id"], "dead")
    resolve_event(second["id"], "full_recovery")

    assert resolved["killed_defender"] is False
    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is False


def test_unknown_injury_code_is_rejected_before_any_write(skirmish) -> None:
    with pytest.raises(HTTPException) as exc:
        resolve_event(skirmish["event"]["id"], "stubbed_toe")

    assert exc.value.status_code == 400
    with reading() as conn:
        row = conn.execute("SELECT resolved FROM events WHERE id=?;", (skirmish["event"]["id"],)).fetchone()
    assert row["resolved"] == 0


def test_missing_event_is_not_found(seed) -> None:
    with pytest.raises(HTTPException) as exc:
        resolve_event(4242, "dead")

    assert exc.value.status_code == 404


def test_henchman_resolution(skirmish) -> None:
    survived = resolve_henchman_event(skirmish["event"]["id"], death=False)
    assert survived["outcome"] == "other"
    assert survived["injury_type"] is None
    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is True

    died = resolve_henchman_event(skirmish["event"]["id"], death=True)
    assert died["outcome"] == "lethal"
    assert died["injury_type"] == "dead"
    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is False


def test_warrior_experience_feeds_rating(skirmish) -> None:
    reds = skirmish["reds"]

    entry = add_experience_to_warrior(skirmish["attacker"]["id"], 4, match_id=skirmish["match"]["id"])

    assert entry["change_type"] == "warrior_experience"
    assert entry["rating_delta"] == 4
    assert get_warrior(skirmish["attacker"]["id"])["experience"] == 14
    assert get_warband(reds["id"])["rating"] == 19


def test_games_played_only_counts_living_warriors(skirmish) -> None:
    resolve_event(skirmish["event"]["id"], "dead")

    updated = increment_games_played(skirmish["match"]["id"])

    assert updated == 1
    assert get_warrior(skirmish["attacker"]["id"])["games_played"] == 1
    assert get_warrior(skirmish["defender"]["id"])["games_played"] == 0


def test_api_resolve_validates_and_resolves(client, skirmish) -> None:
    event_id = skirmish["event"]["id"]

    bad = client.post(f"/events/{event_id}/resolve", json={"injury_type": "stubbed_toe"})
    missing = client.post("/events/999/resolve", json={"injury_type": "dead"})
    ok = client.post(f"/events/{event_id}/resolve", json={"injury_type": "dead"})

    assert bad.status_code == 422
    assert bad.json()["error"] == "validation_error"
    assert missing.status_code == 404
    assert ok.status_code == 200
    assert ok.json()["death"] is True
    assert client.get(f"/warriors/{skirmish['defender']['id']}").json()["is_alive"] is False


def test_correcting_one_of_two_kills_keeps_the_defender_dead(skirmish, seed) -> None:
    first = skirmish["event"]
    second = seed.knock_down(skirmish["match"]["id"], skirmish["attacker"]["id"], skirmish["defender"]["id"])
    resolve_event(first["id"], "dead")
    resolve_event(second["id"], "dead")

    corrected = resolve_event(first["id"], "leg_wound")

    still_lethal = get_event(second["id"])
    assert corrected["killed_defender"] is False
    assert still_lethal["death"] is True
    assert still_lethal["killed_defender"] is True
    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is False
    assert get_warband(skirmish["blues"]["id"])["rating"] == 0

    resolve_event(second["id"], "full_recovery")

    assert get_warrior(skirmish["defender"]["id"])["is_alive"] is True
    assert get_warband(skirmish["blues"]["id"])["rating"] == 13


def test_patching_an_event_type_to_null_is_rejected(client, skirmish) -> None:
    response = client.patch(f"/events/{skirmish['event']['id']}", json={"type": None})

    assert response.status_code == 400
    assert response.json()["error"] == "bad_request"
    assert get_event(skirmish["event"]["id"])["type"] == "knock_down"
