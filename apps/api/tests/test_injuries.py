import pytest

from mordheim_tracker.modules.events.injuries import (
    INJURY_TYPES,
    get_injury,
    get_injury_by_roll,
    is_valid_d66,
    outcome_category,
)


def test_chart_has_twenty_results() -> None:
    assert len(INJURY_TYPES) == 20
    assert "dead" in INJURY_TYPES


@pytest.mark.parametrize(
    "code, category",
    [("dead", "lethal"), ("leg_wound", "injurious"), ("horrible_scars", "injurious"), ("captured", "other"), ("multiple", "other")],
)
def test_outcome_categories(code, category) -> None:
    assert outcome_category(code) == category


def test_unknown_code_has_no_category() -> None:
    assert outcome_category("stubbed_toe") is None
    assert get_injury("stubbed_toe") is None


@pytest.mark.parametrize("roll, code", [(11, "dead"), (15, "dead"), (16, "multiple"), (21, "multiple"), (44, "full_recovery"), (66, "survive_against_odds")])
def test_lookup_by_d66_roll(roll, code) -> None:
    assert get_injury_by_roll(roll).code == code


@pytest.mark.parametrize("roll", [0, 10, 17, 70, 67])
def test_invalid_d66_rolls(roll) -> None:
    assert is_valid_d66(roll) is False
    assert get_injury_by_roll(roll) is None


def test_injury_reference_endpoints(client) -> None:
    listing = client.get("/injuries")
    by_code = client.get("/injuries/chest_wound")
    by_roll = client.get("/injuries/roll/35")
    unknown = client.get("/injuries/nope")

    assert listing.status_code == 200
    assert len(listing.json()) == 20
    assert by_code.json()["stat_effect"] == "-1 Toughness"
    assert by_roll.json()["code"] == "deep_wound"
    assert unknown.status_code == 404
