from mordheim_tracker.modules.events.service import resolve_event
from mordheim_tracker.modules.matches.service import set_winners


def test_health_reports_db_and_echoes_request_id(client) -> None:
    response = client.get("/health", headers={"X-Request-Id": "ABC123"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["db"]["status"] == "ok"
    assert body["db"]["kind"] == "sqlite"
    assert "version" in body
    assert response.headers["X-Request-Id"] == "ABC123"


def test_campaign_create_get_and_missing(client) -> None:
    created = client.post("/campaigns", json={"name": "Mordheim 1999", "start_date": "1999-01-01", "end_date": "1999-12-31"})
    cid = created.json()["id"]

    fetched = client.get(f"/campaigns/{cid}")
    missing = client.get("/campaigns/999")

    assert created.status_code == 200
    assert fetched.json()["name"] == "Mordheim 1999"
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"
    assert missing.json()["message"] == "Campaign with id 999 not found"


def test_news_content_is_trimmed_and_bounded(client, seed) -> None:
    campaign = seed.campaign()
    url = f"/campaigns/{campaign['id']}/news"

    created = client.post(url, json={"content": "  Skaven spotted in the sewers  "})
    blank = client.post(url, json={"content": "    "})
    too_long = client.post(url, json={"content": "x" * 201})

    assert created.status_code == 200
    assert created.json()["content"] == "Skaven spotted in the sewers"
    assert blank.status_code == 422
    assert too_long.status_code == 422


def test_news_newest_first_update_and_delete(client, seed) -> None:
    campaign = seed.campaign()
    url = f"/campaigns/{campaign['id']}/news"
    first = client.post(url, json={"content": "first"}).json()
    client.post(url, json={"content": "second"})

    listed = client.get(url).json()
    updated = client.patch(f"/news/{first['id']}", json={"content": "first, amended"})
    deleted = client.delete(f"/news/{first['id']}")
    missing = client.patch("/news/999", json={"content": "ghost"})

    assert [n["content"] for n in listed] == ["second", "first"]
    assert updated.json()["content"] == "first, amended"
    assert deleted.status_code == 200
    assert [n["content"] for n in client.get(url).json()] == ["second"]
    assert missing.status_code == 404


def test_match_workflow_winners_must_participate(client, seed) -> None:
    campaign = seed.campaign()
    reds = seed.warband(campaign["id"], "Reds")
    blues = seed.warband(campaign["id"], "Blues")
    outsiders = seed.warband(campaign["id"], "Outsiders")

    created = client.post(
        f"/campaigns/{campaign['id']}/matches",
        json={"name": "Market Square", "match_type": "1v1", "scenario_id": 3},
    ).json()
    too_few = client.post(f"/matches/{created['id']}/participants", json={"warband_ids": [reds["id"]]})
    joined = client.post(f"/matches/{created['id']}/participants", json={"warband_ids": [reds["id"], blues["id"]]})
    bad_winner = client.put(f"/matches/{created['id']}/winners", json={"warband_ids": [outsiders["id"]]})
    won = client.put(f"/matches/{created['id']}/winners", json={"warband_ids": [reds["id"]]})

    assert created["status"] == "scheduled"
    assert too_few.status_code == 422
    assert [p["name"] for p in joined.json()["participants"]] == ["Reds", "Blues"]
    assert bad_winner.status_code == 400
    assert won.json()["status"] == "ended"
    assert [w["name"] for w in won.json()["winners"]] == ["Reds"]


def test_match_details_teams_placements_and_casualties(client, seed) -> None:
    campaign = seed.campaign()
    reds = seed.warband(campaign["id"], "Reds")
    blues = seed.warband(campaign["id"], "Blues")
    victim = seed.warrior(blues["id"], "Marius")
    match = seed.match(campaign["id"], [reds["id"], blues["id"]])
    mid = match["id"]

    client.post(f"/matches/{mid}/teams", json={"name": "Order", "warband_ids": [reds["id"]]})
    dup = client.put(
        f"/matches/{mid}/placements",
        json={"placements": [{"warband_id": reds["id"], "position": 1}, {"warband_id": blues["id"], "position": 1}]},
    )
    client.put(
        f"/matches/{mid}/placements",
        json={"placements": [{"warband_id": blues["id"], "position": 2}, {"warband_id": reds["id"], "position": 1}]},
    )
    casualty = client.post(f"/matches/{mid}/casualties", json={"type": "out_of_action", "victim_warrior_id": victim["id"]})
    details = client.get(f"/matches/{mid}").json()
    roster = client.get(f"/matches/{mid}/warbands").json()

    assert dup.status_code == 400
    assert casualty.json()["victim_warband_id"] == blues["id"]
    assert details["teams"][0]["members"][0]["name"] == "Reds"
    assert [p["warband"]["name"] for p in details["placements"]] == ["Reds", "Blues"]
    assert details["casualties"][0]["type"] == "out_of_action"
    assert [w["name"] for w in roster[1]["warriors"]] == ["Marius"]


def test_leaderboards_count_games_and_kills(client, seed) -> None:
    campaign = seed.campaign()
    reds = seed.warband(campaign["id"], "Reds", treasury=10)
    blues = seed.warband(campaign["id"], "Blues", treasury=90)
    killer = seed.warrior(reds["id"], "Gunther")
    victim = seed.warrior(blues["id"], "Marius")
    match = seed.match(campaign["id"], [reds["id"], blues["id"]])
    resolve_event(seed.knock_down(match["id"], killer["id"], victim["id"])["id"], "dead")
    set_winners(match["id"], [reds["id"]])

    boards = client.get(f"/campaigns/{campaign['id']}/leaderboards").json()

    assert boards["games_won"] == [{"warband": {"id": reds["id"], "name": "Reds", "color": None, "icon": None}, "value": 1}]
    assert [r["warband"]["name"] for r in boards["treasury"]] == ["Blues", "Reds"]
    assert boards["kills"][0]["warrior"]["name"] == "Gunther"
    assert boards["kills"][0]["value"] == 1
    assert boards["injuries_received"] == []


def test_broadcast_summary(client, seed) -> None:
    campaign = seed.campaign()
    quiet = client.get(f"/campaigns/{campaign['id']}/broadcast").json()

    reds = seed.warband(campaign["id"], "Reds")
    blues = seed.warband(campaign["id"], "Blues")
    killer = seed.warrior(reds["id"], "Gunther")
    victim = seed.warrior(blues["id"], "Marius")
    match = seed.match(campaign["id"], [reds["id"], blues["id"]], name="Old Well")
    resolve_event(seed.knock_down(match["id"], killer["id"], victim["id"], "Gunther drowns Marius")["id"], "dead")
    set_winners(match["id"], [reds["id"]])
    client.post(f"/campaigns/{campaign['id']}/news", json={"content": "Market reopens"})

    summary = client.get(f"/campaigns/{campaign['id']}/broadcast").json()

    assert "waiting for the first clash" in quiet["headline"]
    assert quiet["progression"]["is_empty"] is True
    assert "Old Well" in summary["headline"]
    assert "Gunther drowns Marius" in summary["headline"]
    assert summary["news"][0] == summary["headline"]
    assert "Market reopens" in summary["news"]
    assert summary["standings"][0]["name"] == "Reds"
    assert summary["standings"][0]["wins"] == 1
    assert summary["recent_results"][0]["kills"] == 1
    assert summary["recent_results"][0]["winners"][0]["name"] == "Reds"
