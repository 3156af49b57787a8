from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")
from fastapi.testclient import TestClient

from mordheim_tracker.core.db import init_db
from mordheim_tracker.modules.campaigns.service import create_campaign
from mordheim_tracker.modules.events.service import create_event
from mordheim_tracker.modules.matches.service import add_participants, create_match
from mordheim_tracker.modules.warbands.service import create_warband
from mordheim_tracker.modules.warriors.service import create_warrior


@pytest.fixture
def db(tmp_path, monkeypatch):
    path = tmp_path / "tracker.db"
    monkeypatch.setenv("DATABASE_URL", "sqlite:///" + path.as_posix())
    init_db()
    return path


@pytest.fixture
def client(db) -> TestClient:
    from mordheim_tracker.main import app

    return TestClient(app)


class Seed:
    """Builds campaign fixtures through the real services."""

    def campaign(self, name: str = "Sigmar's Fall") -> Dict[str, Any]:
        return create_campaign({"name": name, "start_date": "2024-01-01", "end_date": "2024-12-31"})

    def warband(self, campaign_id: int, name: str, treasury: int = 0, faction: str = "Reikland") -> Dict[str, Any]:
        return create_warband(campaign_id, {"name": name, "faction": faction, "treasury": treasury})

    def warrior(self, warband_id: int, name: str, type: str = "hero", experience: int = 0) -> Dict[str, Any]:
        return create_warrior(warband_id, {"name": name, "type": type, "experience": experience})

    def match(self, campaign_id: int, warband_ids: List[int], name: str = "Street Brawl", date: Optional[str] = None) -> Dict[str, Any]:
        m = create_match(campaign_id, {"name": name, "match_type": "1v1", "scenario_id": 1, "date": date})
        return add_participants(m["id"], warband_ids)

    def knock_down(self, match_id: int, warrior_id: int, defender_id: Optional[int], description: Optional[str] = None) -> Dict[str, Any]:
        return create_event(
            match_id,
            {"type": "knock_down", "warrior_id": warrior_id, "defender_id": defender_id, "description": description},
        )


@pytest.fixture
def seed(db) -> Seed:
    return Seed()
