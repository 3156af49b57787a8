from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter

from mordheim_tracker.core.db import not_found

from .injuries import SERIOUS_INJURIES, get_injury, get_injury_by_roll
from .schemas import (
    EventCreateIn,
    EventOut,
    EventPatchIn,
    GamesPlayedOut,
    InjuryOut,
    ResolveEventIn,
    ResolveHenchmanIn,
)
from .service import (
    create_event,
    get_event,
    increment_games_played,
    list_campaign_events,
    list_match_events,
    patch_event,
    resolve_event,
    resolve_henchman_event,
)

router = APIRouter(tags=["events"])


@router.get("/campaigns/{campaign_id}/events", response_model=List[EventOut])
def api_list_campaign_events(campaign_id: int) -> List[EventOut]:
    return list_campaign_events(campaign_id)


@router.get("/matches/{match_id}/events", response_model=List[EventOut])
def api_list_match_events(match_id: int) -> List[EventOut]:
    return list_match_events(match_id)


@router.post("/matches/{match_id}/events", response_model=EventOut)
def api_create_event(match_id: int, body: EventCreateIn) -> EventOut:
    return create_event(match_id, body.model_dump())


@router.post("/matches/{match_id}/games-played", response_model=GamesPlayedOut)
def api_increment_games_played(match_id: int) -> GamesPlayedOut:
    return GamesPlayedOut(match_id=match_id, warriors_updated=increment_games_played(match_id))


@router.get("/events/{event_id}", response_model=EventOut)
def api_get_event(event_id: int) -> EventOut:
    return get_event(event_id)


@router.patch("/events/{event_id}", response_model=EventOut)
def api_patch_event(event_id: int, body: EventPatchIn) -> EventOut:
    return patch_event(event_id, body.model_dump(exclude_unset=True))


@router.post("/events/{event_id}/resolve", response_model=EventOut)
def api_resolve_event(event_id: int, body: ResolveEventIn) -> EventOut:
    return resolve_event(event_id, body.injury_type)


@router.post("/events/{event_id}/resolve-henchman", response_model=EventOut)
def api_resolve_henchman_event(event_id: int, body: ResolveHenchmanIn) -> EventOut:
    return resolve_henchman_event(event_id, body.death)


# -------------------------
# Injury reference
# -------------------------
@router.get("/injuries", response_model=List[InjuryOut])
def api_list_injuries() -> List[InjuryOut]:
    return [asdict(i) for i in SERIOUS_INJURIES]


@router.get("/injuries/roll/{roll}", response_model=InjuryOut)
def api_injury_by_roll(roll: int) -> InjuryOut:
    injury = get_injury_by_roll(roll)
    if injury is None:
        raise not_found("Injury roll", roll)
    return asdict(injury)


@router.get("/injuries/{code}", response_model=InjuryOut)
def api_get_injury(code: str) -> InjuryOut:
    injury = get_injury(code)
    if injury is None:
        raise not_found("Injury", code)
    return asdict(injury)
