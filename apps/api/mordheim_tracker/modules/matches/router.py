from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query

from .schemas import (
    CasualtyCreateIn,
    CasualtyOut,
    MatchCreateIn,
    MatchDetailsOut,
    MatchOut,
    MatchPatchIn,
    MatchStatus,
    MatchWarbandRosterOut,
    ParticipantsIn,
    PlacementsIn,
    TeamCreateIn,
    WinnersIn,
)
from .service import (
    add_participants,
    create_match,
    create_team,
    get_match_details,
    list_matches,
    match_warbands,
    patch_match,
    record_casualty,
    set_placements,
    set_winners,
)

router = APIRouter(tags=["matches"])


@router.get("/campaigns/{campaign_id}/matches", response_model=List[MatchOut])
def api_list_matches(campaign_id: int, status: Optional[MatchStatus] = Query(None)) -> List[MatchOut]:
    return list_matches(campaign_id, status=status)


@router.post("/campaigns/{campaign_id}/matches", response_model=MatchOut)
def api_create_match(campaign_id: int, body: MatchCreateIn) -> MatchOut:
    return create_match(campaign_id, body.model_dump())


@router.get("/matches/{match_id}", response_model=MatchDetailsOut)
def api_get_match(match_id: int) -> MatchDetailsOut:
    return get_match_details(match_id)


@router.patch("/matches/{match_id}", response_model=MatchOut)
def api_patch_match(match_id: int, body: MatchPatchIn) -> MatchOut:
    return patch_match(match_id, body.model_dump(exclude_unset=True))


@router.get("/matches/{match_id}/warbands", response_model=List[MatchWarbandRosterOut])
def api_match_warbands(match_id: int) -> List[MatchWarbandRosterOut]:
    return match_warbands(match_id)


@router.post("/matches/{match_id}/participants", response_model=MatchOut)
def api_add_participants(match_id: int, body: ParticipantsIn) -> MatchOut:
    return add_participants(match_id, body.warband_ids)


@router.put("/matches/{match_id}/winners", response_model=MatchOut)
def api_set_winners(match_id: int, body: WinnersIn) -> MatchOut:
    return set_winners(match_id, body.warband_ids)


@router.post("/matches/{match_id}/teams", response_model=MatchDetailsOut)
def api_create_team(match_id: int, body: TeamCreateIn) -> MatchDetailsOut:
    return create_team(match_id, body.name, body.warband_ids)


@router.put("/matches/{match_id}/placements", response_model=MatchDetailsOut)
def api_set_placements(match_id: int, body: PlacementsIn) -> MatchDetailsOut:
    return set_placements(match_id, [p.model_dump() for p in body.placements])


@router.post("/matches/{match_id}/casualties", response_model=CasualtyOut)
def api_record_casualty(match_id: int, body: CasualtyCreateIn) -> CasualtyOut:
    return record_casualty(match_id, body.model_dump())
