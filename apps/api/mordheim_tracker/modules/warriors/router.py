from __future__ import annotations

from typing import List

from fastapi import APIRouter

from mordheim_tracker.modules.events.service import add_experience_to_warrior

from .schemas import WarriorCreateIn, WarriorDetailOut, WarriorExperienceIn, WarriorOut, WarriorPatchIn
from .service import create_warrior, get_warrior, list_campaign_warriors, patch_warrior

router = APIRouter(tags=["warriors"])


@router.get("/campaigns/{campaign_id}/warriors", response_model=List[WarriorOut])
def api_list_campaign_warriors(campaign_id: int) -> List[WarriorOut]:
    return list_campaign_warriors(campaign_id)


@router.post("/warbands/{warband_id}/warriors", response_model=WarriorDetailOut)
def api_create_warrior(warband_id: int, body: WarriorCreateIn) -> WarriorDetailOut:
    return create_warrior(warband_id, body.model_dump())


@router.get("/warriors/{warrior_id}", response_model=WarriorDetailOut)
def api_get_warrior(warrior_id: int) -> WarriorDetailOut:
    return get_warrior(warrior_id)


@router.patch("/warriors/{warrior_id}", response_model=WarriorDetailOut)
def api_patch_warrior(warrior_id: int, body: WarriorPatchIn) -> WarriorDetailOut:
    return patch_warrior(warrior_id, body.model_dump(exclude_unset=True))


@router.post("/warriors/{warrior_id}/experience", response_model=WarriorDetailOut)
def api_add_warrior_experience(warrior_id: int, body: WarriorExperienceIn) -> WarriorDetailOut:
    add_experience_to_warrior(warrior_id, body.amount, match_id=body.match_id)
    return get_warrior(warrior_id)
