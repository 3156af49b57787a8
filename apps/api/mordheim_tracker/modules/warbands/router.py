from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from mordheim_tracker.modules.warriors.schemas import WarriorOut

from .schemas import WarbandCreateIn, WarbandOut, WarbandPatchIn, WarbandWithWarriorsOut
from .service import create_warband, delete_warband, get_warband, list_warbands, patch_warband, warband_warriors

router = APIRouter(tags=["warbands"])


@router.get(
    "/campaigns/{campaign_id}/warbands",
    response_model=List[WarbandWithWarriorsOut],
)
def api_list_warbands(campaign_id: int, with_warriors: bool = Query(False)) -> List[WarbandWithWarriorsOut]:
    return list_warbands(campaign_id, with_warriors=with_warriors)


@router.post("/campaigns/{campaign_id}/warbands", response_model=WarbandOut)
def api_create_warband(campaign_id: int, body: WarbandCreateIn) -> WarbandOut:
    return create_warband(campaign_id, body.model_dump())


@router.get("/warbands/{warband_id}", response_model=WarbandOut)
def api_get_warband(warband_id: int) -> WarbandOut:
    return get_warband(warband_id)


@router.patch("/warbands/{warband_id}", response_model=WarbandOut)
def api_patch_warband(warband_id: int, body: WarbandPatchIn) -> WarbandOut:
    return patch_warband(warband_id, body.model_dump(exclude_unset=True))


@router.delete("/warbands/{warband_id}", response_model=WarbandOut)
def api_delete_warband(warband_id: int) -> WarbandOut:
    return delete_warband(warband_id)


@router.get("/warbands/{warband_id}/warriors", response_model=List[WarriorOut])
def api_warband_warriors(warband_id: int) -> List[WarriorOut]:
    return warband_warriors(warband_id)
