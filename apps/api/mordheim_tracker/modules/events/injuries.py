"""
Serious injury chart (D66: first die tens, second die ones).

Each injury code maps to one outcome category; event resolution uses the category
to decide whether the defender dies, is injured, or neither.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple, Union

OutcomeCategory = Literal["lethal", "injurious", "other"]

LETHAL: OutcomeCategory = "lethal"
INJURIOUS: OutcomeCategory = "injurious"
OTHER: OutcomeCategory = "other"

InjuryType = Literal[
    "dead",
    "multiple",
    "leg_wound",
    "arm_wound",
    "madness",
    "smashed_leg",
    "chest_wound",
    "blinded_in_one_eye",
    "old_battle_wound",
    "nervous",
    "hand_injury",
    "deep_wound",
    "robbed",
    "full_recovery",
    "bitter_emnity",
    "captured",
    "hardened",
    "horrible_scars",
    "sold_to_pits",
    "survive_against_odds",
]

Roll = Union[int, Tuple[int, int]]


@dataclass(frozen=True)
class SeriousInjury:
    code: str
    roll: Roll
    name: str
    outcome: OutcomeCategory
    stat_effect: Optional[str] = None

    def matches_roll(self, roll: int) -> bool:
        if isinstance(self.roll, int):
            return roll == self.roll
        return self.roll[0] <= roll <= self.roll[1]


SERIOUS_INJURIES: List[SeriousInjury] = [
    SeriousInjury("dead", (11, 15), "Dead", LETHAL),
    SeriousInjury("multiple", (16, 21), "Multiple Injuries", OTHER),
    SeriousInjury("leg_wound", 22, "Leg Wound", INJURIOUS, "-1 Movement"),
    SeriousInjury("arm_wound", 23, "Arm Wound", INJURIOUS),
    SeriousInjury("madness", 24, "Madness", INJURIOUS),
    SeriousInjury("smashed_leg", 25, "Smashed Leg", INJURIOUS),
    SeriousInjury("chest_wound", 26, "Chest Wound", INJURIOUS, "-1 Toughness"),
    SeriousInjury("blinded_in_one_eye", 31, "Blinded in One Eye", INJURIOUS, "-1 Ballistic Skill"),
    SeriousInjury("old_battle_wound", 32, "Old Battle Wound", INJURIOUS),
    SeriousInjury("nervous", 33, "Nervous Condition", INJURIOUS, "-1 Initiative"),
    SeriousInjury("hand_injury", 34, "Hand Injury", INJURIOUS, "-1 Weapon Skill"),
    SeriousInjury("deep_wound", 35, "Deep Wound", INJURIOUS),
    SeriousInjury("robbed", 36, "Robbed", OTHER),
    SeriousInjury("full_recovery", (41, 55), "Full Recovery", OTHER),
    SeriousInjury("bitter_emnity", 56, "Bitter Enmity", INJURIOUS),
    SeriousInjury("captured", 61, "Captured", OTHER),
    SeriousInjury("hardened", (62, 63), "Hardened", OTHER),
    SeriousInjury("horrible_scars", 64, "Horrible Scars", INJURIOUS),
    SeriousInjury("sold_to_pits", 65, "Sold to the Pits", OTHER),
    SeriousInjury("survive_against_odds", 66, "Survives Against the Odds", OTHER),
]

_BY_CODE: Dict[str, SeriousInjury] = {i.code: i for i in SERIOUS_INJURIES}

INJURY_TYPES: Tuple[str, ...] = tuple(_BY_CODE)


def get_injury(code: str) -> Optional[SeriousInjury]:
    return _BY_CODE.get(code)


def outcome_category(code: str) -> Optional[OutcomeCategory]:
    injury = _BY_CODE.get(code)
    return injury.outcome if injury is not None else None


def is_valid_d66(roll: int) -> bool:
    return 1 <= roll // 10 <= 6 and 1 <= roll % 10 <= 6


def get_injury_by_roll(roll: int) -> Optional[SeriousInjury]:
    if not is_valid_d66(roll):
        return None
    for injury in SERIOUS_INJURIES:
        if injury.matches_roll(roll):
            return injury
    return None
