"""Cumulative EXP and Mora tables and the level-up costs derived from them.

Every table maps a milestone level to the total amount needed to reach it
from the lowest milestone, so the cost of a range is the difference of two
entries. A level missing from a table contributes nothing; ``lookup_range``
reports such misses so callers can tell "free" apart from "unknown".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from .costs import CostItem, currency_item

CHARACTER_CUMULATIVE_EXP: Mapping[int, int] = {
    1: 0,
    20: 120_175,
    40: 578_325,
    50: 1_121_825,
    60: 1_893_275,
    70: 2_929_275,
    80: 4_291_775,
    90: 6_091_675,
}

WEAPON_CUMULATIVE_EXP: Mapping[int, Mapping[int, int]] = {
    5: {
        1: 0,
        20: 404_000,
        40: 1_589_500,
        50: 2_974_500,
        60: 4_936_500,
        70: 7_490_500,
        80: 10_768_500,
        90: 14_941_500,
    },
    4: {
        1: 0,
        20: 218_000,
        40: 831_500,
        50: 1_521_500,
        60: 2_510_500,
        70: 3_819_500,
        80: 5_491_500,
        90: 7_658_500,
    },
    3: {
        1: 0,
        20: 98_000,
        40: 361_000,
        50: 643_000,
        60: 1_048_000,
        70: 1_574_000,
        80: 2_239_000,
        90: 3_092_000,
    },
}
DEFAULT_WEAPON_RARITY = 5

ARTIFACT_CUMULATIVE_MORA: Mapping[int, int] = {
    0: 0,
    4: 2_700,
    8: 10_200,
    12: 24_050,
    16: 47_950,
    20: 88_800,
}

ARTIFACT_CUMULATIVE_EXP: Mapping[int, int] = {
    0: 0,
    4: 16_300,
    8: 66_650,
    12: 189_325,
    16: 436_675,
    20: 871_500,
}

CHARACTER_MORA_RATE = 0.2
WEAPON_MORA_RATE = 0.005
CHARACTER_EXP_ITEM = "Hero's Wit"
CHARACTER_EXP_ITEM_SIZE = 20_000
WEAPON_EXP_ITEM = "Mystic Enhancement Ore"
WEAPON_EXP_ITEM_SIZE = 10_000
ARTIFACT_EXP_ITEM = "Artifact EXP"


@dataclass(frozen=True, slots=True)
class RangeCost:
    amount: int
    missing: Tuple[int, ...] = ()

    @property
    def unknown(self) -> bool:
        return bool(self.missing)


def lookup_range(table: Mapping[int, int], start: int, end: int) -> RangeCost:
    """Return the non-negative difference between two cumulative entries."""

    missing = tuple(level for level in (start, end) if level not in table)
    amount = max(0, table.get(end, 0) - table.get(start, 0))
    return RangeCost(amount=amount, missing=missing)


def range_cost(table: Mapping[int, int], start: int, end: int) -> int:
    return lookup_range(table, start, end).amount


def currency_for(exp: int, rate: float) -> int:
    # Round on the exact product; ``exp * 0.2`` is not exact in binary floats.
    return math.ceil(round(exp * rate, 6))


def items_for(exp: int, unit_size: int) -> int:
    return -(-exp // unit_size)


@dataclass(frozen=True, slots=True)
class LevelUpCost:
    exp: int
    mora: int
    items: int
    item_name: str
    missing: Tuple[int, ...] = ()
    fallback_table: bool = False

    def cost_items(self) -> List[CostItem]:
        result = currency_item(self.mora)
        if self.items > 0:
            result.append(CostItem(name=self.item_name, count=self.items))
        return result


def character_level_cost(current: int, target: int) -> LevelUpCost:
    exp = lookup_range(CHARACTER_CUMULATIVE_EXP, current, target)
    return LevelUpCost(
        exp=exp.amount,
        mora=currency_for(exp.amount, CHARACTER_MORA_RATE),
        items=items_for(exp.amount, CHARACTER_EXP_ITEM_SIZE),
        item_name=CHARACTER_EXP_ITEM,
        missing=exp.missing,
    )


def weapon_exp_table(rarity: int | None) -> Tuple[Mapping[int, int], bool]:
    """Return the EXP table for ``rarity`` and whether it had one of its own."""

    if rarity in WEAPON_CUMULATIVE_EXP:
        return WEAPON_CUMULATIVE_EXP[rarity], True
    return WEAPON_CUMULATIVE_EXP[DEFAULT_WEAPON_RARITY], False


def weapon_level_cost(current: int, target: int, rarity: int | None = DEFAULT_WEAPON_RARITY) -> LevelUpCost:
    table, own_table = weapon_exp_table(rarity)
    exp = lookup_range(table, current, target)
    return LevelUpCost(
        exp=exp.amount,
        mora=currency_for(exp.amount, WEAPON_MORA_RATE),
        items=items_for(exp.amount, WEAPON_EXP_ITEM_SIZE),
        item_name=WEAPON_EXP_ITEM,
        missing=exp.missing,
        fallback_table=not own_table,
    )


def artifact_level_cost(current: int, target: int) -> LevelUpCost:
    """Mora and fodder EXP for one 5-star artifact; fodder has no unit size."""

    mora = lookup_range(ARTIFACT_CUMULATIVE_MORA, current, target)
    exp = lookup_range(ARTIFACT_CUMULATIVE_EXP, current, target)
    return LevelUpCost(
        exp=exp.amount,
        mora=mora.amount,
        items=exp.amount,
        item_name=ARTIFACT_EXP_ITEM,
        missing=tuple(sorted(set(mora.missing) | set(exp.missing))),
    )
