"""Remaining-cost breakdowns per goal and grand totals across the roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .costs import CostItem, costs_to_dicts, merge_costs
from .game_data import GameDataProvider
from .goals import TALENT_KEYS, GoalRecord
from .level_tables import artifact_level_cost, character_level_cost, weapon_level_cost
from .phases import phase_range
from .store import GoalStore


@dataclass(slots=True)
class GoalCostBreakdown:
    character: str
    level: List[CostItem] = field(default_factory=list)
    weapon: List[CostItem] = field(default_factory=list)
    artifacts: List[CostItem] = field(default_factory=list)
    talents: List[CostItem] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def items(self) -> List[CostItem]:
        return merge_costs(self.level, self.weapon, self.artifacts, self.talents)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "character": self.character,
            "level": costs_to_dicts(self.level),
            "weapon": costs_to_dicts(self.weapon),
            "artifacts": costs_to_dicts(self.artifacts),
            "talents": costs_to_dicts(self.talents),
            "items": costs_to_dicts(self.items),
            "notes": list(self.notes),
        }


@dataclass(slots=True)
class RosterTotals:
    items: List[CostItem]
    per_character: List[GoalCostBreakdown]
    notes: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": costs_to_dicts(self.items),
            "characters": [breakdown.to_dict() for breakdown in self.per_character],
            "notes": list(self.notes),
        }


def _missing_note(label: str, missing) -> str:
    levels = ", ".join(str(level) for level in missing)
    return f"{label}: no cost data for level {levels}"


def goal_costs(character: str, goal: GoalRecord, provider: GameDataProvider) -> GoalCostBreakdown:
    """Everything still needed to take ``goal`` from its current to its target levels.

    Dimensions already at or past their target contribute nothing. Lookups
    the provider cannot answer contribute nothing as well, but leave a note.
    """

    breakdown = GoalCostBreakdown(character=character)

    if goal.current_level < goal.target_level:
        ascension = provider.character_ascension_costs(
            character, phase_range(goal.current_level, goal.target_level)
        )
        if ascension is None:
            breakdown.notes.append(f"{character}: no ascension data")
            ascension = []
        levelling = character_level_cost(goal.current_level, goal.target_level)
        if levelling.missing:
            breakdown.notes.append(_missing_note(f"{character} level", levelling.missing))
        breakdown.level = merge_costs(ascension, levelling.cost_items())

    if goal.weapon and goal.weapon_current_level < goal.weapon_target_level:
        ascension = provider.weapon_ascension_costs(
            goal.weapon, phase_range(goal.weapon_current_level, goal.weapon_target_level)
        )
        if ascension is None:
            breakdown.notes.append(f"{goal.weapon}: no ascension data")
            ascension = []
        rarity = provider.weapon_rarity(goal.weapon)
        levelling = weapon_level_cost(goal.weapon_current_level, goal.weapon_target_level, rarity)
        if rarity is None:
            breakdown.notes.append(f"{goal.weapon}: rarity unknown, using 5-star EXP table")
        elif levelling.fallback_table:
            breakdown.notes.append(f"{goal.weapon}: no EXP table for {rarity}-star weapons, using 5-star EXP table")
        if levelling.missing:
            breakdown.notes.append(_missing_note(f"{goal.weapon} level", levelling.missing))
        breakdown.weapon = merge_costs(ascension, levelling.cost_items())

    artifact_costs = []
    for artifact in goal.artifacts:
        if artifact.current_level >= artifact.target_level:
            continue
        levelling = artifact_level_cost(artifact.current_level, artifact.target_level)
        if levelling.missing:
            breakdown.notes.append(_missing_note(f"{character} {artifact.slot}", levelling.missing))
        artifact_costs.append(levelling.cost_items())
    breakdown.artifacts = merge_costs(*artifact_costs)

    talent_costs = []
    for key in TALENT_KEYS:
        talent = goal.talents[key]
        if talent.current_level >= talent.target_level:
            continue
        items = provider.talent_costs(character, talent.current_level, talent.target_level)
        if items is None:
            breakdown.notes.append(f"{character}: no talent data")
            break
        talent_costs.append(items)
    breakdown.talents = merge_costs(*talent_costs)

    return breakdown


def roster_totals(store: GoalStore) -> RosterTotals:
    """Fold the remaining costs of every tracked roster goal into one list."""

    breakdowns = [goal_costs(name, goal, store.provider) for name, goal in store.tracked_goals()]
    return RosterTotals(
        items=merge_costs(*(breakdown.items for breakdown in breakdowns)),
        per_character=breakdowns,
        notes=[note for breakdown in breakdowns for note in breakdown.notes],
    )
