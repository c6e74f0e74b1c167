import itertools

from training_guide.costs import CostItem
from training_guide.goals import GoalRecord
from training_guide.phases import ARTIFACT_LEVELS, CHARACTER_LEVELS
from training_guide.totals import goal_costs, roster_totals


def _totals(items):
    return {item.name: item.count for item in items}


def _finished_goal() -> GoalRecord:
    goal = GoalRecord(current_level=90, target_level=90, weapon="Amos' Bow", weapon_current_level=90)
    for artifact in goal.artifacts:
        artifact.current_level = 20
    for talent in goal.talents.values():
        talent.current_level = 9
    return goal


def test_default_goal_costs(game_data):
    breakdown = goal_costs("Amber", GoalRecord(), game_data)

    assert _totals(breakdown.level) == {
        "Mora": 420_000 + 1_218_335,
        "Agnidus Agate Sliver": 1,
        "Agnidus Agate Fragment": 9,
        "Agnidus Agate Chunk": 9,
        "Agnidus Agate Gemstone": 6,
        "Hero's Wit": 305,
    }
    assert breakdown.weapon == []
    assert _totals(breakdown.artifacts) == {"Mora": 5 * 88_800, "Artifact EXP": 5 * 871_500}
    assert _totals(breakdown.talents) == {"Mora": 3 * 44_000, "Guide to Freedom": 24}
    assert breakdown.notes == []


def test_currency_collapses_into_one_entry(game_data):
    items = goal_costs("Amber", GoalRecord(), game_data).items
    assert [item.name for item in items].count("Mora") == 1
    assert items[0] == CostItem("Mora", 420_000 + 1_218_335 + 5 * 88_800 + 3 * 44_000)


def test_level_one_to_twenty_has_no_ascension(game_data):
    goal = _finished_goal()
    goal.current_level, goal.target_level = 1, 20
    assert goal_costs("Amber", goal, game_data).items == [CostItem("Mora", 24_035), CostItem("Hero's Wit", 7)]


def test_weapon_costs_use_rarity(game_data):
    goal = _finished_goal()
    goal.weapon_current_level, goal.weapon_target_level = 1, 20
    assert goal_costs("Amber", goal, game_data).weapon == [
        CostItem("Mora", 2_020),
        CostItem("Mystic Enhancement Ore", 41),
    ]

    goal.weapon = "The Stringless"
    goal.weapon_current_level, goal.weapon_target_level = 80, 90
    assert _totals(goal_costs("Amber", goal, game_data).weapon) == {
        "Mora": 5_000 * 6 + 10_835,
        "Tile of Decarabian's Tower": 6,
        "Mystic Enhancement Ore": 217,
    }


def test_weapon_without_rarity_is_noted(game_data):
    goal = _finished_goal()
    goal.weapon = "Mystery Bow"
    goal.weapon_current_level, goal.weapon_target_level = 1, 20
    breakdown = goal_costs("Amber", goal, game_data)
    assert breakdown.weapon == [CostItem("Mora", 2_020), CostItem("Mystic Enhancement Ore", 41)]
    assert breakdown.notes == ["Mystery Bow: rarity unknown, using 5-star EXP table"]


def test_weapon_rarity_without_exp_table_is_noted(game_data):
    goal = _finished_goal()
    goal.weapon = "Silver Sword"
    goal.weapon_current_level, goal.weapon_target_level = 1, 20
    breakdown = goal_costs("Amber", goal, game_data)
    assert breakdown.weapon == [CostItem("Mora", 2_020), CostItem("Mystic Enhancement Ore", 41)]
    assert breakdown.notes == ["Silver Sword: no EXP table for 2-star weapons, using 5-star EXP table"]


def test_finished_goal_costs_nothing(game_data):
    breakdown = goal_costs("Amber", _finished_goal(), game_data)
    assert breakdown.items == []
    assert breakdown.notes == []


def test_no_cost_when_current_at_or_past_target(game_data):
    goal = _finished_goal()
    for current, target in itertools.product(CHARACTER_LEVELS, repeat=2):
        if current < target:
            continue
        goal.current_level, goal.target_level = current, target
        goal.weapon_current_level, goal.weapon_target_level = current, target
        assert goal_costs("Amber", goal, game_data).items == []
    for current, target in itertools.product(ARTIFACT_LEVELS, repeat=2):
        if current < target:
            continue
        goal.artifacts[2].current_level, goal.artifacts[2].target_level = current, target
        assert goal_costs("Amber", goal, game_data).items == []


def test_missing_talent_data_contributes_nothing_but_is_noted(game_data):
    goal = _finished_goal()
    goal.talents["skill"].current_level = 1
    breakdown = goal_costs("Xiangling", goal, game_data)
    assert breakdown.talents == []
    assert breakdown.notes == ["Xiangling: no talent data"]


def test_talents_are_costed_separately(game_data):
    goal = _finished_goal()
    goal.talents["skill"].current_level = 8
    goal.talents["skill"].target_level = 10
    goal.talents["burst"].current_level = 9
    goal.talents["burst"].target_level = 10
    assert _totals(goal_costs("Amber", goal, game_data).talents) == {"Mora": 9_000 + 10_000 + 10_000, "Guide to Freedom": 3}


def test_roster_totals_sum_tracked_owned_goals(store):
    store.toggle_ownership("Amber")
    store.toggle_ownership("Fischl")
    store.ensure("Amber")
    store.ensure("Fischl")
    store.ensure("Xiangling")  # goal exists but not owned

    totals = roster_totals(store)
    single = goal_costs("Amber", GoalRecord(), store.provider)

    assert [breakdown.character for breakdown in totals.per_character] == ["Amber", "Fischl"]
    assert _totals(totals.items)["Mora"] == 2 * _totals(single.items)["Mora"]
    assert _totals(totals.items)["Agnidus Agate Gemstone"] == 6
    assert _totals(totals.items)["Vajrada Amethyst Gemstone"] == 6


def test_roster_totals_recomputed_after_mutation(store):
    store.toggle_ownership("Amber")
    store.ensure("Amber")
    before = _totals(roster_totals(store).items)["Mora"]
    store.set_level("Amber", "character", "currentLevel", 80)
    after = _totals(roster_totals(store).items)["Mora"]
    assert after < before


def test_owned_character_without_goal_is_skipped(store):
    store.toggle_ownership("Fischl")
    totals = roster_totals(store)
    assert totals.items == []
    assert totals.per_character == []
