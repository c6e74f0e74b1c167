import copy

import pytest

from training_guide.goals import GoalRecord
from training_guide.validation import validate_import

KNOWN = {"Amber", "Fischl", "Xiangling"}
WEAPONS = {"Amos' Bow"}


def _document():
    goal = GoalRecord().to_dict()
    goal["weapon"] = "Amos' Bow"
    return {
        "ownedCharacters": ["Amber", "Fischl"],
        "characterGoals": {"Amber": goal},
        "selectedCharacter": "Amber",
    }


def _messages(errors):
    return [str(error) for error in errors]


def test_valid_document_has_no_errors():
    assert validate_import(_document(), KNOWN, WEAPONS) == []


def test_empty_object_is_valid():
    assert validate_import({}, KNOWN) == []


@pytest.mark.parametrize("document", [[], "text", None, 42])
def test_non_object_rejected(document):
    errors = validate_import(document, KNOWN)
    assert len(errors) == 1
    assert "JSON object" in errors[0].message


def test_unexpected_top_level_key():
    document = _document()
    document["ownershipMode"] = True
    errors = validate_import(document, KNOWN, WEAPONS)
    assert [error.path for error in errors] == ["ownershipMode"]


def test_unknown_characters_everywhere_are_all_reported():
    document = _document()
    document["ownedCharacters"].append("Paimon")
    document["ownedCharacters"].append(7)
    document["characterGoals"]["Dainsleif"] = GoalRecord().to_dict()
    errors = validate_import(document, KNOWN, WEAPONS)
    paths = [error.path for error in errors]
    assert "ownedCharacters[2]" in paths
    assert "ownedCharacters[3]" in paths
    assert "characterGoals.Dainsleif" in paths


def test_selected_character_must_be_known_and_owned():
    document = _document()
    document["selectedCharacter"] = "Paimon"
    assert any(error.path == "selectedCharacter" for error in validate_import(document, KNOWN))

    document["selectedCharacter"] = "Xiangling"
    errors = validate_import(document, KNOWN)
    assert _messages(errors) == ['selectedCharacter: "Xiangling" is not in ownedCharacters']

    document["selectedCharacter"] = None
    assert validate_import(document, KNOWN, WEAPONS) == []


def test_wrong_container_types():
    errors = validate_import({"ownedCharacters": "Amber", "characterGoals": []}, KNOWN)
    assert {error.path for error in errors} == {"ownedCharacters", "characterGoals"}


def test_invalid_levels_are_reported():
    document = _document()
    goal = document["characterGoals"]["Amber"]
    goal["currentLevel"] = 55
    goal["targetLevel"] = "90"
    goal["weaponTargetLevel"] = 100
    goal["artifacts"][2]["targetLevel"] = 21
    paths = {error.path for error in validate_import(document, KNOWN, WEAPONS)}
    assert paths == {
        "characterGoals.Amber.currentLevel",
        "characterGoals.Amber.targetLevel",
        "characterGoals.Amber.weaponTargetLevel",
        "characterGoals.Amber.artifacts[2].targetLevel",
    }


def test_unknown_weapon_checked_against_allow_list():
    document = _document()
    document["characterGoals"]["Amber"]["weapon"] = "Wooden Stick"
    assert [error.path for error in validate_import(document, KNOWN, WEAPONS)] == ["characterGoals.Amber.weapon"]
    assert validate_import(document, KNOWN) == []


def test_four_artifacts_names_character_and_missing_slot():
    document = _document()
    document["characterGoals"]["Amber"]["artifacts"].pop()
    errors = validate_import(document, KNOWN, WEAPONS)
    assert len(errors) == 1
    assert "Amber" in errors[0].message
    assert "Circlet" in errors[0].message


def test_artifacts_out_of_order():
    document = _document()
    artifacts = document["characterGoals"]["Amber"]["artifacts"]
    artifacts[0], artifacts[1] = artifacts[1], artifacts[0]
    errors = validate_import(document, KNOWN, WEAPONS)
    assert _messages(errors) == [
        'characterGoals.Amber.artifacts[0]: "Amber" artifact[0] has wrong slot (expected "Flower")',
        'characterGoals.Amber.artifacts[1]: "Amber" artifact[1] has wrong slot (expected "Plume")',
    ]


def test_too_many_substats():
    document = _document()
    document["characterGoals"]["Amber"]["artifacts"][4]["desiredSubstats"] = ["HP", "ATK", "DEF", "HP%", "ATK%"]
    errors = validate_import(document, KNOWN, WEAPONS)
    assert [error.path for error in errors] == ["characterGoals.Amber.artifacts[4].desiredSubstats"]


def test_talents_need_all_keys_in_range():
    document = _document()
    talents = document["characterGoals"]["Amber"]["talents"]
    del talents["burst"]
    talents["skill"]["targetLevel"] = 11
    errors = validate_import(document, KNOWN, WEAPONS)
    assert {error.path for error in errors} == {
        "characterGoals.Amber.talents.burst",
        "characterGoals.Amber.talents.skill",
    }


def test_validation_does_not_mutate_document():
    document = _document()
    document["characterGoals"]["Amber"]["artifacts"].pop()
    snapshot = copy.deepcopy(document)
    validate_import(document, KNOWN, WEAPONS)
    assert document == snapshot
