"""Structural validation of imported training-guide documents.

Validation never raises and never stops at the first problem: every error
that can be detected is collected so the caller can report them together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Dict, List, Mapping, Optional

from .goals import ARTIFACT_SLOTS, MAX_DESIRED_SUBSTATS, TALENT_KEYS
from .phases import ARTIFACT_LEVELS, CHARACTER_LEVELS, TALENT_LEVELS, WEAPON_LEVELS

DOCUMENT_KEYS = ("ownedCharacters", "characterGoals", "selectedCharacter")


@dataclass(frozen=True, slots=True)
class ValidationError:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "message": self.message}


def _is_level(value: Any, levels: Collection[int]) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value in levels


class _Collector:
    def __init__(self) -> None:
        self.errors: List[ValidationError] = []

    def add(self, path: str, message: str) -> None:
        self.errors.append(ValidationError(path=path, message=message))


def validate_import(
    document: Any,
    known_characters: Collection[str],
    known_weapons: Optional[Collection[str]] = None,
) -> List[ValidationError]:
    """Return every problem found in ``document``; an empty list means it is safe to apply."""

    if not isinstance(document, Mapping):
        return [ValidationError(path="", message="Import data must be a JSON object")]

    errors = _Collector()
    for key in document:
        if key not in DOCUMENT_KEYS:
            errors.add(str(key), "Unexpected top-level key")

    owned = document.get("ownedCharacters")
    if owned is not None:
        if not isinstance(owned, list):
            errors.add("ownedCharacters", "must be an array")
            owned = None
        else:
            for index, name in enumerate(owned):
                path = f"ownedCharacters[{index}]"
                if not isinstance(name, str):
                    errors.add(path, f"non-string value: {name!r}")
                elif name not in known_characters:
                    errors.add(path, f'Unknown character "{name}"')

    selected = document.get("selectedCharacter")
    if selected is not None:
        if not isinstance(selected, str) or selected not in known_characters:
            errors.add("selectedCharacter", f"Invalid selectedCharacter: {selected!r}")
        elif selected not in (owned or []):
            errors.add("selectedCharacter", f'"{selected}" is not in ownedCharacters')

    goals = document.get("characterGoals")
    if goals is not None:
        if not isinstance(goals, Mapping):
            errors.add("characterGoals", "must be an object")
        else:
            for name, goal in goals.items():
                if name not in known_characters:
                    errors.add(f"characterGoals.{name}", f'Unknown character "{name}"')
                    continue
                _validate_goal(errors, name, goal, known_weapons)

    return errors.errors


def _validate_goal(
    errors: _Collector,
    name: str,
    goal: Any,
    known_weapons: Optional[Collection[str]],
) -> None:
    base = f"characterGoals.{name}"
    if not isinstance(goal, Mapping):
        errors.add(base, f'Goal for "{name}" is not an object')
        return

    for key in ("currentLevel", "targetLevel"):
        if key in goal and not _is_level(goal[key], CHARACTER_LEVELS):
            errors.add(f"{base}.{key}", f'"{name}" has invalid {key}: {goal[key]!r}')
    for key in ("weaponCurrentLevel", "weaponTargetLevel"):
        if key in goal and not _is_level(goal[key], WEAPON_LEVELS):
            errors.add(f"{base}.{key}", f'"{name}" has invalid {key}: {goal[key]!r}')

    weapon = goal.get("weapon")
    if weapon is not None:
        if not isinstance(weapon, str):
            errors.add(f"{base}.weapon", f'"{name}" has a non-string weapon: {weapon!r}')
        elif known_weapons is not None and weapon not in known_weapons:
            errors.add(f"{base}.weapon", f'"{name}" has unknown weapon "{weapon}"')

    if "artifacts" in goal:
        _validate_artifacts(errors, name, goal["artifacts"])
    if "talents" in goal:
        _validate_talents(errors, name, goal["talents"])


def _validate_artifacts(errors: _Collector, name: str, artifacts: Any) -> None:
    base = f"characterGoals.{name}.artifacts"
    if not isinstance(artifacts, list):
        errors.add(base, f'"{name}" artifacts must be an array of {len(ARTIFACT_SLOTS)}')
        return
    if len(artifacts) < len(ARTIFACT_SLOTS):
        missing = ", ".join(f'"{slot}"' for slot in ARTIFACT_SLOTS[len(artifacts):])
        errors.add(base, f'"{name}" artifacts must be an array of {len(ARTIFACT_SLOTS)} (missing slot {missing})')
    elif len(artifacts) > len(ARTIFACT_SLOTS):
        errors.add(base, f'"{name}" artifacts must be an array of {len(ARTIFACT_SLOTS)} (got {len(artifacts)})')

    for index, (slot, artifact) in enumerate(zip(ARTIFACT_SLOTS, artifacts)):
        path = f"{base}[{index}]"
        if not isinstance(artifact, Mapping) or artifact.get("slot") != slot:
            errors.add(path, f'"{name}" artifact[{index}] has wrong slot (expected "{slot}")')
            continue
        for key in ("currentLevel", "targetLevel"):
            if key in artifact and not _is_level(artifact[key], ARTIFACT_LEVELS):
                errors.add(f"{path}.{key}", f'"{name}" {slot} has invalid {key}: {artifact[key]!r}')
        substats = artifact.get("desiredSubstats")
        if substats is not None:
            if not isinstance(substats, list) or not all(isinstance(stat, str) for stat in substats):
                errors.add(f"{path}.desiredSubstats", f'"{name}" {slot} desiredSubstats must be an array of strings')
            elif len(substats) > MAX_DESIRED_SUBSTATS:
                errors.add(
                    f"{path}.desiredSubstats",
                    f'"{name}" {slot} has more than {MAX_DESIRED_SUBSTATS} desired substats',
                )


def _validate_talents(errors: _Collector, name: str, talents: Any) -> None:
    base = f"characterGoals.{name}.talents"
    if not isinstance(talents, Mapping):
        errors.add(base, f'"{name}" talents must be an object')
        return
    for key in TALENT_KEYS:
        talent = talents.get(key)
        if not isinstance(talent, Mapping):
            errors.add(f"{base}.{key}", f'"{name}" is missing talent "{key}"')
            continue
        if not all(_is_level(talent.get(field), TALENT_LEVELS) for field in ("currentLevel", "targetLevel")):
            errors.add(f"{base}.{key}", f'"{name}" talent "{key}" has out-of-range levels')
