"""The per-character goal record and its document representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .phases import (
    ARTIFACT_LEVELS,
    CHARACTER_LEVELS,
    STRICT_TARGET,
    INCLUSIVE_TARGET,
    TALENT_LEVELS,
    WEAPON_LEVELS,
    clamp_to_milestone,
)

ARTIFACT_SLOTS: Tuple[str, ...] = ("Flower", "Plume", "Sands", "Goblet", "Circlet")
TALENT_KEYS: Tuple[str, ...] = ("normalAttack", "skill", "burst")
MAX_DESIRED_SUBSTATS = 4

LOCKED_MAIN_STATS: Mapping[str, str] = {"Flower": "HP", "Plume": "ATK"}

MAIN_STAT_OPTIONS: Mapping[str, Tuple[str, ...]] = {
    "Flower": ("HP",),
    "Plume": ("ATK",),
    "Sands": ("HP%", "ATK%", "DEF%", "Energy Recharge", "Elemental Mastery"),
    "Goblet": (
        "HP%",
        "ATK%",
        "DEF%",
        "Elemental Mastery",
        "Pyro DMG Bonus",
        "Hydro DMG Bonus",
        "Electro DMG Bonus",
        "Cryo DMG Bonus",
        "Anemo DMG Bonus",
        "Geo DMG Bonus",
        "Dendro DMG Bonus",
        "Physical DMG Bonus",
    ),
    "Circlet": ("HP%", "ATK%", "DEF%", "Elemental Mastery", "CRIT Rate", "CRIT DMG", "Healing Bonus"),
}

SUBSTAT_OPTIONS: Tuple[str, ...] = (
    "HP",
    "ATK",
    "DEF",
    "HP%",
    "ATK%",
    "DEF%",
    "Energy Recharge",
    "Elemental Mastery",
    "CRIT Rate",
    "CRIT DMG",
)

DEFAULT_TALENT_TARGET = 9


@dataclass(slots=True)
class ArtifactGoal:
    slot: str
    current_level: int = 0
    target_level: int = 20
    main_stat: Optional[str] = None
    desired_substats: List[str] = field(default_factory=list)
    target_substat_count: int = 0

    def __post_init__(self) -> None:
        if self.slot in LOCKED_MAIN_STATS:
            self.main_stat = LOCKED_MAIN_STATS[self.slot]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot,
            "currentLevel": self.current_level,
            "targetLevel": self.target_level,
            "mainStat": self.main_stat,
            "desiredSubstats": list(self.desired_substats),
            "targetSubstatCount": self.target_substat_count,
        }

    @classmethod
    def from_dict(cls, slot: str, data: Mapping[str, Any]) -> "ArtifactGoal":
        """Build a slot goal from untrusted data, clamping everything into range."""

        current = clamp_to_milestone(ARTIFACT_LEVELS, _as_int(data.get("currentLevel"), 0))
        target = clamp_to_milestone(ARTIFACT_LEVELS, _as_int(data.get("targetLevel"), 20))
        main_stat = LOCKED_MAIN_STATS.get(slot, data.get("mainStat"))
        if main_stat not in MAIN_STAT_OPTIONS[slot]:
            main_stat = None
        substats: List[str] = []
        for stat in data.get("desiredSubstats") or []:
            if stat in SUBSTAT_OPTIONS and stat != main_stat and stat not in substats:
                substats.append(stat)
        substats = substats[:MAX_DESIRED_SUBSTATS]
        count = max(0, min(_as_int(data.get("targetSubstatCount"), 0), len(substats)))
        return cls(
            slot=slot,
            current_level=current,
            target_level=target,
            main_stat=main_stat,
            desired_substats=substats,
            target_substat_count=count,
        )


@dataclass(slots=True)
class TalentGoal:
    current_level: int = 1
    target_level: int = DEFAULT_TALENT_TARGET

    def to_dict(self) -> Dict[str, int]:
        return {"currentLevel": self.current_level, "targetLevel": self.target_level}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TalentGoal":
        current = clamp_to_milestone(TALENT_LEVELS, _as_int(data.get("currentLevel"), 1))
        target = clamp_to_milestone(TALENT_LEVELS, _as_int(data.get("targetLevel"), DEFAULT_TALENT_TARGET))
        return cls(current_level=current, target_level=target)


def _default_artifacts() -> List[ArtifactGoal]:
    return [ArtifactGoal(slot=slot) for slot in ARTIFACT_SLOTS]


def _default_talents() -> Dict[str, TalentGoal]:
    return {key: TalentGoal() for key in TALENT_KEYS}


@dataclass(slots=True)
class GoalRecord:
    current_level: int = 1
    target_level: int = 90
    weapon: Optional[str] = None
    weapon_current_level: int = 1
    weapon_target_level: int = 90
    artifacts: List[ArtifactGoal] = field(default_factory=_default_artifacts)
    talents: Dict[str, TalentGoal] = field(default_factory=_default_talents)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentLevel": self.current_level,
            "targetLevel": self.target_level,
            "weapon": self.weapon,
            "weaponCurrentLevel": self.weapon_current_level,
            "weaponTargetLevel": self.weapon_target_level,
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
            "talents": {key: self.talents[key].to_dict() for key in TALENT_KEYS},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GoalRecord":
        """Normalise a goal document into a record that honours every invariant.

        Missing sections fall back to defaults, off-milestone levels are
        snapped down and locked main stats are forced. Artifacts are matched
        by position, so the slot order of the result never depends on input.
        """

        raw_artifacts = data.get("artifacts")
        if not isinstance(raw_artifacts, list):
            raw_artifacts = []
        artifacts = []
        for index, slot in enumerate(ARTIFACT_SLOTS):
            entry = raw_artifacts[index] if index < len(raw_artifacts) else None
            artifacts.append(ArtifactGoal.from_dict(slot, entry) if isinstance(entry, Mapping) else ArtifactGoal(slot=slot))

        raw_talents = data.get("talents")
        if not isinstance(raw_talents, Mapping):
            raw_talents = {}
        talents = {}
        for key in TALENT_KEYS:
            entry = raw_talents.get(key)
            talents[key] = TalentGoal.from_dict(entry) if isinstance(entry, Mapping) else TalentGoal()

        weapon = data.get("weapon")
        return cls(
            current_level=clamp_to_milestone(CHARACTER_LEVELS, _as_int(data.get("currentLevel"), 1)),
            target_level=clamp_to_milestone(CHARACTER_LEVELS, _as_int(data.get("targetLevel"), 90)),
            weapon=weapon if isinstance(weapon, str) and weapon else None,
            weapon_current_level=clamp_to_milestone(WEAPON_LEVELS, _as_int(data.get("weaponCurrentLevel"), 1)),
            weapon_target_level=clamp_to_milestone(WEAPON_LEVELS, _as_int(data.get("weaponTargetLevel"), 90)),
            artifacts=artifacts,
            talents=talents,
        )


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def set_main_stat(artifact: ArtifactGoal, stat: Optional[str]) -> bool:
    """Write ``stat`` as the slot's main stat; locked slots never change."""

    if artifact.slot in LOCKED_MAIN_STATS:
        return False
    if stat is not None and stat not in MAIN_STAT_OPTIONS[artifact.slot]:
        raise ValueError(f"{stat!r} is not a main stat for {artifact.slot}")
    artifact.main_stat = stat
    if stat in artifact.desired_substats:
        artifact.desired_substats.remove(stat)
    _clamp_substat_count(artifact)
    return True


def toggle_substat(artifact: ArtifactGoal, stat: str) -> bool:
    """Add or remove ``stat`` from the desired substats.

    Returns ``False`` without changing anything when the stat equals the main
    stat or the set is already full.
    """

    if stat not in SUBSTAT_OPTIONS:
        raise ValueError(f"Unknown substat: {stat!r}")
    if stat in artifact.desired_substats:
        artifact.desired_substats.remove(stat)
    elif stat == artifact.main_stat or len(artifact.desired_substats) >= MAX_DESIRED_SUBSTATS:
        return False
    else:
        artifact.desired_substats.append(stat)
    _clamp_substat_count(artifact)
    return True


def set_substat_count(artifact: ArtifactGoal, count: int) -> None:
    artifact.target_substat_count = max(0, min(count, len(artifact.desired_substats)))


def _clamp_substat_count(artifact: ArtifactGoal) -> None:
    set_substat_count(artifact, artifact.target_substat_count)


def set_artifact_level(artifact: ArtifactGoal, field_name: str, value: int) -> None:
    level = clamp_to_milestone(ARTIFACT_LEVELS, value)
    if field_name == "currentLevel":
        artifact.current_level = level
        artifact.target_level = STRICT_TARGET.adjust(ARTIFACT_LEVELS, level, artifact.target_level)
    else:
        artifact.target_level = level


def set_talent_level(talent: TalentGoal, field_name: str, value: int) -> None:
    level = clamp_to_milestone(TALENT_LEVELS, value)
    if field_name == "currentLevel":
        talent.current_level = level
        talent.target_level = INCLUSIVE_TARGET.adjust(TALENT_LEVELS, level, talent.target_level)
    else:
        talent.target_level = level
