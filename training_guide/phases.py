"""Ascension phases, milestone levels and target-advancement policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

CHARACTER_LEVELS: Tuple[int, ...] = (1, 20, 40, 50, 60, 70, 80, 90)
WEAPON_LEVELS: Tuple[int, ...] = CHARACTER_LEVELS
ARTIFACT_LEVELS: Tuple[int, ...] = (0, 4, 8, 12, 16, 20)
TALENT_LEVELS: Tuple[int, ...] = tuple(range(1, 11))

# Index of the last ascension phase already completed at each level cap.
LEVEL_TO_PHASE: Dict[int, int] = {
    1: 0,
    20: 0,
    40: 1,
    50: 2,
    60: 3,
    70: 4,
    80: 5,
    90: 6,
}


def phase_for_level(level: int) -> int:
    return LEVEL_TO_PHASE.get(level, 0)


def phase_range(current: int, target: int) -> range:
    """Return the ascension phases that must be paid for to go from ``current`` to ``target``.

    The range is empty when ``current`` is at or past ``target``.
    """

    return range(phase_for_level(current) + 1, phase_for_level(target) + 1)


def clamp_to_milestone(levels: Sequence[int], value: int) -> int:
    """Snap ``value`` to the highest milestone not above it, bounded by the set."""

    if value <= levels[0]:
        return levels[0]
    snapped = levels[0]
    for level in levels:
        if level > value:
            break
        snapped = level
    return snapped


@dataclass(frozen=True, slots=True)
class TargetPolicy:
    """How a target level follows its current level when the current catches up."""

    name: str
    _advance: Callable[[Sequence[int], int], int]

    def adjust(self, levels: Sequence[int], current: int, target: int) -> int:
        """Return the target to keep once ``current`` has been written."""

        if current < target:
            return target
        return self._advance(levels, current)


def _next_strictly_greater(levels: Sequence[int], current: int) -> int:
    for level in levels:
        if level > current:
            return level
    return levels[-1]


def _next_at_least(levels: Sequence[int], current: int) -> int:
    for level in levels:
        if level >= current:
            return level
    return levels[-1]


STRICT_TARGET = TargetPolicy("strict", _next_strictly_greater)
"""Character, weapon and artifact levels: the target must move past the current level."""

INCLUSIVE_TARGET = TargetPolicy("inclusive", _next_at_least)
"""Talent levels: a target equal to the current level is a finished goal."""
