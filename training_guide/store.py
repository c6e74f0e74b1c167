"""The goal store: roster state, named mutations and write-through persistence."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .game_data import GameDataProvider
from .goals import (
    ARTIFACT_SLOTS,
    TALENT_KEYS,
    GoalRecord,
    set_artifact_level,
    set_main_stat,
    set_substat_count,
    set_talent_level,
    toggle_substat,
)
from .phases import CHARACTER_LEVELS, STRICT_TARGET, WEAPON_LEVELS, clamp_to_milestone
from .storage import Storage
from .validation import ValidationError, validate_import

logger = logging.getLogger(__name__)

LEVEL_FIELDS = ("currentLevel", "targetLevel")
LEVEL_DIMENSIONS = ("character", "weapon")
ARTIFACT_FIELDS = ("currentLevel", "targetLevel", "mainStat", "substat", "targetSubstatCount")


class GoalStoreError(ValueError):
    """Raised when a mutation names something the store does not know about."""


class UnknownCharacterError(GoalStoreError):
    pass


class GoalStore:
    """Owns the roster, the goal records and the current selection.

    State only changes through the named operations below. Each operation
    bumps ``revision`` and writes the full document to ``storage`` unless a
    ``batch()`` is open, in which case a single write happens when the
    outermost batch closes. Write failures are logged and never roll back.
    """

    def __init__(self, provider: GameDataProvider, storage: Storage) -> None:
        self._provider = provider
        self._storage: Optional[Storage] = storage
        self._known_characters = frozenset(provider.character_names())
        self._known_weapons = frozenset(provider.weapon_names())
        self._owned: List[str] = []
        self._goals: Dict[str, GoalRecord] = {}
        self._selected: Optional[str] = None
        self.ownership_mode = False
        self.revision = 0
        self._persisted_revision = 0
        self._batch_depth = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> List[ValidationError]:
        """Replace the in-memory state with the stored snapshot, if it is valid."""

        if self._storage is None:
            raise GoalStoreError("Store has been torn down")
        try:
            document = self._storage.load()
        except (OSError, ValueError) as exc:
            logger.warning("Could not read saved state, starting empty: %s", exc)
            return [ValidationError(path="", message=f"Saved state is unreadable: {exc}")]
        if document is None:
            return []
        errors = validate_import(document, self._known_characters, self._known_weapons)
        if errors:
            logger.warning("Saved state rejected with %d error(s), starting empty", len(errors))
            return errors
        self._replace(document)
        self._persisted_revision = self.revision
        logger.info("Loaded %d goal(s) for %d owned character(s)", len(self._goals), len(self._owned))
        return []

    def teardown(self) -> None:
        """Flush any pending write and detach from storage."""

        if self._storage is None:
            return
        self._batch_depth = 0
        self.flush()
        self._storage = None

    @contextmanager
    def batch(self) -> Iterator["GoalStore"]:
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.flush()

    def flush(self) -> None:
        if self._storage is None or self._persisted_revision == self.revision:
            return
        revision = self.revision
        try:
            self._storage.save(self.export_document())
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to persist revision %d: %s", revision, exc)
            return
        self._persisted_revision = revision

    def _commit(self) -> None:
        self.revision += 1
        if self._batch_depth == 0:
            self.flush()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def provider(self) -> GameDataProvider:
        return self._provider

    @property
    def owned_characters(self) -> Tuple[str, ...]:
        return tuple(self._owned)

    @property
    def selected_character(self) -> Optional[str]:
        return self._selected

    @property
    def known_characters(self) -> frozenset[str]:
        return self._known_characters

    @property
    def known_weapons(self) -> frozenset[str]:
        return self._known_weapons

    def goal(self, character: str) -> Optional[GoalRecord]:
        """Return a copy of the goal record for ``character``, if one exists."""

        record = self._goals.get(character)
        return GoalRecord.from_dict(record.to_dict()) if record else None

    def tracked_goals(self) -> List[Tuple[str, GoalRecord]]:
        """Owned characters that have a goal record, in roster order."""

        return [(name, self.goal(name)) for name in self._owned if name in self._goals]

    def export_document(self) -> Dict[str, Any]:
        return {
            "ownedCharacters": list(self._owned),
            "characterGoals": {name: goal.to_dict() for name, goal in self._goals.items()},
            "selectedCharacter": self._selected,
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _require_character(self, character: str) -> None:
        if character not in self._known_characters:
            raise UnknownCharacterError(f"Unknown character: {character!r}")

    def _record(self, character: str) -> GoalRecord:
        self._require_character(character)
        if character not in self._goals:
            self._goals[character] = GoalRecord()
        return self._goals[character]

    def ensure(self, character: str) -> GoalRecord:
        """Create a default goal for ``character`` if it has none yet."""

        created = character not in self._goals
        self._record(character)
        if created:
            self._commit()
        return self.goal(character)

    def select(self, character: str) -> bool:
        """Select an owned character, creating its goal. Ignored in ownership mode."""

        self._require_character(character)
        if self.ownership_mode:
            return False
        if character not in self._owned:
            raise GoalStoreError(f"{character!r} is not in the roster")
        self._record(character)
        self._selected = character
        self._commit()
        return True

    def toggle_ownership(self, character: str) -> bool:
        """Add or remove ``character`` from the roster; returns whether it is now owned.

        Removing a character keeps its goal record but clears the selection
        when it pointed at that character.
        """

        self._require_character(character)
        if character in self._owned:
            self._owned.remove(character)
            if self._selected == character:
                self._selected = None
            owned = False
        else:
            self._owned.append(character)
            owned = True
        self._commit()
        return owned

    def set_ownership_mode(self, enabled: bool) -> None:
        self.ownership_mode = bool(enabled)

    def set_level(self, character: str, dimension: str, field: str, value: int) -> GoalRecord:
        if dimension not in LEVEL_DIMENSIONS:
            raise GoalStoreError(f"Unknown level dimension: {dimension!r}")
        if field not in LEVEL_FIELDS:
            raise GoalStoreError(f"Unknown level field: {field!r}")
        record = self._record(character)
        levels = CHARACTER_LEVELS if dimension == "character" else WEAPON_LEVELS
        level = clamp_to_milestone(levels, int(value))
        if dimension == "character":
            if field == "currentLevel":
                record.current_level = level
                record.target_level = STRICT_TARGET.adjust(levels, level, record.target_level)
            else:
                record.target_level = level
        else:
            if field == "currentLevel":
                record.weapon_current_level = level
                record.weapon_target_level = STRICT_TARGET.adjust(levels, level, record.weapon_target_level)
            else:
                record.weapon_target_level = level
        self._commit()
        return self.goal(character)

    def compatible_weapons(self, character: str) -> List[str]:
        """Known weapons the character can wield; all of them when its type is unknown."""

        self._require_character(character)
        return sorted(weapon for weapon in self._known_weapons if self._can_wield(character, weapon))

    def _can_wield(self, character: str, weapon: str) -> bool:
        wanted = self._provider.character_weapon_type(character)
        actual = self._provider.weapon_type(weapon)
        return wanted is None or actual is None or wanted == actual

    def set_weapon(self, character: str, weapon: Optional[str]) -> GoalRecord:
        if weapon is not None and weapon not in self._known_weapons:
            raise GoalStoreError(f"Unknown weapon: {weapon!r}")
        self._require_character(character)
        if weapon is not None and not self._can_wield(character, weapon):
            raise GoalStoreError(f"{character!r} cannot wield {weapon!r}")
        record = self._record(character)
        record.weapon = weapon
        self._commit()
        return self.goal(character)

    def set_artifact_field(self, character: str, slot_index: int, field: str, value: Any) -> GoalRecord:
        if not 0 <= slot_index < len(ARTIFACT_SLOTS):
            raise GoalStoreError(f"Artifact slot index out of range: {slot_index}")
        if field not in ARTIFACT_FIELDS:
            raise GoalStoreError(f"Unknown artifact field: {field!r}")
        record = self._record(character)
        artifact = record.artifacts[slot_index]
        try:
            if field in LEVEL_FIELDS:
                set_artifact_level(artifact, field, int(value))
                changed = True
            elif field == "mainStat":
                changed = set_main_stat(artifact, value)
            elif field == "substat":
                changed = toggle_substat(artifact, value)
            else:
                set_substat_count(artifact, int(value))
                changed = True
        except (TypeError, ValueError) as exc:
            raise GoalStoreError(str(exc)) from exc
        if changed:
            self._commit()
        return self.goal(character)

    def set_talent_level(self, character: str, talent_key: str, field: str, value: int) -> GoalRecord:
        if talent_key not in TALENT_KEYS:
            raise GoalStoreError(f"Unknown talent: {talent_key!r}")
        if field not in LEVEL_FIELDS:
            raise GoalStoreError(f"Unknown talent field: {field!r}")
        record = self._record(character)
        set_talent_level(record.talents[talent_key], field, int(value))
        self._commit()
        return self.goal(character)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_document(self, document: Any) -> List[ValidationError]:
        """Replace the whole state with ``document`` if it validates cleanly.

        On any error nothing changes and the full error list is returned.
        """

        errors = validate_import(document, self._known_characters, self._known_weapons)
        if errors:
            logger.info("Import rejected with %d error(s)", len(errors))
            return errors
        self._replace(document)
        self._commit()
        return []

    def import_json(self, text: str | bytes) -> List[ValidationError]:
        try:
            document = json.loads(text)
        except ValueError as exc:
            logger.info("Import rejected, not valid JSON: %s", exc)
            return [ValidationError(path="", message="Import data is not valid JSON")]
        return self.import_document(document)

    def _replace(self, document: Mapping[str, Any]) -> None:
        owned: List[str] = []
        for name in document.get("ownedCharacters") or []:
            if name not in owned:
                owned.append(name)
        goals = {
            name: GoalRecord.from_dict(goal)
            for name, goal in (document.get("characterGoals") or {}).items()
        }
        self._owned = owned
        self._goals = goals
        self._selected = document.get("selectedCharacter")
        if self._selected is not None:
            self._record(self._selected)
