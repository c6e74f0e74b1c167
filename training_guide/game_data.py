"""Game data lookups: ascension and talent materials per character and weapon."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from .costs import CostItem, merge_costs

EXCLUDED_CHARACTERS = frozenset({"Aether", "Lumine"})
DEFAULT_TALENT_NAMES: Mapping[str, str] = {
    "normalAttack": "Normal Attack",
    "skill": "Elemental Skill",
    "burst": "Elemental Burst",
}


class GameDataProvider(Protocol):
    """What the cost engine needs to know about the game.

    Cost lookups return ``None`` when the identifier is unknown, and an empty
    list when it is known but the range costs nothing.
    """

    def character_names(self) -> List[str]: ...

    def weapon_names(self) -> List[str]: ...

    def character_weapon_type(self, character: str) -> Optional[str]: ...

    def weapon_type(self, weapon: str) -> Optional[str]: ...

    def weapon_rarity(self, weapon: str) -> Optional[int]: ...

    def character_ascension_costs(self, character: str, phases: Iterable[int]) -> Optional[List[CostItem]]: ...

    def weapon_ascension_costs(self, weapon: str, phases: Iterable[int]) -> Optional[List[CostItem]]: ...

    def talent_costs(self, character: str, current: int, target: int) -> Optional[List[CostItem]]: ...

    def talent_names(self, character: str) -> Dict[str, str]: ...


def _parse_cost_table(raw: Mapping[str, object] | None) -> Dict[str, List[CostItem]]:
    table: Dict[str, List[CostItem]] = {}
    for key, items in (raw or {}).items():
        if not isinstance(items, list):
            continue
        table[key] = [
            CostItem.from_mapping(item)
            for item in items
            if isinstance(item, Mapping) and item.get("name")
        ]
    return table


class GameDataRepository:
    """Indexes the characters, weapons and talents datasets.

    ``characters`` and ``weapons`` map a name to an entry carrying a ``costs``
    table keyed ``ascend1`` .. ``ascend6``. ``talents`` maps a character name
    to its combat talent names and a ``costs`` table keyed ``lvl2`` ..
    ``lvl10`` shared by all three talents.
    """

    def __init__(
        self,
        characters: Mapping[str, Mapping],
        weapons: Mapping[str, Mapping],
        talents: Mapping[str, Mapping],
    ) -> None:
        self._character_costs: Dict[str, Dict[str, List[CostItem]]] = {}
        self._character_weapon_types: Dict[str, Optional[str]] = {}
        for name, entry in characters.items():
            if name in EXCLUDED_CHARACTERS:
                continue
            self._character_costs[name] = _parse_cost_table(entry.get("costs"))
            self._character_weapon_types[name] = entry.get("weaponType")

        self._weapon_costs: Dict[str, Dict[str, List[CostItem]]] = {}
        self._weapon_rarity: Dict[str, Optional[int]] = {}
        self._weapon_types: Dict[str, Optional[str]] = {}
        for name, entry in weapons.items():
            self._weapon_costs[name] = _parse_cost_table(entry.get("costs"))
            rarity = entry.get("rarity")
            self._weapon_rarity[name] = int(rarity) if rarity is not None else None
            self._weapon_types[name] = entry.get("weaponType")

        self._talent_costs: Dict[str, Dict[str, List[CostItem]]] = {}
        self._talent_names: Dict[str, Dict[str, str]] = {}
        for name, entry in talents.items():
            self._talent_costs[name] = _parse_cost_table(entry.get("costs"))
            labels = dict(DEFAULT_TALENT_NAMES)
            for key, combat in zip(DEFAULT_TALENT_NAMES, ("combat1", "combat2", "combat3")):
                talent = entry.get(combat)
                if isinstance(talent, Mapping) and talent.get("name"):
                    labels[key] = str(talent["name"])
            self._talent_names[name] = labels

    @classmethod
    def from_loader(cls, loader) -> "GameDataRepository":
        return cls(
            loader.fetch_json("characters"),
            loader.fetch_json("weapons"),
            loader.fetch_json("talents"),
        )

    def character_names(self) -> List[str]:
        return sorted(self._character_costs)

    def weapon_names(self) -> List[str]:
        return sorted(self._weapon_costs)

    def character_weapon_type(self, character: str) -> Optional[str]:
        return self._character_weapon_types.get(character)

    def weapon_type(self, weapon: str) -> Optional[str]:
        return self._weapon_types.get(weapon)

    def weapon_rarity(self, weapon: str) -> Optional[int]:
        return self._weapon_rarity.get(weapon)

    def character_ascension_costs(self, character: str, phases: Iterable[int]) -> Optional[List[CostItem]]:
        table = self._character_costs.get(character)
        if table is None:
            return None
        return merge_costs(*(table.get(f"ascend{phase}", []) for phase in phases))

    def weapon_ascension_costs(self, weapon: str, phases: Iterable[int]) -> Optional[List[CostItem]]:
        table = self._weapon_costs.get(weapon)
        if table is None:
            return None
        return merge_costs(*(table.get(f"ascend{phase}", []) for phase in phases))

    def talent_costs(self, character: str, current: int, target: int) -> Optional[List[CostItem]]:
        """Materials to raise one talent from ``current`` to ``target``."""

        table = self._talent_costs.get(character)
        if table is None:
            return None
        return merge_costs(*(table.get(f"lvl{level}", []) for level in range(current + 1, target + 1)))

    def talent_names(self, character: str) -> Dict[str, str]:
        return dict(self._talent_names.get(character, DEFAULT_TALENT_NAMES))
