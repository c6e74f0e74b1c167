"""Cost items and the merge step that canonicalises material lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

CURRENCY = "Mora"


@dataclass(slots=True)
class CostItem:
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CostItem":
        return cls(name=str(data["name"]), count=int(data.get("count", 0)))


def merge_costs(*lists: Iterable[CostItem]) -> List[CostItem]:
    """Fold any number of cost lists into one, summing counts per ``name``.

    Items keep the order in which their name was first seen. The inputs are
    never mutated; every returned item is a fresh object.
    """

    totals: Dict[str, int] = {}
    for items in lists:
        for item in items:
            totals[item.name] = totals.get(item.name, 0) + item.count
    return [CostItem(name=name, count=count) for name, count in totals.items()]


def currency_item(amount: int) -> List[CostItem]:
    """Return ``amount`` of currency as a cost list, empty when there is nothing to pay."""

    return [CostItem(name=CURRENCY, count=amount)] if amount > 0 else []


def costs_to_dicts(items: Iterable[CostItem]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]
