"""Equipment categories.

Client equipment arrives in three historical shapes:

- simple:  ``{"servers": {"count": 3, "weight": 4.0}}``
- complex: ``{"workstations": {"laptops": {"count": 40, "weight": 2.0}, "tablets": 3}}``
- legacy:  ``{"printers": 12}``

Each category is resolved once into an :class:`EquipmentCategory` holding a flat
tuple of :class:`EquipmentLeaf` records, so callers never branch on shape again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config import DEFAULT_EQUIPMENT_WEIGHT

SIMPLE = "simple"
COMPLEX = "complex"
LEGACY = "legacy"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class EquipmentLeaf:
    name: str
    count: float
    weight: float = DEFAULT_EQUIPMENT_WEIGHT

    @property
    def total(self) -> float:
        return self.count * self.weight


@dataclass(frozen=True)
class EquipmentCategory:
    name: str
    kind: str  # "simple" | "complex" | "legacy"
    leaves: Tuple[EquipmentLeaf, ...] = ()

    @property
    def weight(self) -> float:
        return sum(leaf.total for leaf in self.leaves)

    def to_dict(self) -> Any:
        if self.kind == SIMPLE and self.leaves:
            leaf = self.leaves[0]
            return {"count": leaf.count, "weight": leaf.weight}
        if self.kind == LEGACY and self.leaves:
            return self.leaves[0].count
        return {leaf.name: {"count": leaf.count, "weight": leaf.weight} for leaf in self.leaves}


def _legacy_count(value: Any) -> float:
    """Integer count of a bare legacy entry (``"12"`` -> 12, ``3.7`` -> 3, junk -> 0)."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return 0
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else 0
    return 0


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    if f != f or f in (float("inf"), float("-inf")):
        return None
    return f


def _leaf(name: str, count: Any, weight: Any) -> Optional[EquipmentLeaf]:
    c = _number(count)
    w = _number(weight)
    if c is None or w is None or c < 0 or w < 0:
        return None
    return EquipmentLeaf(name=name, count=c, weight=w)


def _legacy_leaf(name: str, value: Any) -> Optional[EquipmentLeaf]:
    count = _legacy_count(value)
    if count <= 0:
        return None
    return EquipmentLeaf(name=name, count=float(count), weight=DEFAULT_EQUIPMENT_WEIGHT)


def normalize_category(name: str, data: Any) -> EquipmentCategory:
    if isinstance(data, EquipmentCategory):
        return data

    if isinstance(data, Mapping):
        if "count" in data and "weight" in data:
            leaf = _leaf(name, data.get("count"), data.get("weight"))
            return EquipmentCategory(name=name, kind=SIMPLE, leaves=(leaf,) if leaf else ())

        leaves = []
        for item_name, item in data.items():
            if isinstance(item, Mapping):
                if "count" not in item:
                    continue
                weight = item.get("weight")
                if weight is None:
                    weight = DEFAULT_EQUIPMENT_WEIGHT
                leaf = _leaf(str(item_name), item.get("count"), weight)
            else:
                leaf = _legacy_leaf(str(item_name), item)
            if leaf is not None:
                leaves.append(leaf)
        return EquipmentCategory(name=name, kind=COMPLEX, leaves=tuple(leaves))

    leaf = _legacy_leaf(name, data)
    return EquipmentCategory(name=name, kind=LEGACY, leaves=(leaf,) if leaf else ())


def normalize_equipment(metadata: Optional[Mapping[str, Any]]) -> Dict[str, EquipmentCategory]:
    """Resolve every category of a client's equipment metadata exactly once."""
    if not isinstance(metadata, Mapping):
        return {}
    return {str(name): normalize_category(str(name), data) for name, data in metadata.items()}
