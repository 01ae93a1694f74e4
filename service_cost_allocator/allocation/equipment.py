from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models.equipment import EquipmentCategory, normalize_category


def compute_equipment_weight(metadata: Optional[Mapping[str, Any]]) -> float:
    """Sum of ``count * weight`` over every equipment leaf of a client.

    Accepts raw metadata (any mix of simple, complex and legacy categories)
    or categories already normalized by ``normalize_equipment``. Malformed
    entries contribute zero; the result is never negative.
    """
    if not isinstance(metadata, Mapping):
        return 0.0

    total = 0.0
    for name, data in metadata.items():
        category = data if isinstance(data, EquipmentCategory) else normalize_category(str(name), data)
        total += category.weight
    return max(total, 0.0)
