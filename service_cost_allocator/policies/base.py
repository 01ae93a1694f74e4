from __future__ import annotations

import logging
import math
from typing import Optional, Protocol, Tuple

from ..config import (
    DEFAULT_SLA_MULTIPLIER,
    DEFAULT_TARIFF_MULTIPLIER,
    DEFAULT_UNKNOWN_SERVICE_POLICY,
    STAFFING_SHORTAGE_PENALTY,
    UNKNOWN_SERVICE_POLICIES,
)
from ..models import ClientAssignment

_LOGGER = logging.getLogger(__name__)


class AllocationPolicy(Protocol):
    """A named set of switches controlling how client weight is computed."""

    name: str

    def shortage_penalty(self) -> float: ...

    def multipliers(self, assignment: ClientAssignment) -> Tuple[float, float]: ...

    def unknown_service_policy(self, override: Optional[str] = None) -> str: ...


def _multiplier(value, default: float, *, label: str, client: str) -> float:
    if value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        _LOGGER.warning("Client %s: invalid %s %r, using %s", client, label, value, default)
        return default
    if math.isnan(f) or math.isinf(f) or f < 0:
        _LOGGER.warning("Client %s: invalid %s %r, using %s", client, label, value, default)
        return default
    return f


def normalize_unknown_service_policy(value: Optional[str]) -> str:
    v = (value or "").strip().lower()
    if v not in UNKNOWN_SERVICE_POLICIES:
        raise ValueError(
            f"Unknown service policy must be one of {', '.join(UNKNOWN_SERVICE_POLICIES)}, got {value!r}"
        )
    return v


class BasePolicy:
    """Advanced model: staffing penalty on, tariff/SLA multipliers on."""

    name: str = "advanced"
    description: str = "Equipment + services weight, staffing-shortage penalty, tariff and SLA multipliers."
    staffing_shortage_penalty: float = STAFFING_SHORTAGE_PENALTY
    apply_multipliers: bool = True
    unknown_services: Optional[str] = None  # None -> config default

    def shortage_penalty(self) -> float:
        return float(self.staffing_shortage_penalty)

    def multipliers(self, assignment: ClientAssignment) -> Tuple[float, float]:
        if not self.apply_multipliers:
            return (1.0, 1.0)
        client = assignment.client.name
        return (
            _multiplier(assignment.tariff_multiplier, DEFAULT_TARIFF_MULTIPLIER, label="tariff multiplier", client=client),
            _multiplier(assignment.sla_multiplier, DEFAULT_SLA_MULTIPLIER, label="SLA multiplier", client=client),
        )

    def unknown_service_policy(self, override: Optional[str] = None) -> str:
        # Explicit caller choice > policy definition > config default.
        return normalize_unknown_service_policy(override or self.unknown_services or DEFAULT_UNKNOWN_SERVICE_POLICY)
