from __future__ import annotations

from .base import BasePolicy


class AdvancedPolicy(BasePolicy):
    name = "advanced"


class SimplifiedPolicy(BasePolicy):
    """Legacy model: cost split purely by equipment weight + services weight."""

    name = "simplified"
    description = "Equipment + services weight only; no staffing penalty, no tariff/SLA multipliers."
    staffing_shortage_penalty = 1.0
    apply_multipliers = False
