"""DeclarativePolicy.

Wraps a PolicyDefinition and exposes the BasePolicy interface.
"""

from __future__ import annotations

from ..base import BasePolicy
from .schema import PolicyDefinition


class DeclarativePolicy(BasePolicy):
    def __init__(self, definition: PolicyDefinition):
        super().__init__()
        self.definition = definition
        self.name = definition.id
        self.description = definition.description
        self.staffing_shortage_penalty = definition.staffing_shortage_penalty
        self.apply_multipliers = definition.apply_multipliers
        self.unknown_services = definition.unknown_service_policy
