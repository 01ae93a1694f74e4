"""Declarative allocation-policy schema.

Lets a company add its own policy (e.g. a harsher staffing penalty) by
dropping a YAML/JSON file next to the built-ins instead of writing Python.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PolicyDefinition:
    id: str
    description: str = ""
    staffing_shortage_penalty: float = 1.5
    apply_multipliers: bool = True
    unknown_service_policy: Optional[str] = None  # skip | warn | error
    source_file: str = ""
