from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config import POLICY_DIR
from .base import AllocationPolicy
from .builtin import AdvancedPolicy, SimplifiedPolicy
from .declarative import DeclarativePolicy, load_definitions


@dataclass
class PolicyRegistry:
    """Lookup table for allocation policies by name (case-insensitive)."""

    policies: Dict[str, AllocationPolicy] = field(default_factory=dict)

    def register(self, policy: AllocationPolicy) -> None:
        self.policies[policy.name.strip().lower()] = policy

    def get(self, name: str) -> Optional[AllocationPolicy]:
        return self.policies.get((name or "").strip().lower())

    def require(self, name: str) -> AllocationPolicy:
        policy = self.get(name)
        if policy is None:
            raise KeyError(f"Unknown allocation policy '{name}' (available: {', '.join(self.names())})")
        return policy

    def names(self) -> List[str]:
        return sorted(self.policies.keys())


def build_default_registry(definitions_dir: Path | str | None = None) -> PolicyRegistry:
    """Built-in policies plus every declarative definition found on disk."""

    reg = PolicyRegistry()
    reg.register(AdvancedPolicy())
    reg.register(SimplifiedPolicy())

    # Declarative definitions may not shadow the built-ins.
    base = Path(definitions_dir) if definitions_dir else (Path(POLICY_DIR) if POLICY_DIR else None)
    for d in load_definitions(base):
        if reg.get(d.id) is not None:
            raise ValueError(f"Policy '{d.id}' from {d.source_file} clashes with an existing policy")
        reg.register(DeclarativePolicy(d))
    return reg
