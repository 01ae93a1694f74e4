"""Declarative allocation policies, read from YAML/JSON files.

One file per policy, in service_cost_allocator/policies/definitions or a
directory passed with ``--policy-dir``::

    id: strict_staffing
    staffing_shortage_penalty: 2.0
    unknown_service_policy: error

Unreadable files and invalid values raise ValueError naming the file, before
any allocation runs.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ...config import STAFFING_SHORTAGE_PENALTY, UNKNOWN_SERVICE_POLICIES
from .schema import PolicyDefinition


def _read_definition(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw) if path.suffix.lower() in (".yaml", ".yml") else json.loads(raw)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as ex:
        raise ValueError(f"Cannot read policy definition {path.name}: {ex}") from ex
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Policy definition {path.name} must be a mapping at the top level")
    return data


def _policy_id(data: Dict[str, Any], *, ctx: str) -> str:
    policy_id = str(data.get("id") or "").strip()
    if not policy_id:
        raise ValueError(f"Missing required key 'id' in {ctx}")
    return policy_id


def _parse_penalty(value: Any, *, ctx: str) -> float:
    if value is None:
        return STAFFING_SHORTAGE_PENALTY
    if isinstance(value, bool):
        raise ValueError(f"staffing_shortage_penalty must be a number in {ctx}")
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"staffing_shortage_penalty must be a number in {ctx}") from None
    if math.isnan(f) or math.isinf(f) or f < 1.0:
        raise ValueError(f"staffing_shortage_penalty must be >= 1 in {ctx}")
    return f


def _parse_bool(value: Any, *, key: str, ctx: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true/false in {ctx}")
    return value


def _parse_unknown(value: Any, *, ctx: str):
    if value is None:
        return None
    v = str(value).strip().lower()
    if v not in UNKNOWN_SERVICE_POLICIES:
        raise ValueError(f"unknown_service_policy must be one of {', '.join(UNKNOWN_SERVICE_POLICIES)} in {ctx}")
    return v


def default_definitions_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "definitions"


def load_definitions(definitions_dir: Path | None = None) -> List[PolicyDefinition]:
    base = definitions_dir or default_definitions_dir()
    if not base.exists():
        return []
    paths = sorted([p for p in base.iterdir() if p.is_file() and p.suffix.lower() in (".yaml", ".yml", ".json")])
    out: List[PolicyDefinition] = []
    for p in paths:
        data = _read_definition(p)
        ctx = f"definition({p.name})"
        policy_id = _policy_id(data, ctx=ctx)
        out.append(
            PolicyDefinition(
                id=policy_id,
                description=str(data.get("description") or ""),
                staffing_shortage_penalty=_parse_penalty(data.get("staffing_shortage_penalty"), ctx=ctx),
                apply_multipliers=_parse_bool(
                    data.get("apply_multipliers"), key="apply_multipliers", ctx=ctx, default=True
                ),
                unknown_service_policy=_parse_unknown(data.get("unknown_service_policy"), ctx=ctx),
                source_file=p.name,
            )
        )
    return out
