"""Snapshot loader.

Turns a YAML/JSON company document into a :class:`CompanySnapshot`::

    company_id: acme
    settings: {profit_margin: 20}
    employees: [{name: Ivan, salary: 30000, supported_services: [GWS]}]
    expenses:  [{name: Rent, amount: 60000, period: 1, period_type: years}]
    services:  [{name: GWS, type: SaaS, weight: 1}]
    tariff_plans: [{id: standard, name: Standard, multiplier: 1.0}]
    sla_levels:   [{id: priority, name: Priority, multiplier: 1.2, response_time_hours: 4}]
    clients:
      - name: Small Office
        sla_level: priority
        equipment: {workstations: {laptops: {count: 5, weight: 2.0}}}
        services: {GWS: {Use: 1}}

The loader is strict about structure and vocabulary and raises SnapshotError
with the offending path (``clients[2].tariff_multiplier``), so a bad file fails
before any allocation happens. Equipment is normalized once here.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

import yaml

from ..config import (
    DEFAULT_EXPECTED_REVENUE,
    DEFAULT_EXPENSE_RATE,
    DEFAULT_PROFIT_MARGIN,
    DEFAULT_SERVICE_WEIGHT,
    DEFAULT_SLA_MULTIPLIER,
    DEFAULT_TARIFF_MULTIPLIER,
    PERIOD_TYPES,
    SERVICE_QUALITIES,
    SERVICE_TYPES,
)
from ..errors import SnapshotError
from ..models import (
    Client,
    ClientAssignment,
    CompanySnapshot,
    Employee,
    Expense,
    FinancialSettings,
    Service,
    SlaLevel,
    TariffPlan,
    binding_from_raw,
    normalize_equipment,
)

_LOGGER = logging.getLogger(__name__)


def _as_list(x: Any, *, ctx: str) -> List[Any]:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    raise SnapshotError(f"Expected a list in {ctx}")


def _require(obj: Dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in obj or obj[key] in (None, ""):
        raise SnapshotError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _mapping(obj: Any, *, ctx: str) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise SnapshotError(f"Expected an object in {ctx}")
    return obj


def _number(value: Any, *, key: str, ctx: str, default: Optional[float] = None, minimum: Optional[float] = 0.0) -> float:
    if value is None:
        if default is None:
            raise SnapshotError(f"Missing required key '{key}' in {ctx}")
        return default
    if isinstance(value, bool):
        raise SnapshotError(f"{key} must be a number in {ctx}")
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise SnapshotError(f"{key} must be a number in {ctx}") from None
    if math.isnan(f) or math.isinf(f):
        raise SnapshotError(f"{key} must be finite in {ctx}")
    if minimum is not None and f < minimum:
        raise SnapshotError(f"{key} must be >= {minimum:g} in {ctx}")
    return f


def _str_set(value: Any, *, key: str, ctx: str) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [v for v in value.split(",")]
    if not isinstance(value, (list, tuple, set)):
        raise SnapshotError(f"{key} must be a list of strings in {ctx}")
    return frozenset(str(v).strip() for v in value if str(v).strip())


def _parse_settings(obj: Any) -> FinancialSettings:
    ctx = "settings"
    data = _mapping(obj or {}, ctx=ctx)
    return FinancialSettings(
        profit_margin=_number(data.get("profit_margin"), key="profit_margin", ctx=ctx, default=DEFAULT_PROFIT_MARGIN),
        expected_monthly_revenue=_number(
            data.get("expected_monthly_revenue"),
            key="expected_monthly_revenue",
            ctx=ctx,
            default=DEFAULT_EXPECTED_REVENUE,
        ),
        expense_exchange_rate=_number(
            data.get("expense_exchange_rate"), key="expense_exchange_rate", ctx=ctx, default=DEFAULT_EXPENSE_RATE
        ),
    )


def _parse_employee(obj: Any, *, ctx: str) -> Employee:
    data = _mapping(obj, ctx=ctx)
    hourly = data.get("hourly_rate")
    return Employee(
        name=str(_require(data, "name", ctx=ctx)).strip(),
        salary=_number(data.get("salary"), key="salary", ctx=ctx, default=0.0),
        specializations=_str_set(data.get("specializations"), key="specializations", ctx=ctx),
        supported_services=_str_set(data.get("supported_services"), key="supported_services", ctx=ctx),
        hourly_rate=None if hourly is None else _number(hourly, key="hourly_rate", ctx=ctx),
        id=None if data.get("id") is None else str(data["id"]),
    )


def _parse_expense(obj: Any, *, ctx: str) -> Expense:
    data = _mapping(obj, ctx=ctx)
    period = data.get("period", 1)
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise SnapshotError(f"period must be a positive integer in {ctx}")
    period_type = str(data.get("period_type") or "months").strip().lower()
    if period_type not in PERIOD_TYPES:
        raise SnapshotError(f"period_type must be one of {', '.join(PERIOD_TYPES)} in {ctx}")
    return Expense(
        name=str(_require(data, "name", ctx=ctx)).strip(),
        amount=_number(data.get("amount"), key="amount", ctx=ctx),
        period=period,
        period_type=period_type,
    )


def _parse_service(obj: Any, *, ctx: str) -> Service:
    data = _mapping(obj, ctx=ctx)
    stype = str(data.get("type") or "SaaS").strip()
    if stype not in SERVICE_TYPES:
        raise SnapshotError(f"type must be one of {', '.join(SERVICE_TYPES)} in {ctx}")
    quality = str(data.get("quality") or "Medium").strip()
    if quality not in SERVICE_QUALITIES:
        raise SnapshotError(f"quality must be one of {', '.join(SERVICE_QUALITIES)} in {ctx}")
    weight = _number(data.get("weight"), key="weight", ctx=ctx, default=DEFAULT_SERVICE_WEIGHT)
    if weight == 0:
        weight = DEFAULT_SERVICE_WEIGHT
    return Service(
        name=str(_require(data, "name", ctx=ctx)).strip(),
        type=stype,
        weight=weight,
        quality=quality,
        required_specializations=_str_set(
            data.get("required_specializations"), key="required_specializations", ctx=ctx
        ),
        description=str(data.get("description") or ""),
    )


def _parse_plan(obj: Any, *, ctx: str) -> Dict[str, Any]:
    data = _mapping(obj, ctx=ctx)
    return {
        "id": str(_require(data, "id", ctx=ctx)).strip(),
        "name": str(data.get("name") or data["id"]).strip(),
        "multiplier": _number(data.get("multiplier"), key="multiplier", ctx=ctx),
    }


def _parse_tariff_plan(obj: Any, *, ctx: str) -> TariffPlan:
    return TariffPlan(**_parse_plan(obj, ctx=ctx))


def _parse_sla_level(obj: Any, *, ctx: str) -> SlaLevel:
    hours = _mapping(obj, ctx=ctx).get("response_time_hours")
    return SlaLevel(
        **_parse_plan(obj, ctx=ctx),
        response_time_hours=None if hours is None else _number(hours, key="response_time_hours", ctx=ctx),
    )


def _by_id(items, *, ctx: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for item in items:
        if item.id in out:
            raise SnapshotError(f"Duplicate id '{item.id}' in {ctx}")
        out[item.id] = item
    return out


def _multiplier_source(data: Dict[str, Any], *, raw_key: str, ref_key: str, plans: Dict[str, Any], default: float, ctx: str):
    """Resolve a client multiplier given either as a number or as a plan id."""
    ref = data.get(ref_key)
    if ref is None:
        return _number(data.get(raw_key), key=raw_key, ctx=ctx, default=default), None
    if data.get(raw_key) is not None:
        raise SnapshotError(f"Set either {raw_key} or {ref_key}, not both, in {ctx}")
    plan = plans.get(str(ref))
    if plan is None:
        raise SnapshotError(f"Unknown {ref_key} '{ref}' in {ctx}")
    return plan.multiplier, plan.name


def _parse_assignment(
    obj: Any, *, ctx: str, tariff_plans: Dict[str, TariffPlan], sla_levels: Dict[str, SlaLevel]
) -> ClientAssignment:
    data = _mapping(obj, ctx=ctx)
    name = str(_require(data, "name", ctx=ctx)).strip()
    bindings_raw = _mapping(data.get("services") or {}, ctx=f"{ctx}.services")
    client = Client(
        name=name,
        id=None if data.get("id") is None else str(data["id"]),
        equipment=normalize_equipment(_mapping(data.get("equipment") or {}, ctx=f"{ctx}.equipment")),
        services={str(k): binding_from_raw(str(k), v) for k, v in bindings_raw.items()},
    )
    active = data.get("active", True)
    if not isinstance(active, bool):
        raise SnapshotError(f"active must be true/false in {ctx}")
    tariff, tariff_plan = _multiplier_source(
        data,
        raw_key="tariff_multiplier",
        ref_key="tariff_plan",
        plans=tariff_plans,
        default=DEFAULT_TARIFF_MULTIPLIER,
        ctx=ctx,
    )
    sla, sla_level = _multiplier_source(
        data,
        raw_key="sla_multiplier",
        ref_key="sla_level",
        plans=sla_levels,
        default=DEFAULT_SLA_MULTIPLIER,
        ctx=ctx,
    )
    return ClientAssignment(
        client=client,
        tariff_multiplier=tariff,
        sla_multiplier=sla,
        active=active,
        tariff_plan=tariff_plan,
        sla_level=sla_level,
    )


def parse_snapshot(data: Any, *, source: str = "snapshot") -> CompanySnapshot:
    doc = _mapping(data, ctx=source)

    services = [_parse_service(s, ctx=f"services[{i}]") for i, s in enumerate(_as_list(doc.get("services"), ctx="services"))]
    seen = set()
    for s in services:
        if s.name in seen:
            raise SnapshotError(f"Duplicate service name '{s.name}' in services")
        seen.add(s.name)

    tariff_plans = [
        _parse_tariff_plan(t, ctx=f"tariff_plans[{i}]")
        for i, t in enumerate(_as_list(doc.get("tariff_plans"), ctx="tariff_plans"))
    ]
    sla_levels = [
        _parse_sla_level(s, ctx=f"sla_levels[{i}]") for i, s in enumerate(_as_list(doc.get("sla_levels"), ctx="sla_levels"))
    ]
    tariff_by_id = _by_id(tariff_plans, ctx="tariff_plans")
    sla_by_id = _by_id(sla_levels, ctx="sla_levels")

    assignments = [
        _parse_assignment(c, ctx=f"clients[{i}]", tariff_plans=tariff_by_id, sla_levels=sla_by_id)
        for i, c in enumerate(_as_list(doc.get("clients"), ctx="clients"))
    ]
    keys = set()
    for a in assignments:
        if a.client.key in keys:
            raise SnapshotError(f"Duplicate client '{a.client.key}' in clients (set a distinct id)")
        keys.add(a.client.key)

    snapshot = CompanySnapshot(
        company_id=str(doc.get("company_id") or "default"),
        employees=tuple(
            _parse_employee(e, ctx=f"employees[{i}]") for i, e in enumerate(_as_list(doc.get("employees"), ctx="employees"))
        ),
        expenses=tuple(
            _parse_expense(x, ctx=f"expenses[{i}]") for i, x in enumerate(_as_list(doc.get("expenses"), ctx="expenses"))
        ),
        services=tuple(services),
        assignments=tuple(assignments),
        settings=_parse_settings(doc.get("settings")),
        tariff_plans=tuple(tariff_plans),
        sla_levels=tuple(sla_levels),
    )
    _LOGGER.debug(
        "Loaded snapshot %s: %d employees, %d expenses, %d services, %d clients",
        snapshot.company_id,
        len(snapshot.employees),
        len(snapshot.expenses),
        len(snapshot.services),
        len(snapshot.assignments),
    )
    return snapshot


def load_snapshot(path: Path | str) -> CompanySnapshot:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as ex:
        raise SnapshotError(f"Cannot read snapshot {p}: {ex}") from ex

    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw) or {}
        elif p.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            raise SnapshotError(f"Unsupported snapshot file type: {p}")
    except (yaml.YAMLError, json.JSONDecodeError) as ex:
        raise SnapshotError(f"Cannot parse snapshot {p}: {ex}") from ex

    return parse_snapshot(data, source=p.name)
