"""Weighted cost allocation.

Total monthly cost (salaries + recurring expenses) is split across clients in
proportion to their adjusted weight::

    base_weight     = equipment_weight + services_weight
    adjusted_weight = base_weight * tariff * sla
    cost_per_unit   = total_monthly_costs / sum(adjusted_weight)
    final_price     = adjusted_weight * cost_per_unit * (1 + margin / 100)

Nothing is rounded here; rounding belongs to the reporting layer.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional

from ..config import DEFAULT_EXPECTED_REVENUE, DEFAULT_EXPENSE_RATE, DEFAULT_PROFIT_MARGIN
from ..errors import AllocationError, InsufficientDataError
from ..models import (
    ClientAssignment,
    ClientPrice,
    CompanySnapshot,
    Employee,
    Expense,
    FinancialSettings,
    PricingResult,
    PricingSummary,
    Service,
)
from ..policies import AdvancedPolicy, AllocationPolicy, SimplifiedPolicy
from ..utils.trace import TraceLogger
from .equipment import compute_equipment_weight
from .services import compute_services_weight

_LOGGER = logging.getLogger(__name__)


def _setting(value, default: float, *, label: str) -> float:
    if value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        _LOGGER.warning("Invalid %s %r, using %s", label, value, default)
        return default
    if not math.isfinite(f) or f < 0:
        _LOGGER.warning("Invalid %s %r, using %s", label, value, default)
        return default
    return f


def _margin(settings: Optional[FinancialSettings]) -> float:
    if settings is None:
        return DEFAULT_PROFIT_MARGIN
    return _setting(settings.profit_margin, DEFAULT_PROFIT_MARGIN, label="profit margin")


def compute_total_monthly_costs(
    employees: Iterable[Employee],
    expenses: Iterable[Expense],
    settings: Optional[FinancialSettings] = None,
) -> float:
    salaries = sum(float(e.salary or 0.0) for e in employees or [])
    rate = DEFAULT_EXPENSE_RATE
    if settings is not None:
        rate = _setting(settings.expense_exchange_rate, DEFAULT_EXPENSE_RATE, label="expense exchange rate")
    monthly_expenses = sum(x.monthly_amount for x in expenses or [])
    return salaries + monthly_expenses * rate


def _check_unique_clients(assignments: List[ClientAssignment]) -> None:
    seen = set()
    for a in assignments:
        if a.client.key in seen:
            raise AllocationError(f"Duplicate client '{a.client.key}' in assignments (set a distinct id)")
        seen.add(a.client.key)


def allocate(
    employees: Iterable[Employee],
    expenses: Iterable[Expense],
    services: Iterable[Service],
    assignments: Iterable[ClientAssignment],
    settings: Optional[FinancialSettings] = None,
    *,
    policy: Optional[AllocationPolicy] = None,
    unknown_service_policy: Optional[str] = None,
    company_id: Optional[str] = None,
    trace: Optional[TraceLogger] = None,
) -> PricingResult:
    """Apportion one company's monthly cost across its client assignments.

    Raises InsufficientDataError when there is no cost to distribute or no
    client carries any weight, and AllocationError when two assignments share
    a client key.
    """
    policy = policy or AdvancedPolicy()
    employees = list(employees or [])
    assignments = list(assignments or [])
    _check_unique_clients(assignments)
    catalog = {s.name: s for s in services or []}
    unknown_policy = policy.unknown_service_policy(unknown_service_policy)
    penalty = policy.shortage_penalty()
    margin = _margin(settings)

    total_costs = compute_total_monthly_costs(employees, expenses, settings)
    if not math.isfinite(total_costs):
        raise InsufficientDataError("no_costs", "Total monthly costs are not a finite number: check salaries and expenses.")
    if total_costs <= 0:
        raise InsufficientDataError("no_costs")

    rows = []
    total_weight = 0.0
    for a in assignments:
        client = a.client
        equipment_weight = compute_equipment_weight(client.equipment)
        services_result = compute_services_weight(
            client.services,
            catalog,
            employees,
            shortage_penalty=penalty,
            unknown_service_policy=unknown_policy,
            client_name=client.name,
        )
        base_weight = equipment_weight + services_result.total_weight
        tariff, sla = policy.multipliers(a)
        adjusted = base_weight * tariff * sla
        total_weight += adjusted
        rows.append((a, equipment_weight, services_result, base_weight, tariff, sla, adjusted))

    if not math.isfinite(total_weight):
        raise InsufficientDataError("no_weight", "Total system weight is not a finite number: check equipment and service weights.")
    if total_weight <= 0:
        raise InsufficientDataError("no_weight")

    cost_per_unit = total_costs / total_weight
    prices: List[ClientPrice] = []
    for a, equipment_weight, services_result, base_weight, tariff, sla, adjusted in rows:
        base_cost = adjusted * cost_per_unit
        prices.append(
            ClientPrice(
                client_id=a.client.key,
                name=a.client.name,
                equipment_weight=equipment_weight,
                services_weight=services_result.total_weight,
                base_weight=base_weight,
                tariff_multiplier=tariff,
                sla_multiplier=sla,
                adjusted_weight=adjusted,
                base_cost=base_cost,
                final_price=base_cost * (1 + margin / 100.0),
                weight_percentage=adjusted / total_weight * 100.0,
                specialist_load=dict(services_result.specialist_load),
            )
        )

    total_revenue = sum(p.final_price for p in prices)
    summary = PricingSummary(
        total_revenue=total_revenue,
        total_profit=total_revenue - total_costs,
        client_count=len(prices),
        expected_monthly_revenue=(
            _setting(settings.expected_monthly_revenue, DEFAULT_EXPECTED_REVENUE, label="expected monthly revenue")
            if settings is not None
            else DEFAULT_EXPECTED_REVENUE
        ),
    )

    _LOGGER.info(
        "Allocated %.2f across %d clients (weight %.3f, %.4f per unit, policy=%s)",
        total_costs,
        len(prices),
        total_weight,
        cost_per_unit,
        policy.name,
    )
    if trace is not None:
        for cp in prices:
            trace.log_client_price(cp, company_id=company_id)
        trace.log(
            "allocation",
            {
                "policy": policy.name,
                "total_monthly_costs": total_costs,
                "total_system_weight": total_weight,
                "cost_per_unit": cost_per_unit,
                "client_count": len(prices),
            },
            company_id=company_id,
        )

    return PricingResult(
        client_prices=tuple(prices),
        total_monthly_costs=total_costs,
        total_system_weight=total_weight,
        cost_per_unit=cost_per_unit,
        profit_margin=margin,
        summary=summary,
        mode=policy.name,
        company_id=company_id,
    )


def allocate_simplified(
    employees: Iterable[Employee],
    expenses: Iterable[Expense],
    services: Iterable[Service],
    assignments: Iterable[ClientAssignment],
    settings: Optional[FinancialSettings] = None,
    **kwargs,
) -> PricingResult:
    """Legacy allocation: no staffing penalty, tariff and SLA fixed at 1."""
    return allocate(employees, expenses, services, assignments, settings, policy=SimplifiedPolicy(), **kwargs)


def allocate_snapshot(
    snapshot: CompanySnapshot,
    *,
    policy: Optional[AllocationPolicy] = None,
    unknown_service_policy: Optional[str] = None,
    trace: Optional[TraceLogger] = None,
) -> PricingResult:
    return allocate(
        snapshot.employees,
        snapshot.expenses,
        snapshot.services,
        snapshot.active_assignments(),
        snapshot.settings,
        policy=policy,
        unknown_service_policy=unknown_service_policy,
        company_id=snapshot.company_id,
        trace=trace,
    )
