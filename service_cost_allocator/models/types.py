from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from ..config import (
    DEFAULT_EXPECTED_REVENUE,
    DEFAULT_EXPENSE_RATE,
    DEFAULT_PROFIT_MARGIN,
    DEFAULT_SLA_MULTIPLIER,
    DEFAULT_TARIFF_MULTIPLIER,
)
from .equipment import EquipmentCategory


@dataclass(frozen=True)
class Expense:
    """A recurring company expense, paid every ``period`` months or years."""

    name: str
    amount: float
    period: int = 1
    period_type: str = "months"  # "months" | "years"

    @property
    def monthly_amount(self) -> float:
        months = self.period * 12 if self.period_type == "years" else self.period
        if months <= 0:
            return 0.0
        return max(self.amount / months, 0.0)


@dataclass(frozen=True)
class Employee:
    name: str
    salary: float = 0.0
    specializations: FrozenSet[str] = frozenset()
    supported_services: FrozenSet[str] = frozenset()
    hourly_rate: Optional[float] = None
    id: Optional[str] = None

    @property
    def key(self) -> str:
        return self.id if self.id is not None else self.name


@dataclass(frozen=True)
class Service:
    name: str
    type: str = "SaaS"  # "SaaS" | "IaaS" | "PaaS"
    weight: float = 1.0
    quality: str = "Medium"
    required_specializations: FrozenSet[str] = frozenset()
    description: str = ""


@dataclass(frozen=True)
class ClientServiceBinding:
    """One entry of a client's service map (``{"Use": 1, "Weight": 4, ...}``)."""

    name: str
    use: Any = 0
    weight: Optional[float] = None
    type: Optional[str] = None
    quality: Optional[str] = None
    description: str = ""

    @property
    def active(self) -> bool:
        # Only the number 1 counts; True, "1" and 1.5 do not.
        return not isinstance(self.use, bool) and isinstance(self.use, (int, float)) and self.use == 1


@dataclass(frozen=True)
class Client:
    name: str
    id: Optional[str] = None
    equipment: Mapping[str, EquipmentCategory] = field(default_factory=dict)
    services: Mapping[str, ClientServiceBinding] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.id if self.id is not None else self.name


@dataclass(frozen=True)
class TariffPlan:
    id: str
    name: str
    multiplier: float = DEFAULT_TARIFF_MULTIPLIER


@dataclass(frozen=True)
class SlaLevel:
    id: str
    name: str
    multiplier: float = DEFAULT_SLA_MULTIPLIER
    response_time_hours: Optional[float] = None


@dataclass(frozen=True)
class ClientAssignment:
    """A client served by one company, with its pricing multipliers.

    ``tariff_plan`` / ``sla_level`` name the plan the multiplier came from, if any.
    """

    client: Client
    tariff_multiplier: float = DEFAULT_TARIFF_MULTIPLIER
    sla_multiplier: float = DEFAULT_SLA_MULTIPLIER
    active: bool = True
    tariff_plan: Optional[str] = None
    sla_level: Optional[str] = None


@dataclass(frozen=True)
class FinancialSettings:
    profit_margin: float = DEFAULT_PROFIT_MARGIN
    expected_monthly_revenue: float = DEFAULT_EXPECTED_REVENUE
    expense_exchange_rate: float = DEFAULT_EXPENSE_RATE


@dataclass(frozen=True)
class CompanySnapshot:
    """Everything the allocator needs for one company, frozen for one run."""

    company_id: str
    employees: Tuple[Employee, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    services: Tuple[Service, ...] = ()
    assignments: Tuple[ClientAssignment, ...] = ()
    settings: FinancialSettings = field(default_factory=FinancialSettings)
    tariff_plans: Tuple[TariffPlan, ...] = ()
    sla_levels: Tuple[SlaLevel, ...] = ()

    def active_assignments(self) -> Tuple[ClientAssignment, ...]:
        return tuple(a for a in self.assignments if a.active)

    def catalog(self) -> Dict[str, Service]:
        return {s.name: s for s in self.services}


def binding_from_raw(name: str, raw: Any) -> ClientServiceBinding:
    """Build a binding from the ``{"Use": 1, "Weight": ...}`` shape clients store."""
    if isinstance(raw, ClientServiceBinding):
        return raw
    if not isinstance(raw, Mapping):
        return ClientServiceBinding(name=name)
    weight = raw.get("Weight", raw.get("weight"))
    return ClientServiceBinding(
        name=name,
        use=raw.get("Use", raw.get("use", 0)),
        weight=weight if isinstance(weight, (int, float)) and not isinstance(weight, bool) else None,
        type=raw.get("Type", raw.get("type")),
        quality=raw.get("Quality", raw.get("quality")),
        description=str(raw.get("Description", raw.get("description")) or ""),
    )
