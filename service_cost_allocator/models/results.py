"""Allocation output records.

``to_dict()`` produces the camelCase JSON contract served to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ServicesWeight:
    total_weight: float = 0.0
    specialist_load: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ClientPrice:
    client_id: str
    name: str
    equipment_weight: float
    services_weight: float
    base_weight: float
    tariff_multiplier: float
    sla_multiplier: float
    adjusted_weight: float
    base_cost: float
    final_price: float
    weight_percentage: float
    specialist_load: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientId": self.client_id,
            "name": self.name,
            "equipmentWeight": self.equipment_weight,
            "servicesWeight": self.services_weight,
            "baseWeight": self.base_weight,
            "tariffMultiplier": self.tariff_multiplier,
            "slaMultiplier": self.sla_multiplier,
            "adjustedWeight": self.adjusted_weight,
            "baseCost": self.base_cost,
            "finalPrice": self.final_price,
            "weightPercentage": self.weight_percentage,
            "specialistLoad": dict(self.specialist_load),
        }


@dataclass(frozen=True)
class PricingSummary:
    total_revenue: float
    total_profit: float
    client_count: int
    expected_monthly_revenue: float = 0.0

    @property
    def revenue_gap(self) -> float:
        return self.total_revenue - self.expected_monthly_revenue

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "totalProfit": self.total_profit,
            "clientCount": self.client_count,
            "expectedMonthlyRevenue": self.expected_monthly_revenue,
            "revenueGap": self.revenue_gap,
        }


@dataclass(frozen=True)
class PricingResult:
    client_prices: Tuple[ClientPrice, ...]
    total_monthly_costs: float
    total_system_weight: float
    cost_per_unit: float
    profit_margin: float
    summary: PricingSummary
    mode: str = "advanced"
    company_id: Optional[str] = None

    def get(self, client_id: str) -> Optional[ClientPrice]:
        for cp in self.client_prices:
            if cp.client_id == client_id:
                return cp
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companyId": self.company_id,
            "mode": self.mode,
            "clientPrices": {cp.client_id: cp.to_dict() for cp in self.client_prices},
            "totalMonthlyCosts": self.total_monthly_costs,
            "totalSystemWeight": self.total_system_weight,
            "costPerUnit": self.cost_per_unit,
            "profitMargin": self.profit_margin,
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class ServicePrice:
    name: str
    weight: float
    clients_using: int
    usage_weight: float
    cost_allocation: float
    calculated_price: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "weight": self.weight,
            "clientsUsing": self.clients_using,
            "usageWeight": self.usage_weight,
            "costAllocation": self.cost_allocation,
            "calculatedPrice": self.calculated_price,
        }
