from .equipment import EquipmentCategory, EquipmentLeaf, normalize_category, normalize_equipment
from .results import ClientPrice, PricingResult, PricingSummary, ServicePrice, ServicesWeight
from .types import (
    Client,
    ClientAssignment,
    ClientServiceBinding,
    CompanySnapshot,
    Employee,
    Expense,
    FinancialSettings,
    Service,
    SlaLevel,
    TariffPlan,
    binding_from_raw,
)

__all__ = [
    "Client",
    "ClientAssignment",
    "ClientPrice",
    "ClientServiceBinding",
    "CompanySnapshot",
    "Employee",
    "EquipmentCategory",
    "EquipmentLeaf",
    "Expense",
    "FinancialSettings",
    "PricingResult",
    "PricingSummary",
    "Service",
    "ServicePrice",
    "ServicesWeight",
    "SlaLevel",
    "TariffPlan",
    "binding_from_raw",
    "normalize_category",
    "normalize_equipment",
]
