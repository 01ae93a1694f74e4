from .allocator import allocate, allocate_simplified, allocate_snapshot, compute_total_monthly_costs
from .equipment import compute_equipment_weight
from .service_prices import allocate_service_prices
from .services import available_employees, compute_services_weight, service_weight

__all__ = [
    "allocate",
    "allocate_service_prices",
    "allocate_simplified",
    "allocate_snapshot",
    "available_employees",
    "compute_equipment_weight",
    "compute_services_weight",
    "compute_total_monthly_costs",
    "service_weight",
]
