from .allocation import (
    allocate,
    allocate_service_prices,
    allocate_simplified,
    allocate_snapshot,
    compute_equipment_weight,
    compute_services_weight,
)
from .errors import AllocationError, InsufficientDataError, SnapshotError, UnknownServiceReferenceError

__all__ = [
    "AllocationError",
    "InsufficientDataError",
    "SnapshotError",
    "UnknownServiceReferenceError",
    "allocate",
    "allocate_service_prices",
    "allocate_simplified",
    "allocate_snapshot",
    "compute_equipment_weight",
    "compute_services_weight",
]
