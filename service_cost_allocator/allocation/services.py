from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import DEFAULT_SERVICE_WEIGHT, DEFAULT_UNKNOWN_SERVICE_POLICY, STAFFING_SHORTAGE_PENALTY
from ..errors import UnknownServiceReferenceError
from ..models import Employee, Service, ServicesWeight, binding_from_raw
from ..policies import normalize_unknown_service_policy

_LOGGER = logging.getLogger(__name__)

Catalog = Union[Mapping[str, Service], Iterable[Service]]


def _as_catalog(catalog: Catalog) -> Dict[str, Service]:
    if isinstance(catalog, Mapping):
        return dict(catalog)
    return {s.name: s for s in (catalog or [])}


def service_weight(service: Service) -> float:
    """Catalog weight, falling back to 1 when missing or zero."""
    try:
        w = float(service.weight or 0.0)
    except (TypeError, ValueError):
        w = 0.0
    return w if w > 0 else DEFAULT_SERVICE_WEIGHT


def available_employees(service: Service, employees: Iterable[Employee]) -> List[Employee]:
    """Employees who support the service by name or share a required specialization."""
    required = set(service.required_specializations or ())
    out: List[Employee] = []
    for emp in employees or []:
        if service.name in (emp.supported_services or ()):
            out.append(emp)
        elif required and required & set(emp.specializations or ()):
            out.append(emp)
    return out


def compute_services_weight(
    bindings: Optional[Mapping[str, Any]],
    catalog: Catalog,
    employees: Iterable[Employee],
    *,
    shortage_penalty: float = STAFFING_SHORTAGE_PENALTY,
    unknown_service_policy: str = DEFAULT_UNKNOWN_SERVICE_POLICY,
    client_name: Optional[str] = None,
) -> ServicesWeight:
    """Weight of a client's active services.

    Each binding with ``Use == 1`` adds the catalog weight of its service.
    Services nobody on staff can support are multiplied by
    ``shortage_penalty``; otherwise the weight is split evenly across the
    qualified employees in ``specialist_load``.
    """
    policy = normalize_unknown_service_policy(unknown_service_policy)
    services = _as_catalog(catalog)
    staff = list(employees or [])

    total = 0.0
    load: Dict[str, float] = {}
    for name, raw in (bindings or {}).items():
        binding = binding_from_raw(str(name), raw)
        if not binding.active:
            continue

        service = services.get(binding.name)
        if service is None:
            if policy == "error":
                raise UnknownServiceReferenceError(binding.name, client_name)
            if policy == "warn":
                _LOGGER.warning("Client %s references unknown service '%s'; skipped", client_name or "?", binding.name)
            continue

        weight = service_weight(service)
        qualified = available_employees(service, staff)
        if not qualified:
            total += weight * shortage_penalty
            _LOGGER.debug("Service '%s' has no qualified staff; weight %s x %s", service.name, weight, shortage_penalty)
            continue

        total += weight
        share = weight / len(qualified)
        for emp in qualified:
            load[emp.key] = load.get(emp.key, 0.0) + share

    return ServicesWeight(total_weight=total, specialist_load=load)
