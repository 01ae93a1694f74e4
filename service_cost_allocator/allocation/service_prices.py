"""Per-service price allocation.

Older installations price the *catalog* instead of the clients: every service
gets a share of the monthly cost proportional to its weight times the number
of clients using it.
"""

from __future__ import annotations

from typing import Iterable, List

from ..errors import InsufficientDataError
from ..models import Client, Service, ServicePrice, binding_from_raw
from .services import service_weight


def _clients_using(service: Service, clients: List[Client]) -> int:
    n = 0
    for c in clients:
        raw = (c.services or {}).get(service.name)
        if raw is not None and binding_from_raw(service.name, raw).active:
            n += 1
    return n


def allocate_service_prices(
    services: Iterable[Service],
    clients: Iterable[Client],
    total_monthly_costs: float,
    profit_margin: float,
) -> List[ServicePrice]:
    if total_monthly_costs <= 0:
        raise InsufficientDataError("no_costs")

    clients = list(clients or [])
    usage = []
    for s in services or []:
        w = service_weight(s)
        n = _clients_using(s, clients)
        usage.append((s, w, n, w * n))

    total_usage = sum(u for _, _, _, u in usage)
    if total_usage <= 0:
        raise InsufficientDataError("no_weight", "No client uses any catalog service: nothing to price.")

    out: List[ServicePrice] = []
    for s, w, n, u in usage:
        allocation = total_monthly_costs * (u / total_usage)
        out.append(
            ServicePrice(
                name=s.name,
                weight=w,
                clients_using=n,
                usage_weight=u,
                cost_allocation=allocation,
                calculated_price=allocation * (1 + profit_margin / 100.0),
            )
        )
    return out
