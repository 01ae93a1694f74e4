"""Error taxonomy for the allocator."""

from __future__ import annotations

from typing import Optional


class AllocationError(Exception):
    """Base class for errors raised by the allocation core."""


class InsufficientDataError(AllocationError):
    """Allocation is undefined for the given snapshot.

    ``reason`` is ``"no_costs"`` when the company has no monthly cost to
    distribute and ``"no_weight"`` when no client carries any weight.
    """

    MESSAGES = {
        "no_costs": "Total monthly costs are zero: configure employees and/or expenses first.",
        "no_weight": "Total system weight is zero: assign equipment and/or services to clients first.",
    }

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or self.MESSAGES.get(reason, reason))


class UnknownServiceReferenceError(AllocationError):
    def __init__(self, service_name: str, client_name: Optional[str] = None):
        self.service_name = service_name
        self.client_name = client_name
        where = f" (client '{client_name}')" if client_name else ""
        super().__init__(f"Service '{service_name}' is not in the company catalog{where}")


class SnapshotError(ValueError):
    """A snapshot document could not be turned into a CompanySnapshot."""
