from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .allocation import available_employees, compute_equipment_weight
from .models import CompanySnapshot
from .policies import AdvancedPolicy, AllocationPolicy


@dataclass(frozen=True)
class SnapshotIssue:
    kind: str  # "unknown_service" | "uncovered_service" | "zero_weight_client"
    client: str
    message: str
    service: Optional[str] = None
    severity: str = "warning"


def collect_issues(snapshot: CompanySnapshot, policy: Optional[AllocationPolicy] = None) -> List[SnapshotIssue]:
    """Consistency gaps that do not stop an allocation but change its outcome.

    - unknown_service: an active binding names a service missing from the catalog
    - uncovered_service: nobody on staff supports an active service (penalized
      when the policy has a staffing-shortage penalty)
    - zero_weight_client: the client has neither equipment nor active services
    """
    catalog = snapshot.catalog()
    penalty = (policy or AdvancedPolicy()).shortage_penalty()
    uncovered_note = f"staffing-shortage penalty ×{penalty:g} applies" if penalty > 1 else "no penalty under this policy"
    issues: List[SnapshotIssue] = []
    for a in snapshot.active_assignments():
        client = a.client
        active = [b for b in client.services.values() if b.active]

        for b in active:
            service = catalog.get(b.name)
            if service is None:
                issues.append(
                    SnapshotIssue(
                        kind="unknown_service",
                        client=client.name,
                        service=b.name,
                        message=f"Service '{b.name}' is not in the catalog",
                    )
                )
            elif not available_employees(service, snapshot.employees):
                issues.append(
                    SnapshotIssue(
                        kind="uncovered_service",
                        client=client.name,
                        service=b.name,
                        message=f"No employee supports '{b.name}'; {uncovered_note}",
                    )
                )

        known_active = [b for b in active if b.name in catalog]
        if compute_equipment_weight(client.equipment) <= 0 and not known_active:
            issues.append(
                SnapshotIssue(
                    kind="zero_weight_client",
                    client=client.name,
                    message="Client has no equipment and no active services; it will not be charged",
                )
            )
    return issues


def summarize_issues(issues: List[SnapshotIssue]) -> Dict[str, Any]:
    kind_counts = Counter(i.kind for i in issues)
    service_counts = Counter(i.service for i in issues if i.service)

    return {
        "total": len(issues),
        "by_kind": dict(sorted(kind_counts.items())),
        "by_service": dict(service_counts.most_common()),
        "issues": [asdict(i) for i in issues],
    }
