import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1].parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from service_cost_allocator.models import (  # noqa: E402
    Client,
    ClientAssignment,
    Employee,
    Expense,
    FinancialSettings,
    Service,
    binding_from_raw,
    normalize_equipment,
)

DATA_DIR = Path(__file__).parent / "data"


def make_assignment(name, equipment=None, services=None, tariff=1.0, sla=1.0, active=True, client_id=None):
    client = Client(
        name=name,
        id=client_id,
        equipment=normalize_equipment(equipment or {}),
        services={k: binding_from_raw(k, v) for k, v in (services or {}).items()},
    )
    return ClientAssignment(client=client, tariff_multiplier=tariff, sla_multiplier=sla, active=active)


@pytest.fixture
def scenario():
    """One salary of 30000 and a 5000/month expense; A has equipment, B one covered service."""
    employees = [Employee(name="Olena", salary=30000, supported_services=frozenset({"Backup"}))]
    expenses = [Expense(name="Office", amount=5000, period=1, period_type="months")]
    services = [Service(name="Backup", type="IaaS", weight=5)]
    assignments = [
        make_assignment("A", equipment={"servers": {"count": 5, "weight": 2}}),
        make_assignment("B", services={"Backup": {"Use": 1}}),
    ]
    return employees, expenses, services, assignments, FinancialSettings(profit_margin=20)


@pytest.fixture
def demo_snapshot_path():
    return DATA_DIR / "demo_snapshot.yaml"


@pytest.fixture
def make_client():
    return make_assignment
