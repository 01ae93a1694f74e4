import json

import pytest

from service_cost_allocator.errors import SnapshotError
from service_cost_allocator.models.equipment import COMPLEX, LEGACY, SIMPLE
from service_cost_allocator.snapshot import load_snapshot, parse_snapshot


def _doc(**overrides):
    doc = {
        "company_id": "acme",
        "employees": [{"name": "Olena", "salary": 30000, "specializations": ["windows"]}],
        "expenses": [{"name": "Rent", "amount": 5000}],
        "services": [{"name": "GWS", "type": "SaaS", "weight": 1}],
        "clients": [{"name": "A", "equipment": {"servers": {"count": 1, "weight": 2}}, "services": {"GWS": {"Use": 1}}}],
    }
    doc.update(overrides)
    return doc


def test_demo_snapshot_loads(demo_snapshot_path):
    snapshot = load_snapshot(demo_snapshot_path)

    assert snapshot.company_id == "helpdesk-east"
    assert len(snapshot.employees) == 3
    assert snapshot.settings.expense_exchange_rate == 41
    assert len(snapshot.assignments) == 4
    assert [a.client.name for a in snapshot.active_assignments()] == ["HD B-EAST", "TechCorp Ltd", "Small Office"]
    hd = snapshot.assignments[0]
    assert hd.sla_multiplier == 1.2
    assert hd.client.equipment["workstations"].kind == COMPLEX
    techcorp = snapshot.assignments[1].client
    assert techcorp.equipment["servers"].kind == SIMPLE
    assert techcorp.equipment["phones"].kind == LEGACY
    assert techcorp.services["Office 365"].active is False


def test_json_snapshot_and_defaults(tmp_path):
    p = tmp_path / "acme.json"
    p.write_text(json.dumps(_doc()), encoding="utf-8")

    snapshot = load_snapshot(p)

    assert snapshot.settings.profit_margin == 20
    assert snapshot.expenses[0].period == 1
    assert snapshot.expenses[0].period_type == "months"
    assert snapshot.services[0].quality == "Medium"
    assert snapshot.assignments[0].tariff_multiplier == 1.0
    assert snapshot.employees[0].specializations == frozenset({"windows"})


def test_zero_service_weight_falls_back_to_one():
    snapshot = parse_snapshot(_doc(services=[{"name": "GWS", "weight": 0}]))
    assert snapshot.services[0].weight == 1.0


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"expenses": [{"name": "Rent", "amount": 5000, "period": 0}]}, r"expenses\[0\]"),
        ({"expenses": [{"name": "Rent", "amount": 5000, "period_type": "weeks"}]}, "period_type"),
        ({"expenses": [{"name": "Rent"}]}, "Missing required key 'amount'"),
        ({"employees": [{"salary": 100}]}, r"Missing required key 'name' in employees\[0\]"),
        ({"employees": [{"name": "x", "salary": -1}]}, "salary must be >= 0"),
        ({"services": [{"name": "GWS", "type": "DaaS"}]}, "type must be one of"),
        ({"services": [{"name": "GWS", "quality": "Great"}]}, "quality must be one of"),
        ({"services": [{"name": "GWS"}, {"name": "GWS"}]}, "Duplicate service name"),
        ({"clients": [{"name": "A", "tariff_multiplier": -1}]}, r"tariff_multiplier must be >= 0 in clients\[0\]"),
        ({"clients": [{"name": "A", "sla_multiplier": "high"}]}, "sla_multiplier must be a number"),
        ({"clients": [{"name": "A"}, {"name": "A"}]}, "Duplicate client"),
        ({"clients": [{"name": "A", "active": "yes"}]}, "active must be true/false"),
        ({"clients": {"name": "A"}}, "Expected a list in clients"),
        ({"settings": {"profit_margin": "lots"}}, "profit_margin must be a number"),
    ],
)
def test_invalid_snapshots_name_the_offending_path(overrides, message):
    with pytest.raises(SnapshotError, match=message):
        parse_snapshot(_doc(**overrides))


def test_unsupported_and_unreadable_files(tmp_path):
    with pytest.raises(SnapshotError, match="Unsupported"):
        p = tmp_path / "acme.txt"
        p.write_text("{}", encoding="utf-8")
        load_snapshot(p)

    with pytest.raises(SnapshotError, match="Cannot read"):
        load_snapshot(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError, match="Cannot parse"):
        load_snapshot(broken)


def test_undecodable_file_is_a_snapshot_error(tmp_path):
    p = tmp_path / "latin.yaml"
    p.write_bytes(b"company_id: \xff\xfe acme\n")

    with pytest.raises(SnapshotError, match="Cannot read"):
        load_snapshot(p)


def test_named_tariff_plans_and_sla_levels_resolve_multipliers(demo_snapshot_path):
    snapshot = load_snapshot(demo_snapshot_path)

    assert [p.id for p in snapshot.tariff_plans] == ["standard", "discount"]
    priority = snapshot.sla_levels[1]
    assert (priority.name, priority.multiplier, priority.response_time_hours) == ("Priority", 1.2, 4)
    hd, techcorp = snapshot.assignments[0], snapshot.assignments[1]
    assert (hd.sla_level, hd.sla_multiplier) == ("Priority", 1.2)
    assert hd.tariff_plan is None
    assert (techcorp.tariff_plan, techcorp.tariff_multiplier) == (None, 0.9)


def test_plan_reference_by_id():
    snapshot = parse_snapshot(
        _doc(
            tariff_plans=[{"id": 7, "name": "Enterprise", "multiplier": 1.5}],
            clients=[{"name": "A", "tariff_plan": 7}],
        )
    )

    a = snapshot.assignments[0]
    assert (a.tariff_plan, a.tariff_multiplier, a.sla_multiplier) == ("Enterprise", 1.5, 1.0)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"clients": [{"name": "A", "tariff_plan": "gold"}]}, r"Unknown tariff_plan 'gold' in clients\[0\]"),
        (
            {"sla_levels": [{"id": "p", "multiplier": 1.2}], "clients": [{"name": "A", "sla_level": "p", "sla_multiplier": 2}]},
            "either sla_multiplier or sla_level",
        ),
        ({"tariff_plans": [{"id": "x", "multiplier": 1}, {"id": "x", "multiplier": 2}]}, "Duplicate id 'x' in tariff_plans"),
        ({"sla_levels": [{"id": "p"}]}, r"Missing required key 'multiplier' in sla_levels\[0\]"),
        ({"sla_levels": [{"id": "p", "multiplier": -1}]}, "multiplier must be >= 0"),
    ],
)
def test_invalid_plans_name_the_offending_path(overrides, message):
    with pytest.raises(SnapshotError, match=message):
        parse_snapshot(_doc(**overrides))
