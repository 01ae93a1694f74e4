import json

import pytest

from service_cost_allocator import cli


def _run(monkeypatch, tmp_path, *argv):
    monkeypatch.chdir(tmp_path)
    cli.main(list(argv))
    return tmp_path / "runs"


def test_cli_writes_pricing_report_and_metadata(monkeypatch, tmp_path, demo_snapshot_path):
    runs = _run(monkeypatch, tmp_path, str(demo_snapshot_path), "--output-prefix", "demo", "--service-prices")

    run_dir = runs / "demo"
    pricing = json.loads((run_dir / "pricing.json").read_text(encoding="utf-8"))
    assert pricing["companyId"] == "helpdesk-east"
    assert pricing["mode"] == "advanced"
    assert pricing["summary"]["clientCount"] == 3
    assert pricing["issues"]["by_kind"] == {"uncovered_service": 1, "unknown_service": 1}
    assert {sp["name"] for sp in pricing["servicePrices"]} >= {"GWS", "Backup"}

    report = (run_dir / "report.md").read_text(encoding="utf-8")
    assert "## Client prices" in report
    assert "## Service prices" in report

    metadata = json.loads((run_dir / "metadata.json").read_text(encoding="utf-8"))
    assert metadata["derived"]["policy"] == "advanced"

    phases = [json.loads(line)["phase"] for line in (run_dir / "trace.jsonl").read_text(encoding="utf-8").splitlines()]
    assert phases == ["setup", "diagnostics"] + ["client_price"] * 3 + ["allocation", "reporting"]


def test_cli_margin_override_and_simplified_policy(monkeypatch, tmp_path, demo_snapshot_path):
    runs = _run(
        monkeypatch,
        tmp_path,
        str(demo_snapshot_path),
        "--policy",
        "simplified",
        "--margin",
        "0",
        "--output-format",
        "json",
        "--no-trace",
    )

    pricing = json.loads((runs / "allocation" / "pricing.json").read_text(encoding="utf-8"))
    assert pricing["mode"] == "simplified"
    assert pricing["profitMargin"] == 0
    assert pricing["summary"]["totalRevenue"] == pytest.approx(pricing["totalMonthlyCosts"])
    assert not (runs / "allocation" / "report.md").exists()
    assert not (runs / "allocation" / "trace.jsonl").exists()


def test_cli_exits_2_on_insufficient_data(monkeypatch, tmp_path):
    snapshot = tmp_path / "empty.yaml"
    snapshot.write_text("company_id: empty\nclients:\n  - name: A\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(snapshot))
    assert exc.value.code == cli.EXIT_INSUFFICIENT_DATA


def test_cli_exits_1_on_invalid_snapshot(monkeypatch, tmp_path):
    snapshot = tmp_path / "bad.yaml"
    snapshot.write_text("clients:\n  - tariff_multiplier: 2\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(snapshot))
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_strict_unknown_services_exit_1(monkeypatch, tmp_path, demo_snapshot_path):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(demo_snapshot_path), "--unknown-service-policy", "error")
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_unknown_policy_exit_1(monkeypatch, tmp_path, demo_snapshot_path):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(demo_snapshot_path), "--policy", "premium")
    assert exc.value.code == cli.EXIT_BAD_INPUT


@pytest.mark.parametrize("margin", ["nan", "inf", "-5", "lots"])
def test_cli_rejects_invalid_margin(monkeypatch, tmp_path, demo_snapshot_path, margin):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(demo_snapshot_path), "--margin", margin)
    assert exc.value.code == 2
    assert not (tmp_path / "runs").exists()


def test_cli_invalid_configured_unknown_service_policy_exit_1(monkeypatch, tmp_path, demo_snapshot_path):
    monkeypatch.setattr("service_cost_allocator.policies.base.DEFAULT_UNKNOWN_SERVICE_POLICY", "ignore")

    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(demo_snapshot_path))
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_exits_1_on_undecodable_snapshot(monkeypatch, tmp_path):
    snapshot = tmp_path / "latin.yaml"
    snapshot.write_bytes(b"company_id: \xff\xfe acme\n")

    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, tmp_path, str(snapshot))
    assert exc.value.code == cli.EXIT_BAD_INPUT
