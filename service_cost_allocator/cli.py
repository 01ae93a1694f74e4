#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Service Cost Allocator – CLI

Flow:
- Reads a company snapshot (YAML/JSON): employees, expenses, service catalog,
  clients with equipment, service bindings and multipliers.
- Reports data issues (unknown services, uncovered services, zero-weight clients).
- Allocates the company's monthly cost across clients with the chosen policy.
- Optionally prices the service catalog as well (--service-prices).
- Writes pricing.json / report.md / metadata.json under runs/<prefix>/.
"""

import argparse
import dataclasses
import json
import logging
import math
import os
import sys
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from .allocation import allocate_service_prices, allocate_snapshot
from .config import (
    DEFAULT_CURRENCY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLICY,
    DEFAULT_UNKNOWN_SERVICE_POLICY,
    RUNS_DIR,
    UNKNOWN_SERVICE_POLICIES,
)
from .diagnostics import collect_issues, summarize_issues
from .errors import AllocationError, InsufficientDataError, SnapshotError, UnknownServiceReferenceError
from .policies import build_default_registry
from .reporting import build_client_table, build_issue_table, render_report, render_service_prices
from .snapshot import load_snapshot
from .utils.trace import build_trace_logger


console = Console()

EXIT_BAD_INPUT = 1
EXIT_INSUFFICIENT_DATA = 2


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def _margin_arg(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"margin must be a number, got {value!r}") from None
    if not math.isfinite(f) or f < 0:
        raise argparse.ArgumentTypeError(f"margin must be a finite number >= 0, got {value!r}")
    return f


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cost-allocate",
        description=(
            "Service Cost Allocator – fair per-client prices from infrastructure weight\n\n"
            "Given a company snapshot the tool:\n"
            "- Sums salaries and recurring expenses into a monthly cost\n"
            "- Weighs every client by equipment and active services\n"
            "- Applies tariff/SLA multipliers and the staffing-shortage penalty\n"
            "- Splits the cost by weight and adds the profit margin\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("snapshot", type=str, help="Company snapshot file (.yaml, .yml or .json).")

    parser.add_argument(
        "--policy",
        type=str,
        default=DEFAULT_POLICY,
        help="Allocation policy: advanced, simplified or a declarative policy id.",
    )

    parser.add_argument(
        "--policy-dir",
        type=str,
        default=None,
        help="Directory with extra declarative policy definitions (YAML/JSON).",
    )

    parser.add_argument(
        "--margin",
        type=_margin_arg,
        default=None,
        help="Override the profit margin (percent) from the snapshot settings.",
    )

    parser.add_argument(
        "--unknown-service-policy",
        choices=list(UNKNOWN_SERVICE_POLICIES),
        default=None,
        help=(
            "How to treat client bindings to services missing from the catalog "
            f"(default: policy setting, else {DEFAULT_UNKNOWN_SERVICE_POLICY})."
        ),
    )

    parser.add_argument(
        "--service-prices",
        action="store_true",
        help="Also allocate the monthly cost across catalog services.",
    )

    parser.add_argument("--currency", type=str, default=DEFAULT_CURRENCY, help="Currency label used in reports.")

    parser.add_argument(
        "--output-format",
        choices=["markdown", "json", "both"],
        default="both",
        help="markdown: report.md only; json: pricing.json only; both: both files.",
    )

    parser.add_argument(
        "--output-prefix",
        type=str,
        default="allocation",
        help="Run name; files are written to runs/<prefix>/.",
    )

    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL,
        help="Logging level for internal messages.",
    )

    parser.add_argument("--trace", action="store_true", help="Force writing a run trace JSONL (enabled by default).")
    parser.add_argument("--no-trace", action="store_true", help="Disable the run trace.")
    parser.add_argument(
        "--trace-path",
        type=str,
        default=None,
        help="Override trace output path (default: runs/<prefix>/trace.jsonl)",
    )

    return parser.parse_args(argv)


# --------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------
def _trace_enabled(args: argparse.Namespace) -> bool:
    enabled = True
    trace_env = os.getenv("COSTALLOC_TRACE")
    if trace_env is not None and trace_env.strip().lower() in {"0", "false", "no"}:
        enabled = False
    if args.no_trace:
        enabled = False
    if args.trace:
        enabled = True
    return enabled


def _write_json(path: Path, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    run_dir = Path(RUNS_DIR) / args.output_prefix
    run_dir.mkdir(parents=True, exist_ok=True)
    trace_path = Path(args.trace_path) if args.trace_path else run_dir / "trace.jsonl"

    console_log_path = run_dir / "console.log"
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(), logging.FileHandler(console_log_path, encoding="utf-8")],
        force=True,
    )
    logger = logging.getLogger("service_cost_allocator")
    logger.debug("CLI arguments: %s", args)

    trace_logger = build_trace_logger(trace_path, enabled=_trace_enabled(args))
    try:
        tool_version = metadata.version("service-cost-allocator")
    except metadata.PackageNotFoundError:
        tool_version = "dev"

    console.print("[bold]Service Cost Allocator[/bold]\n")

    # ----- snapshot -----
    try:
        snapshot = load_snapshot(args.snapshot)
    except SnapshotError as ex:
        logger.error("Invalid snapshot: %s", ex)
        console.print(f"[red]Invalid snapshot: {ex}[/red]")
        sys.exit(EXIT_BAD_INPUT)

    if args.margin is not None:
        snapshot = dataclasses.replace(
            snapshot, settings=dataclasses.replace(snapshot.settings, profit_margin=args.margin)
        )

    # ----- policy -----
    try:
        policy = build_default_registry(args.policy_dir).require(args.policy)
        unknown_service_policy = policy.unknown_service_policy(args.unknown_service_policy)
    except (KeyError, ValueError) as ex:
        message = ex.args[0] if ex.args else str(ex)
        logger.error("%s", message)
        console.print(f"[red]{message}[/red]")
        sys.exit(EXIT_BAD_INPUT)

    trace_logger.log(
        "setup",
        {
            "tool_version": tool_version,
            "snapshot": str(args.snapshot),
            "policy": policy.name,
            "profit_margin": snapshot.settings.profit_margin,
            "unknown_service_policy": unknown_service_policy,
            "clients": len(snapshot.active_assignments()),
        },
        company_id=snapshot.company_id,
    )

    # ----- diagnostics -----
    issues = collect_issues(snapshot, policy=policy)
    if issues:
        console.print(build_issue_table(issues))
    trace_logger.log("diagnostics", summarize_issues(issues), company_id=snapshot.company_id)

    # ----- allocation -----
    try:
        result = allocate_snapshot(
            snapshot,
            policy=policy,
            unknown_service_policy=unknown_service_policy,
            trace=trace_logger,
        )
    except InsufficientDataError as ex:
        logger.error("Allocation impossible (%s): %s", ex.reason, ex)
        console.print(f"[red]{ex}[/red]")
        trace_logger.log("allocation_failed", {"reason": ex.reason, "message": str(ex)}, company_id=snapshot.company_id)
        sys.exit(EXIT_INSUFFICIENT_DATA)
    except (UnknownServiceReferenceError, AllocationError) as ex:
        logger.error("%s", ex)
        console.print(f"[red]{ex}[/red]")
        sys.exit(EXIT_BAD_INPUT)

    console.print(build_client_table(result, args.currency))

    service_prices = []
    if args.service_prices:
        try:
            service_prices = allocate_service_prices(
                snapshot.services,
                [a.client for a in snapshot.active_assignments()],
                result.total_monthly_costs,
                result.profit_margin,
            )
        except InsufficientDataError as ex:
            console.print(f"[yellow]Service prices skipped: {ex}[/yellow]")

    # ----- outputs -----
    pricing_path = run_dir / "pricing.json"
    report_path = run_dir / "report.md"

    if args.output_format in ("json", "both"):
        payload = result.to_dict()
        payload["issues"] = summarize_issues(issues)
        if service_prices:
            payload["servicePrices"] = [sp.to_dict() for sp in service_prices]
        _write_json(pricing_path, payload)
        logger.info("Saved pricing JSON to %s", pricing_path)

    if args.output_format in ("markdown", "both"):
        report_md = render_report(result, args.currency)
        if service_prices:
            report_md += "\n\n## Service prices\n" + render_service_prices(service_prices, args.currency)
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(report_md + "\n")
        console.print(f"[green]Saved report to {report_path}[/green]")

    trace_logger.log(
        "reporting",
        {"pricing_path": str(pricing_path), "report_path": str(report_path), "format": args.output_format},
        company_id=snapshot.company_id,
    )

    _write_json(
        run_dir / "metadata.json",
        {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "command": " ".join(sys.argv),
            "working_directory": os.getcwd(),
            "tool_version": tool_version,
            "cli_args": vars(args),
            "derived": {
                "company_id": snapshot.company_id,
                "policy": policy.name,
                "profit_margin": result.profit_margin,
                "issue_count": len(issues),
            },
            "output_files": {
                "pricing": str(pricing_path) if args.output_format in ("json", "both") else "",
                "report": str(report_path) if args.output_format in ("markdown", "both") else "",
                "console_log": str(console_log_path),
                "trace": str(trace_path),
            },
        },
    )


if __name__ == "__main__":
    main()
