from __future__ import annotations

from typing import List

from rich.table import Table

from ..diagnostics import SnapshotIssue
from ..models import PricingResult


def build_client_table(result: PricingResult, currency: str) -> Table:
    table = Table(title=f"Client prices ({result.mode})", show_lines=False)
    table.add_column("Client", style="bold")
    table.add_column("Equipment", justify="right")
    table.add_column("Services", justify="right")
    table.add_column("Adjusted", justify="right")
    table.add_column("Share", justify="right")
    table.add_column(f"Base cost ({currency})", justify="right")
    table.add_column(f"Final price ({currency})", justify="right", style="green")

    for cp in sorted(result.client_prices, key=lambda c: (-c.final_price, c.name)):
        table.add_row(
            cp.name,
            f"{cp.equipment_weight:,.2f}",
            f"{cp.services_weight:,.2f}",
            f"{cp.adjusted_weight:,.2f}",
            f"{cp.weight_percentage:.1f}%",
            f"{cp.base_cost:,.2f}",
            f"{cp.final_price:,.2f}",
        )

    summary = result.summary
    table.add_section()
    table.add_row(
        f"Total ({summary.client_count})",
        "",
        "",
        f"{result.total_system_weight:,.2f}",
        "100.0%",
        f"{result.total_monthly_costs:,.2f}",
        f"{summary.total_revenue:,.2f}",
    )
    return table


def build_issue_table(issues: List[SnapshotIssue]) -> Table:
    table = Table(title="Data issues")
    table.add_column("Kind", style="yellow")
    table.add_column("Client")
    table.add_column("Service")
    table.add_column("Message")
    for i in issues:
        table.add_row(i.kind, i.client, i.service or "-", i.message)
    return table
