from typing import Dict, List

from ..models import PricingResult, ServicePrice


def _format_currency(value: float, currency: str) -> str:
    return f"{value:,.2f} {currency}"


def _format_weight(value: float) -> str:
    return f"{value:,.2f}"


def _format_percent(value: float) -> str:
    return f"{value:.2f}%"


def _format_multiplier(value: float) -> str:
    return f"×{value:g}"


def _md_escape(v) -> str:
    s = "" if v is None else str(v)
    # Escape pipes so Markdown tables don't break
    return s.replace("|", "\\|").replace("\n", " ").strip()


def render_totals_table(result: PricingResult, currency: str) -> str:
    rows = [
        "| Monthly costs | System weight | Cost per unit | Margin | Policy |",
        "|---|---|---|---|---|",
        "| {mc} | {w} | {cpu} | {m} | {p} |".format(
            mc=_format_currency(result.total_monthly_costs, currency),
            w=_format_weight(result.total_system_weight),
            cpu=_format_currency(result.cost_per_unit, currency),
            m=_format_percent(result.profit_margin),
            p=_md_escape(result.mode),
        ),
    ]
    return "\n".join(rows)


def render_client_table(result: PricingResult, currency: str) -> str:
    rows = [
        "| Client | Equipment | Services | Base | Tariff | SLA | Adjusted | Share | Base cost | Final price |",
        "|---|---|---|---|---|---|---|---|---|---|",
    ]
    for cp in sorted(result.client_prices, key=lambda c: (-c.final_price, c.name)):
        rows.append(
            "| {name} | {eq} | {sv} | {bw} | {t} | {s} | {aw} | {pct} | {bc} | {fp} |".format(
                name=_md_escape(cp.name),
                eq=_format_weight(cp.equipment_weight),
                sv=_format_weight(cp.services_weight),
                bw=_format_weight(cp.base_weight),
                t=_format_multiplier(cp.tariff_multiplier),
                s=_format_multiplier(cp.sla_multiplier),
                aw=_format_weight(cp.adjusted_weight),
                pct=_format_percent(cp.weight_percentage),
                bc=_format_currency(cp.base_cost, currency),
                fp=_format_currency(cp.final_price, currency),
            )
        )
    return "\n".join(rows)


def render_summary_table(result: PricingResult, currency: str) -> str:
    summary = result.summary
    rows = [
        "| Clients | Revenue | Profit | Expected revenue | Gap |",
        "|---|---|---|---|---|",
        "| {n} | {r} | {p} | {e} | {g} |".format(
            n=summary.client_count,
            r=_format_currency(summary.total_revenue, currency),
            p=_format_currency(summary.total_profit, currency),
            e=_format_currency(summary.expected_monthly_revenue, currency) if summary.expected_monthly_revenue else "-",
            g=f"{summary.revenue_gap:+,.2f} {currency}" if summary.expected_monthly_revenue else "-",
        ),
    ]
    return "\n".join(rows)


def render_specialist_load(result: PricingResult) -> str:
    load: Dict[str, float] = {}
    for cp in result.client_prices:
        for emp, w in cp.specialist_load.items():
            load[emp] = load.get(emp, 0.0) + w
    if not load:
        return ""
    rows: List[str] = ["| Employee | Service weight supported |", "|---|---|"]
    for emp, w in sorted(load.items(), key=lambda kv: (-kv[1], kv[0])):
        rows.append(f"| {_md_escape(emp)} | {_format_weight(w)} |")
    return "\n".join(rows)


def render_service_prices(prices: List[ServicePrice], currency: str) -> str:
    rows = [
        "| Service | Weight | Clients | Usage weight | Cost share | Price |",
        "|---|---|---|---|---|---|",
    ]
    for sp in sorted(prices, key=lambda p: p.name):
        rows.append(
            "| {n} | {w} | {c} | {u} | {a} | {p} |".format(
                n=_md_escape(sp.name),
                w=_format_weight(sp.weight),
                c=sp.clients_using,
                u=_format_weight(sp.usage_weight),
                a=_format_currency(sp.cost_allocation, currency),
                p=_format_currency(sp.calculated_price, currency),
            )
        )
    return "\n".join(rows)


def render_report(result: PricingResult, currency: str = "UAH") -> str:
    sections: List[str] = [
        "## System totals",
        render_totals_table(result, currency),
        "",
        "## Client prices",
        render_client_table(result, currency),
        "",
        "## Summary",
        render_summary_table(result, currency),
    ]

    load = render_specialist_load(result)
    if load:
        sections.extend(["", "## Specialist load", load])

    return "\n".join(sections).strip()
