from .format import render_report, render_service_prices
from .tables import build_client_table, build_issue_table

__all__ = ["build_client_table", "build_issue_table", "render_report", "render_service_prices"]
