"""Transaction classification, date windows and monthly aggregation."""
from expense_service.reporting.calculator import MonthlyTotals, classify_amount, summarize
from expense_service.reporting.periods import day_window, month_window, parse_day

__all__ = [
    "MonthlyTotals",
    "classify_amount",
    "summarize",
    "day_window",
    "month_window",
    "parse_day",
]
