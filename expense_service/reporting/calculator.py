"""In-process aggregation over a user's transactions."""
from dataclasses import dataclass
from typing import Iterable, Protocol

INCOME = "income"
EXPENSE = "expense"


class _Entry(Protocol):
    amount: float
    type: str


@dataclass
class MonthlyTotals:
    """Summed income and expense for a reporting window."""
    income: float = 0.0
    expense: float = 0.0
    transaction_count: int = 0


def classify_amount(amount: float) -> str:
    """Zero and positive amounts are income; negative amounts are expenses."""
    return INCOME if amount >= 0 else EXPENSE


def summarize(transactions: Iterable[_Entry]) -> MonthlyTotals:
    """
    Reduce transactions to income and expense totals.

    Totals are keyed on the stored ``type`` rather than the amount's
    current sign. Expenses are summed as absolute values.
    """
    totals = MonthlyTotals()
    for txn in transactions:
        totals.transaction_count += 1
        if txn.type == INCOME:
            totals.income += txn.amount
        elif txn.type == EXPENSE:
            totals.expense += abs(txn.amount)
    return totals
