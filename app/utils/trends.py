from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from app.utils.aggregation import (
    GroupTotal,
    by_month,
    filter_by_window,
    grand_total,
    group_by,
    round2,
)
from app.utils.periods import DateWindow


@dataclass
class SpendingComparison:
    current_total: float
    previous_total: float
    change: float
    change_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentTotal": self.current_total,
            "previousTotal": self.previous_total,
            "change": self.change,
            "changePercent": self.change_percent,
        }


@dataclass
class TrendRow:
    year: int
    month: int
    income: float
    expense: float
    income_transactions: int
    expense_transactions: int

    @property
    def balance(self) -> float:
        return self.income - self.expense

    @property
    def savings_rate(self) -> float:
        return savings_rate(self.income, self.expense)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "income": self.income,
            "expense": self.expense,
            "balance": self.balance,
            "savingsRate": self.savings_rate,
            "incomeTransactions": self.income_transactions,
            "expenseTransactions": self.expense_transactions,
        }


@dataclass
class TrendAverages:
    avg_income: float = 0
    avg_expense: float = 0
    avg_balance: float = 0
    avg_savings_rate: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "avgIncome": self.avg_income,
            "avgExpense": self.avg_expense,
            "avgBalance": self.avg_balance,
            "avgSavingsRate": self.avg_savings_rate,
        }


def savings_rate(income: float, expense: float) -> float:
    """Share of income kept, in percent. Negative when spending exceeds income."""
    if income > 0:
        return (income - expense) / income * 100
    return 0


def compare(current: Iterable[GroupTotal], previous: Iterable[GroupTotal]) -> SpendingComparison:
    current_total = grand_total(current)
    previous_total = grand_total(previous)
    change = current_total - previous_total
    change_percent = (change / previous_total) * 100 if previous_total > 0 else 0
    return SpendingComparison(
        current_total=current_total,
        previous_total=previous_total,
        change=change,
        change_percent=round2(change_percent),
    )


def build_trend(transactions: Iterable[Any], window: Optional[DateWindow] = None) -> List[TrendRow]:
    """
    One row per (year, month) holding at least one transaction, oldest first.
    Months without transactions are not filled in.
    """
    rows = []
    months = group_by(filter_by_window(transactions, window), by_month)
    for (year, month), items in sorted(months.items()):
        income = [item for item in items if item.type == "income"]
        expense = [item for item in items if item.type == "expense"]
        rows.append(
            TrendRow(
                year=year,
                month=month,
                income=sum(float(item.amount) for item in income),
                expense=sum(float(item.amount) for item in expense),
                income_transactions=len(income),
                expense_transactions=len(expense),
            )
        )
    return rows


def trend_averages(rows: List[TrendRow]) -> TrendAverages:
    if not rows:
        return TrendAverages()

    count = len(rows)
    return TrendAverages(
        avg_income=round2(sum(row.income for row in rows) / count),
        avg_expense=round2(sum(row.expense for row in rows) / count),
        avg_balance=round2(sum(row.balance for row in rows) / count),
        avg_savings_rate=round2(sum(row.savings_rate for row in rows) / count),
    )
