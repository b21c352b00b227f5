from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from app.models.bill import BillPublic
from app.models.transaction import TransactionPublic
from app.utils import aggregation as agg
from app.utils.budget import NO_LIMITS, analyze_budget
from app.utils.health_score import CONSISTENCY_MONTHS, RECENT_ACTIVITY_DAYS, score_health
from app.utils.periods import DEFAULT_PERIOD, DateWindow, month_window, months_ago, resolve_period
from app.utils.trends import build_trend, compare, trend_averages

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 5
UPCOMING_BILLS_LIMIT = 5
UPCOMING_BILLS_DAYS = 7
DEFAULT_TREND_MONTHS = 12


class FinanceAnalyzer:
    """
    Builds the analytics reports for one user at a time.

    The record store does the user/date/type scoped reads, everything after
    that is plain aggregation over the returned records. Nothing is cached:
    each call reads and recomputes.
    """

    def __init__(self, store, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._store = store
        self._clock = clock or datetime.utcnow

    def now(self) -> datetime:
        return self._clock()

    def _expenses(self, user_id: str, window: DateWindow):
        records = self._store.transactions_for_user(
            user_id, start=window.start, end=window.end, transaction_type="expense"
        )
        return agg.filter_by_type(agg.filter_by_window(records, window), "expense")

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        now = self.now()
        month = month_window(now)

        transactions = self._store.transactions_for_user(user_id, start=month.start, end=month.end)
        monthly_transactions = agg.aggregate(transactions, agg.by_type, month)

        bills = self._store.bills_for_user(user_id, active_only=True)
        bills_summary = agg.aggregate(bills, agg.by_status)

        incomes = self._store.incomes_for_user(user_id, active_only=True)
        active_income = {
            "totalMonthly": sum(income.monthly_equivalent for income in incomes),
            "count": len(incomes),
        }

        net_income = agg.lookup_total(monthly_transactions, "income") - agg.lookup_total(
            monthly_transactions, "expense"
        )

        recent = self._store.recent_transactions(user_id, limit=RECENT_TRANSACTIONS_LIMIT)
        recent = sorted(recent, key=lambda item: item.date, reverse=True)[:RECENT_TRANSACTIONS_LIMIT]

        upcoming_window = DateWindow(now, now + timedelta(days=UPCOMING_BILLS_DAYS))
        upcoming = [
            bill
            for bill in agg.filter_by_window(bills, upcoming_window, date_of=lambda bill: bill.due_date)
            if bill.status == "pending"
        ]
        upcoming.sort(key=lambda bill: bill.due_date)

        return {
            "monthlyTransactions": [group.to_dict() for group in monthly_transactions],
            "billsSummary": [group.to_dict() for group in bills_summary],
            "activeIncome": active_income,
            "netIncome": net_income,
            "recentTransactions": [
                TransactionPublic(**item.model_dump()).model_dump() for item in recent
            ],
            "upcomingBills": [
                BillPublic(
                    **bill.model_dump(),
                    display_name=bill.display_name,
                    days_until_due=bill.days_until_due(now),
                ).model_dump()
                for bill in upcoming[:UPCOMING_BILLS_LIMIT]
            ],
        }

    def spending(self, user_id: str, period: str = DEFAULT_PERIOD, compare_previous: bool = False) -> Dict[str, Any]:
        periods = resolve_period(period, self.now())

        current = self._expenses(user_id, periods.current)
        current_spending = agg.sort_by_total(agg.aggregate(current, agg.by_category, with_avg=True))
        daily_spending = agg.aggregate(current, agg.by_day)

        previous_spending = None
        comparison = None
        if compare_previous:
            previous = self._expenses(user_id, periods.previous)
            previous_groups = agg.aggregate(previous, agg.by_category)
            comparison = compare(current_spending, previous_groups).to_dict()
            previous_spending = [group.to_dict() for group in previous_groups]

        return {
            "period": period,
            "currentSpending": [group.to_dict() for group in current_spending],
            "previousSpending": previous_spending,
            "comparison": comparison,
            "dailySpending": [group.to_dict() for group in daily_spending],
        }

    def trends(self, user_id: str, months: int = DEFAULT_TREND_MONTHS) -> Dict[str, Any]:
        window = DateWindow(months_ago(self.now(), months))
        transactions = self._store.transactions_for_user(user_id, start=window.start)
        rows = build_trend(transactions, window)
        return {
            "trends": [row.to_dict() for row in rows],
            "averages": trend_averages(rows).to_dict(),
            "totalMonths": len(rows),
        }

    def budget(self, user_id: str) -> Dict[str, Any]:
        limits = self._store.budget_limits_for_user(user_id)
        if not limits.has_limits:
            logger.info(f"No budget limits set for user {user_id}")
            return NO_LIMITS.to_dict()

        expenses = self._expenses(user_id, month_window(self.now()))
        category_spend = agg.aggregate(expenses, agg.by_category)
        return analyze_budget(agg.grand_total(category_spend), category_spend, limits).to_dict()

    def health_score(self, user_id: str) -> Dict[str, Any]:
        now = self.now()
        month = month_window(now)

        transactions = self._store.transactions_for_user(user_id, start=month.start, end=month.end)
        by_type = agg.aggregate(transactions, agg.by_type, month)

        bills = self._store.bills_for_user(user_id, active_only=True)
        bill_groups = agg.aggregate(bills, agg.by_status)

        history = DateWindow(month_window(now, offset=-(CONSISTENCY_MONTHS - 1)).start, month.end)
        monthly_expenses = [
            group.total for group in agg.aggregate(self._expenses(user_id, history), agg.by_month)
        ]

        incomes = self._store.incomes_for_user(user_id, active_only=True)

        activity = DateWindow(now - timedelta(days=RECENT_ACTIVITY_DAYS))
        recent = agg.filter_by_window(
            self._store.transactions_for_user(user_id, start=activity.start), activity
        )

        report = score_health(
            income=agg.lookup_total(by_type, "income"),
            expenses=agg.lookup_total(by_type, "expense"),
            bill_status_groups=bill_groups,
            monthly_expenses=monthly_expenses,
            active_income_sources=len(incomes),
            recent_transactions=len(recent),
        )
        return report.to_dict()
