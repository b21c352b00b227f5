"""
Financial health score.

Five independently scored factors add up to at most 100 points:

    Savings Rate            30   needs income this month
    Bill Payments           25   needs at least one active bill
    Spending Consistency    20   needs three months of expense history
    Income Diversification  15
    Tracking Activity       10

A factor whose precondition is not met is left out of the report entirely;
it neither adds points nor produces a recommendation.
"""
from __future__ import annotations

import math
import statistics
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from app.utils.aggregation import GroupTotal, lookup_count, round0
from app.utils.trends import savings_rate

SAVINGS_RATE = "Savings Rate"
BILL_PAYMENTS = "Bill Payments"
SPENDING_CONSISTENCY = "Spending Consistency"
INCOME_DIVERSIFICATION = "Income Diversification"
TRACKING_ACTIVITY = "Tracking Activity"

RECOMMENDATIONS: Dict[str, str] = {
    SAVINGS_RATE: "Consider reducing unnecessary expenses to improve your savings rate",
    BILL_PAYMENTS: "Set up automatic bill payments to avoid late fees and improve your payment history",
    SPENDING_CONSISTENCY: "Create a monthly budget to maintain consistent spending patterns",
    INCOME_DIVERSIFICATION: "Consider developing additional income streams to reduce financial risk",
    TRACKING_ACTIVITY: "Record your transactions regularly to maintain better financial awareness",
}

LOW_STATUSES = ("poor", "fair")

# (minimum value, points, status), checked top-down; the last entry is the floor.
SAVINGS_RATE_TIERS: Sequence[Tuple[float, int, str]] = (
    (20, 30, "excellent"),
    (10, 20, "good"),
    (0, 10, "fair"),
    (-math.inf, 0, "poor"),
)
CONSISTENCY_TIERS: Sequence[Tuple[float, int, str]] = (
    (80, 20, "excellent"),
    (60, 15, "good"),
    (40, 8, "fair"),
    (-math.inf, 0, "poor"),
)
DIVERSIFICATION_TIERS: Sequence[Tuple[float, int, str]] = (
    (3, 15, "excellent"),
    (2, 10, "good"),
    (1, 5, "fair"),
    (-math.inf, 0, "poor"),
)
ACTIVITY_TIERS: Sequence[Tuple[float, int, str]] = (
    (10, 10, "excellent"),
    (5, 7, "good"),
    (1, 3, "fair"),
    (-math.inf, 0, "poor"),
)
RATING_TIERS: Sequence[Tuple[int, str]] = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
)

CONSISTENCY_MONTHS = 3
RECENT_ACTIVITY_DAYS = 30


@dataclass
class HealthFactor:
    name: str
    score: int
    status: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HealthReport:
    score: int
    rating: str
    factors: List[HealthFactor] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "rating": self.rating,
            "factors": [factor.to_dict() for factor in self.factors],
            "recommendations": list(self.recommendations),
        }


def _tier(value: float, tiers: Sequence[Tuple[float, int, str]]) -> Tuple[int, str]:
    for minimum, points, status in tiers:
        if value >= minimum:
            return points, status
    return 0, "poor"


def savings_rate_factor(income: float, expenses: float) -> Optional[HealthFactor]:
    if income <= 0:
        return None
    rate = savings_rate(income, expenses)
    points, status = _tier(rate, SAVINGS_RATE_TIERS)
    return HealthFactor(SAVINGS_RATE, points, status, f"{round0(rate)}%")


def bill_payments_factor(bill_status_groups: Iterable[GroupTotal]) -> Optional[HealthFactor]:
    groups = list(bill_status_groups)
    total_bills = sum(group.count for group in groups)
    if total_bills == 0:
        return None

    paid = lookup_count(groups, "paid")
    overdue = lookup_count(groups, "overdue")
    payment_rate = paid / total_bills * 100

    if overdue == 0 and payment_rate >= 90:
        points, status = 25, "excellent"
    elif overdue <= 1:
        points, status = 15, "good"
    elif overdue <= 3:
        points, status = 8, "fair"
    else:
        points, status = 0, "poor"
    return HealthFactor(BILL_PAYMENTS, points, status, f"{overdue} overdue")


def spending_consistency(monthly_expenses: Sequence[float]) -> float:
    """(1 - population std-dev / mean) * 100, or 0 when nothing was spent."""
    mean = statistics.fmean(monthly_expenses)
    if mean <= 0:
        return 0
    return (1 - statistics.pstdev(monthly_expenses) / mean) * 100


def spending_consistency_factor(monthly_expenses: Sequence[float]) -> Optional[HealthFactor]:
    if len(monthly_expenses) < CONSISTENCY_MONTHS:
        return None
    consistency = spending_consistency(monthly_expenses)
    points, status = _tier(consistency, CONSISTENCY_TIERS)
    return HealthFactor(SPENDING_CONSISTENCY, points, status, f"{round0(consistency)}%")


def income_diversification_factor(active_sources: int) -> HealthFactor:
    points, status = _tier(active_sources, DIVERSIFICATION_TIERS)
    if active_sources == 0:
        value = "No income sources"
    elif active_sources == 1:
        value = "1 source"
    else:
        value = f"{active_sources} sources"
    return HealthFactor(INCOME_DIVERSIFICATION, points, status, value)


def tracking_activity_factor(recent_transactions: int) -> HealthFactor:
    points, status = _tier(recent_transactions, ACTIVITY_TIERS)
    if recent_transactions == 0:
        value = "No recent activity"
    else:
        value = f"{recent_transactions} recent transactions"
    return HealthFactor(TRACKING_ACTIVITY, points, status, value)


def rating_for(score: int) -> str:
    for minimum, rating in RATING_TIERS:
        if score >= minimum:
            return rating
    return "poor"


def recommendations_for(factors: Iterable[HealthFactor]) -> List[str]:
    return [RECOMMENDATIONS[factor.name] for factor in factors if factor.status in LOW_STATUSES]


def score_health(
    income: float,
    expenses: float,
    bill_status_groups: Iterable[GroupTotal],
    monthly_expenses: Sequence[float],
    active_income_sources: int,
    recent_transactions: int,
) -> HealthReport:
    candidates = [
        savings_rate_factor(income, expenses),
        bill_payments_factor(bill_status_groups),
        spending_consistency_factor(monthly_expenses),
        income_diversification_factor(active_income_sources),
        tracking_activity_factor(recent_transactions),
    ]
    factors = [factor for factor in candidates if factor is not None]
    score = sum(factor.score for factor in factors)
    return HealthReport(
        score=score,
        rating=rating_for(score),
        factors=factors,
        recommendations=recommendations_for(factors),
    )
