from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.models.user import BudgetLimits
from app.utils.aggregation import GroupTotal, lookup_total


@dataclass
class BudgetLine:
    limit: float
    spent: float

    @property
    def remaining(self) -> float:
        return max(0, self.limit - self.spent)

    @property
    def percentage(self) -> float:
        # A zero limit reports 0% even when money was spent against it.
        if self.limit > 0:
            return self.spent / self.limit * 100
        return 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "limit": self.limit,
            "spent": self.spent,
            "remaining": self.remaining,
            "percentage": self.percentage,
        }


@dataclass
class BudgetReport:
    has_limits: bool
    monthly: Optional[BudgetLine] = None
    categories: List[Tuple[str, BudgetLine]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if not self.has_limits:
            return {"hasLimits": False}
        return {
            "hasLimits": True,
            "monthly": self.monthly.to_dict(),
            "categories": [
                {"category": name, **line.to_dict()} for name, line in self.categories
            ],
        }


NO_LIMITS = BudgetReport(has_limits=False)


def analyze_budget(
    monthly_spent: float,
    category_spend: Iterable[GroupTotal],
    limits: BudgetLimits,
) -> BudgetReport:
    """
    Compare this month's spend with the user's limits.
    Only categories that carry a configured limit are reported.
    """
    if not limits.has_limits:
        return NO_LIMITS

    category_spend = list(category_spend)
    categories = [
        (entry.name, BudgetLine(limit=entry.limit, spent=lookup_total(category_spend, entry.name)))
        for entry in limits.categories
    ]
    return BudgetReport(
        has_limits=True,
        monthly=BudgetLine(limit=limits.monthly or 0, spent=monthly_spent),
        categories=categories,
    )
