from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.categories import (
    ANNUAL_MULTIPLIERS,
    INCOME_FREQUENCIES,
    INCOME_SOURCE_CATEGORIES,
    MONTHLY_MULTIPLIERS,
)
from app.models.common import naive_utc
from app.utils.periods import add_months


class Income(BaseModel):
    """A stored income source as read back for analytics. Parses and normalises only."""

    user_id: str
    income_id: str
    source: str
    amount: float
    frequency: str = "monthly"
    category: str
    start_date: datetime
    next_expected_date: Optional[datetime] = None
    is_active: bool = True

    @field_validator("start_date", "next_expected_date")
    @classmethod
    def _normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(value)

    @property
    def monthly_equivalent(self) -> float:
        return self.amount * MONTHLY_MULTIPLIERS.get(self.frequency, 0)

    @property
    def annual_equivalent(self) -> float:
        return self.amount * ANNUAL_MULTIPLIERS.get(self.frequency, 0)

    def calculate_next_expected_date(self) -> Optional[datetime]:
        if self.frequency == "one-time":
            return None

        current = self.next_expected_date or self.start_date
        if self.frequency == "daily":
            return current + timedelta(days=1)
        if self.frequency == "weekly":
            return current + timedelta(days=7)
        if self.frequency == "bi-weekly":
            return current + timedelta(days=14)
        if self.frequency == "monthly":
            return add_months(current, 1)
        if self.frequency == "quarterly":
            return add_months(current, 3)
        return add_months(current, 12)


class IncomeCreate(Income):
    amount: float = Field(ge=0)

    @field_validator("frequency")
    @classmethod
    def _check_frequency(cls, value: str) -> str:
        if value not in INCOME_FREQUENCIES:
            raise ValueError(f"Invalid income frequency: {value}")
        return value

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str) -> str:
        if value not in INCOME_SOURCE_CATEGORIES:
            raise ValueError(f"Invalid income category: {value}")
        return value
