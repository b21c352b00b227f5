import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.categories import BILL_CATEGORIES, BILL_STATUSES, PAYMENT_METHODS
from app.models.common import naive_utc


class PaymentRecord(BaseModel):
    paid_date: Optional[datetime] = None
    amount: Optional[float] = None
    method: Optional[str] = None
    notes: Optional[str] = None


class Bill(BaseModel):
    """A stored bill as read back for analytics. Parses and normalises only."""

    user_id: str
    bill_id: str
    title: str
    amount: float
    category: str
    custom_label: Optional[str] = None
    due_date: datetime
    frequency: str = "monthly"
    status: str = "pending"
    payment_method: str = "other"
    is_active: bool = True
    payment_history: List[PaymentRecord] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: datetime) -> datetime:
        return naive_utc(value)

    @property
    def display_name(self) -> str:
        if self.category == "custom" and self.custom_label:
            return self.custom_label
        return self.title

    def days_until_due(self, now: datetime) -> int:
        return math.ceil((self.due_date - now).total_seconds() / 86400)

    def is_overdue(self, now: datetime) -> bool:
        return self.status == "pending" and self.due_date < now


class BillCreate(Bill):
    amount: float = Field(ge=0)
    custom_label: Optional[str] = Field(default=None, max_length=40)

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str) -> str:
        if value not in BILL_CATEGORIES:
            raise ValueError(f"Invalid bill category: {value}")
        return value

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str) -> str:
        if value not in BILL_STATUSES:
            raise ValueError(f"Invalid bill status: {value}")
        return value

    @field_validator("payment_method")
    @classmethod
    def _check_payment_method(cls, value: str) -> str:
        if value not in PAYMENT_METHODS:
            raise ValueError(f"Invalid payment method: {value}")
        return value

    @model_validator(mode="after")
    def _require_custom_label(self) -> "BillCreate":
        if self.category == "custom" and not self.custom_label:
            raise ValueError('Custom label is required when category is "custom"')
        return self


class BillPublic(BaseModel):
    bill_id: str
    title: str
    display_name: str
    amount: float
    category: str
    custom_label: Optional[str] = None
    due_date: datetime
    days_until_due: int
    frequency: str
    status: str
