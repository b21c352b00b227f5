from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.categories import PAYMENT_METHODS, TRANSACTION_TYPES, categories_for_type
from app.models.common import naive_utc


class Transaction(BaseModel):
    """A stored transaction as read back for analytics. Parses and normalises only."""

    user_id: str
    transaction_id: str
    type: str
    amount: float
    category: str
    description: Optional[str] = ""
    date: datetime
    payment_method: str = "other"
    tags: List[str] = Field(default_factory=list)
    related_bill_id: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return naive_utc(value)


class TransactionCreate(Transaction):
    amount: float = Field(ge=0)

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid transaction type: {value}")
        return value

    @field_validator("payment_method")
    @classmethod
    def _check_payment_method(cls, value: str) -> str:
        if value not in PAYMENT_METHODS:
            raise ValueError(f"Invalid payment method: {value}")
        return value

    @model_validator(mode="after")
    def _check_category_matches_type(self) -> "TransactionCreate":
        if self.category not in categories_for_type(self.type):
            raise ValueError(f"Invalid category for {self.type} transaction")
        return self


class TransactionPublic(BaseModel):
    transaction_id: str
    type: str
    amount: float
    category: str
    description: Optional[str] = ""
    date: datetime
    payment_method: str
    tags: List[str] = Field(default_factory=list)
    related_bill_id: Optional[str] = None
