"""
Category and enum tables shared by the record models and the analytics code.
"""
from typing import Dict, Tuple

TRANSACTION_TYPES: Tuple[str, ...] = ("income", "expense")

INCOME_CATEGORIES: Tuple[str, ...] = (
    "salary",
    "freelance",
    "business",
    "investment",
    "rental",
    "gift",
    "bonus",
    "other_income",
)

EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "food",
    "transportation",
    "housing",
    "utilities",
    "healthcare",
    "education",
    "entertainment",
    "shopping",
    "travel",
    "insurance",
    "debt_payment",
    "savings",
    "investment_expense",
    "other_expense",
)

CATEGORIES_BY_TYPE: Dict[str, Tuple[str, ...]] = {
    "income": INCOME_CATEGORIES,
    "expense": EXPENSE_CATEGORIES,
}

BILL_CATEGORIES: Tuple[str, ...] = (
    "utilities",
    "rent",
    "insurance",
    "subscriptions",
    "internet",
    "phone",
    "food",
    "transportation",
    "healthcare",
    "entertainment",
    "other",
    "custom",
)

BILL_STATUSES: Tuple[str, ...] = ("pending", "paid", "overdue", "cancelled")

INCOME_SOURCE_CATEGORIES: Tuple[str, ...] = (
    "salary",
    "freelance",
    "business",
    "investment",
    "rental",
    "pension",
    "social_security",
    "unemployment",
    "bonus",
    "commission",
    "royalty",
    "gift",
    "tax_refund",
    "other",
)

INCOME_FREQUENCIES: Tuple[str, ...] = (
    "one-time",
    "daily",
    "weekly",
    "bi-weekly",
    "monthly",
    "quarterly",
    "yearly",
)

MONTHLY_MULTIPLIERS: Dict[str, float] = {
    "daily": 30,
    "weekly": 4.33,
    "bi-weekly": 2.17,
    "monthly": 1,
    "quarterly": 1 / 3,
    "yearly": 1 / 12,
    "one-time": 0,
}

ANNUAL_MULTIPLIERS: Dict[str, float] = {
    "daily": 365,
    "weekly": 52,
    "bi-weekly": 26,
    "monthly": 12,
    "quarterly": 4,
    "yearly": 1,
    "one-time": 0,
}

PAYMENT_METHODS: Tuple[str, ...] = (
    "cash",
    "credit_card",
    "debit_card",
    "bank_transfer",
    "online",
    "check",
    "other",
)


def categories_for_type(transaction_type: str) -> Tuple[str, ...]:
    return CATEGORIES_BY_TYPE.get(transaction_type, ())
