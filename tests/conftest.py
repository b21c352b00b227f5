from collections import Counter
from datetime import datetime, timedelta
from itertools import count

import pytest

from app.models.bill import Bill
from app.models.income import Income
from app.models.transaction import Transaction
from app.models.user import BudgetLimits

USER_ID = "user-1"
NOW = datetime(2025, 11, 15, 12, 0, 0)

_ids = count(1)


def make_transaction(type_, amount, category, date, user_id=USER_ID):
    return Transaction(
        user_id=user_id,
        transaction_id=f"{date.isoformat()}#{next(_ids)}",
        type=type_,
        amount=amount,
        category=category,
        description=f"{category} {amount}",
        date=date,
    )


def expense(amount, category, date, **kwargs):
    return make_transaction("expense", amount, category, date, **kwargs)


def income(amount, category, date, **kwargs):
    return make_transaction("income", amount, category, date, **kwargs)


def make_bill(status="pending", amount=50.0, due_date=NOW + timedelta(days=3), is_active=True, **kwargs):
    fields = dict(
        user_id=USER_ID,
        bill_id=f"bill-{next(_ids)}",
        title="Electricity",
        amount=amount,
        category="utilities",
        due_date=due_date,
        status=status,
        is_active=is_active,
    )
    fields.update(kwargs)
    return Bill(**fields)


def make_income(amount=3000.0, frequency="monthly", is_active=True, **kwargs):
    fields = dict(
        user_id=USER_ID,
        income_id=f"income-{next(_ids)}",
        source="Acme Corp",
        amount=amount,
        frequency=frequency,
        category="salary",
        start_date=datetime(2025, 1, 1),
        is_active=is_active,
    )
    fields.update(kwargs)
    return Income(**fields)


class FakeRecordStore:
    """In-memory stand-in for DynamoRecordStore with the same read methods."""

    def __init__(self, transactions=(), bills=(), incomes=(), budget_limits=None):
        self.transactions = list(transactions)
        self.bills = list(bills)
        self.incomes = list(incomes)
        self.limits = budget_limits or BudgetLimits()
        self.calls = Counter()

    def transactions_for_user(self, user_id, start=None, end=None, transaction_type=None):
        self.calls["transactions_for_user"] += 1
        return [
            item
            for item in self.transactions
            if item.user_id == user_id
            and (start is None or item.date >= start)
            and (end is None or item.date <= end)
            and (transaction_type is None or item.type == transaction_type)
        ]

    def recent_transactions(self, user_id, limit=5):
        self.calls["recent_transactions"] += 1
        mine = [item for item in self.transactions if item.user_id == user_id]
        return sorted(mine, key=lambda item: item.date, reverse=True)[:limit]

    def bills_for_user(self, user_id, active_only=True):
        self.calls["bills_for_user"] += 1
        return [b for b in self.bills if b.user_id == user_id and (b.is_active or not active_only)]

    def incomes_for_user(self, user_id, active_only=True):
        self.calls["incomes_for_user"] += 1
        return [i for i in self.incomes if i.user_id == user_id and (i.is_active or not active_only)]

    def budget_limits_for_user(self, user_id):
        self.calls["budget_limits_for_user"] += 1
        return self.limits


@pytest.fixture
def fake_store():
    return FakeRecordStore()
