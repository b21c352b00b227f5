from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token, get_current_user_id
from app.db.dynamo import RecordStoreError
from app.main import app
from app.models.user import BudgetLimits, CategoryLimit
from app.routers.analytics import get_finance_analyzer
from app.utils.analyzer import FinanceAnalyzer

from conftest import NOW, USER_ID, FakeRecordStore, expense, income, make_bill

PREFIX = "/api/analytics"


class BrokenStore(FakeRecordStore):
    def transactions_for_user(self, *args, **kwargs):
        raise RecordStoreError("transactions query failed")

    def bills_for_user(self, *args, **kwargs):
        raise RecordStoreError("bills query failed")

    def budget_limits_for_user(self, *args, **kwargs):
        raise RecordStoreError("user lookup failed")


@pytest.fixture
def store():
    return FakeRecordStore(
        transactions=[
            income(3000.0, "salary", NOW - timedelta(minutes=30)),
            expense(2000.0, "housing", NOW - timedelta(minutes=20)),
        ],
        bills=[make_bill(status="paid", due_date=NOW - timedelta(days=5))],
        budget_limits=BudgetLimits(categories=[CategoryLimit(name="housing", limit=1500)]),
    )


@pytest.fixture
def client(store):
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_finance_analyzer] = lambda: FinanceAnalyzer(store, clock=lambda: NOW)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_dashboard_envelope(client):
    response = client.get(f"{PREFIX}/dashboard")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["netIncome"] == 1000.0
    assert body["data"]["activeIncome"] == {"totalMonthly": 0, "count": 0}


def test_spending_compare_flag(client):
    body = client.get(f"{PREFIX}/spending", params={"period": "week"}).json()
    assert body["data"]["previousSpending"] is None
    assert body["data"]["comparison"] is None

    body = client.get(f"{PREFIX}/spending", params={"period": "week", "compare": "true"}).json()
    assert body["data"]["comparison"]["previousTotal"] == 0
    assert body["data"]["comparison"]["changePercent"] == 0


def test_trends_rejects_out_of_range_months(client):
    assert client.get(f"{PREFIX}/trends", params={"months": 0}).status_code == 422
    body = client.get(f"{PREFIX}/trends", params={"months": 6}).json()
    assert body["data"]["totalMonths"] >= 1


def test_budget_report(client):
    body = client.get(f"{PREFIX}/budget").json()
    assert body["data"]["hasLimits"] is True
    assert body["data"]["categories"][0]["remaining"] == 0


def test_budget_without_limits_carries_message(client, store):
    store.limits = BudgetLimits()
    body = client.get(f"{PREFIX}/budget").json()
    assert body == {"status": "success", "data": {"hasLimits": False}, "message": "No budget limits set"}


def test_health_score_and_alias(client):
    first = client.get(f"{PREFIX}/health-score").json()
    second = client.get(f"{PREFIX}/financial-health").json()
    assert first == second
    assert first["data"]["rating"] in {"excellent", "good", "fair", "poor"}
    names = [factor["name"] for factor in first["data"]["factors"]]
    assert names[:2] == ["Savings Rate", "Bill Payments"]


@pytest.mark.parametrize(
    "path, message",
    [
        ("/dashboard", "Failed to get dashboard analytics"),
        ("/spending", "Failed to get spending analytics"),
        ("/trends", "Failed to get income vs expense trends"),
        ("/budget", "Failed to get budget analysis"),
        ("/health-score", "Failed to get financial health score"),
    ],
)
def test_store_failure_returns_error_envelope(path, message):
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_finance_analyzer] = lambda: FinanceAnalyzer(BrokenStore())
    try:
        response = TestClient(app).get(f"{PREFIX}{path}")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": message}



class FailingSpendStore(FakeRecordStore):
    def transactions_for_user(self, *args, **kwargs):
        raise RecordStoreError("transactions query failed")


def test_budget_spend_failure_returns_error_envelope():
    limited = FailingSpendStore(budget_limits=BudgetLimits(monthly=1000))
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_finance_analyzer] = lambda: FinanceAnalyzer(limited, clock=lambda: NOW)
    try:
        response = TestClient(app).get(f"{PREFIX}/budget")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Failed to get budget analysis"}

def test_missing_token_is_rejected():
    response = TestClient(app).get(f"{PREFIX}/dashboard")
    assert response.status_code == 401


def test_valid_token_reaches_the_report(store):
    app.dependency_overrides[get_finance_analyzer] = lambda: FinanceAnalyzer(store, clock=lambda: NOW)
    token = create_access_token({"sub": USER_ID})
    try:
        response = TestClient(app).get(
            f"{PREFIX}/health-score", headers={"Authorization": f"Bearer {token}"}
        )
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 200


def test_invalid_token_is_rejected():
    response = TestClient(app).get(
        f"{PREFIX}/dashboard", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_liveness():
    body = TestClient(app).get("/api/health").json()
    assert body["status"] == "healthy"
