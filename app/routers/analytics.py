"""
Analytics Router
Dashboard, spending, trends, budget and financial health reports
"""
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.core.security import get_current_user_id
from app.db.dynamo import get_record_store
from app.utils.analyzer import DEFAULT_TREND_MONTHS, FinanceAnalyzer
from app.utils.periods import DEFAULT_PERIOD

router = APIRouter()
logger = logging.getLogger(__name__)


def get_finance_analyzer(store=Depends(get_record_store)) -> FinanceAnalyzer:
    return FinanceAnalyzer(store)


def _success(data: Dict[str, Any], message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return body


def _run_report(name: str, failure_message: str, build: Callable[[], Dict[str, Any]], user_id: str):
    """Build a report or return the error envelope; no partial results."""
    try:
        return build()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"{name} report failed for user {user_id}: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"status": "error", "message": failure_message})


@router.get("/dashboard")
def get_dashboard_analytics(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_finance_analyzer),
):
    return _run_report(
        "dashboard",
        "Failed to get dashboard analytics",
        lambda: _success(analyzer.dashboard(user_id)),
        user_id,
    )


@router.get("/spending")
def get_spending_analytics(
    period: str = Query(DEFAULT_PERIOD, description="week, month or year"),
    compare: bool = Query(False, description="Include the previous period and a comparison"),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_finance_analyzer),
):
    return _run_report(
        "spending",
        "Failed to get spending analytics",
        lambda: _success(analyzer.spending(user_id, period=period, compare_previous=compare)),
        user_id,
    )


@router.get("/trends")
def get_income_vs_expense_trends(
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=120),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_finance_analyzer),
):
    return _run_report(
        "trends",
        "Failed to get income vs expense trends",
        lambda: _success(analyzer.trends(user_id, months=months)),
        user_id,
    )


@router.get("/budget")
def get_budget_analysis(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_finance_analyzer),
):
    def build():
        data = analyzer.budget(user_id)
        message = None if data["hasLimits"] else "No budget limits set"
        return _success(data, message)

    return _run_report("budget", "Failed to get budget analysis", build, user_id)


@router.get("/health-score")
@router.get("/financial-health")  # path used by the mobile client
def get_financial_health_score(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinanceAnalyzer = Depends(get_finance_analyzer),
):
    return _run_report(
        "health score",
        "Failed to get financial health score",
        lambda: _success(analyzer.health_score(user_id)),
        user_id,
    )
