"""
Health Check Router
Liveness and DynamoDB table status
"""
from fastapi import APIRouter, Depends
from datetime import datetime
import logging

from app.core.config import settings
from app.db.dynamo import get_record_store
from app.utils.scheduler import get_scheduler_status

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/status")
def dynamodb_status(store=Depends(get_record_store)):
    """
    Check that every DynamoDB table the reports read from is reachable.
    """
    tables = store.ping()
    connected = all(table["status"] == "accessible" for table in tables.values())
    if not connected:
        failing = [name for name, table in tables.items() if table["status"] != "accessible"]
        logger.error(f"DynamoDB check failed for tables: {', '.join(failing)}")

    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "dynamodb": {
                "connected": connected,
                "region": settings.DYNAMO_REGION,
                "tables": tables,
            },
            "scheduler": get_scheduler_status(),
        },
        "overall_status": "healthy" if connected else "degraded",
    }
