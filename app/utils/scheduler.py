"""
Scheduler Service
Daily bill lifecycle sweep using APScheduler
"""
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.utils.periods import start_of_day

logger = logging.getLogger(__name__)

OVERDUE_SWEEP_JOB_ID = "mark_overdue_bills"

# Scheduler instance
scheduler: Optional[BackgroundScheduler] = None


def mark_overdue_bills_job(store=None, now: Optional[datetime] = None) -> int:
    """Mark active pending bills due before today as overdue."""
    if store is None:
        from app.db.dynamo import record_store as store

    cutoff = start_of_day(now or datetime.utcnow())
    logger.info(f"Running overdue bill sweep (due before {cutoff.isoformat()})...")
    try:
        updated = store.mark_overdue_bills(cutoff)
    except Exception as e:
        logger.error(f"Overdue bill sweep failed: {str(e)}", exc_info=True)
        return 0
    logger.info(f"Overdue bill sweep marked {updated} bill(s) overdue")
    return updated


def start_scheduler():
    """Start the background scheduler with the daily overdue sweep"""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler is already running")
        return

    scheduler = BackgroundScheduler(timezone=settings.SCHEDULER_TIMEZONE)
    scheduler.add_job(
        mark_overdue_bills_job,
        trigger=CronTrigger(
            hour=settings.OVERDUE_SWEEP_HOUR,
            minute=settings.OVERDUE_SWEEP_MINUTE,
            timezone=settings.SCHEDULER_TIMEZONE,
        ),
        id=OVERDUE_SWEEP_JOB_ID,
        name="Mark overdue bills",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started: overdue sweep daily at "
        f"{settings.OVERDUE_SWEEP_HOUR:02d}:{settings.OVERDUE_SWEEP_MINUTE:02d} {settings.SCHEDULER_TIMEZONE}"
    )


def stop_scheduler():
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")


def get_scheduler_status():
    """Get current scheduler status"""
    if scheduler is None:
        return {"running": False}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {
        "running": scheduler.running,
        "jobs": jobs
    }
