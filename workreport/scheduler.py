import logging
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from workreport.dates import BusinessCalendar

# -------------------------------------------------
# Logging
# -------------------------------------------------
logger = logging.getLogger("scheduler")
logger.setLevel(logging.INFO)
logger.propagate = True


# -------------------------------------------------
# Scheduler state (SINGLE SOURCE OF TRUTH)
# -------------------------------------------------
_scheduler: Optional[BackgroundScheduler] = None
_run_count: int = 0

JOB_ID = "work_report_job"


# -------------------------------------------------
# Job logic
# -------------------------------------------------
def scheduled_report(job: Callable[[str], object], calendar: BusinessCalendar) -> bool:
    """
    One cron firing. Weekends and holidays are skipped here as well as in the
    report service. Returns True when the job ran without raising.
    """
    global _run_count

    today = calendar.today()
    logger.info(f"⏳ Scheduler triggered for {today}")

    if calendar.is_holiday(today):
        logger.info("🏖️ Weekend or public holiday, skipping this run.")
        return False

    try:
        job(today)
        _run_count += 1
        logger.info(f"✅ Report run finished (run #{_run_count})")
        return True
    except Exception:
        logger.error("❌ Scheduled report run failed", exc_info=True)
        return False


# -------------------------------------------------
# Scheduler bootstrap
# -------------------------------------------------
def start_scheduler(
    job: Callable[[str], object],
    calendar: BusinessCalendar,
    cron_expression: str,
    tz_name: str,
) -> BackgroundScheduler:
    """
    Start scheduler safely (idempotent).
    """
    global _scheduler

    logger.info("🚀 Initializing scheduler")

    if _scheduler and _scheduler.running:
        logger.info("⚠️ Scheduler already running, skipping start")
        return _scheduler

    tz = ZoneInfo(tz_name)
    _scheduler = BackgroundScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": ThreadPoolExecutor(max_workers=1)},
        timezone=tz,
    )

    _scheduler.add_job(
        scheduled_report,
        trigger=CronTrigger.from_crontab(cron_expression, timezone=tz),
        args=[job, calendar],
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,  #  no overlap
        coalesce=True,  #  skip missed runs
    )

    _scheduler.start()

    logger.info(f"🚀 Scheduler running = {_scheduler.running} (cron: {cron_expression}, tz: {tz_name})")
    logger.info(f"📌 Jobs = {[j.id for j in _scheduler.get_jobs()]}")
    return _scheduler


def stop_scheduler():
    global _scheduler

    if _scheduler and _scheduler.running:
        logger.info("🛑 Shutting down scheduler")
        _scheduler.shutdown(wait=True)
    _scheduler = None
