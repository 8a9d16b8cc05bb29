"""
Work report job - Notion task database -> daily/weekly/monthly report pages
"""

import logging
import signal
import threading

from workreport import config
from workreport.dates import BusinessCalendar
from workreport.logging_config import setup_logging
from workreport.members import MemberDirectory
from workreport.notion import NotionClient
from workreport.report_service import ReportService
from workreport.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger("main")


def build_service() -> ReportService:
    calendar = BusinessCalendar(config.CRON_TIMEZONE)
    directory = MemberDirectory.load(config.MEMBERS_FILE)
    logger.info(f"👥 Loaded {len(directory)} members from {config.MEMBERS_FILE}")

    return ReportService(
        store=NotionClient(),
        directory=directory,
        calendar=calendar,
        team_name=config.REPORT_TEAM_NAME,
        effort_property=config.EFFORT_PROPERTY,
        effort_unit=config.EFFORT_UNIT,
        daily_work_hours=config.DAILY_WORK_HOURS,
    )


def main():
    setup_logging()
    config.validate()

    service = build_service()
    stop = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, stopping")
        stop.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    start_scheduler(
        service.generate_and_save_reports,
        service.calendar,
        config.CRON_SCHEDULE,
        config.CRON_TIMEZONE,
    )
    try:
        stop.wait()
    finally:
        stop_scheduler()


if __name__ == "__main__":
    main()
