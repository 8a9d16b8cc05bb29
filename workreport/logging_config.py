import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from workreport.config import CRON_TIMEZONE


class CivilTimeFormatter(logging.Formatter):
    """Render record timestamps in the report timezone, not the host's."""

    def __init__(self, fmt=None, datefmt=None, tz_name=CRON_TIMEZONE):
        super().__init__(fmt, datefmt)
        self.tz = ZoneInfo(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        return dt.strftime(datefmt or "%Y-%m-%d %H:%M:%S")


def setup_logging(level=logging.INFO):
    formatter = CivilTimeFormatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        "%H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )
