import logging
from typing import List

from workreport.dates import BusinessCalendar

logger = logging.getLogger("fetcher")

PERSON_NOT_EMPTY = {"property": "Person", "people": {"is_not_empty": True}}

NEWEST_FIRST = [{"timestamp": "created_time", "direction": "descending"}]


def _formula_true(prop: str) -> dict:
    return {"property": prop, "formula": {"checkbox": {"equals": True}}}


def _date_between(first: str, last: str) -> List[dict]:
    return [
        {"property": "Date", "date": {"on_or_after": first}},
        {"property": "Date", "date": {"on_or_before": last}},
    ]


class RecordFetcher:
    """The canned source-database queries, one per report tier."""

    def __init__(self, store, calendar: BusinessCalendar):
        self.store = store
        self.calendar = calendar

    def _run(self, label: str, filter: dict) -> List[dict]:
        try:
            pages = self.store.query_all(filter, NEWEST_FIRST)
        except Exception:
            logger.error(f"❌ {label} query failed", exc_info=True)
            raise
        logger.info(f"📥 {label} query returned {len(pages)} pages")
        return pages

    def fetch_daily(self) -> List[dict]:
        """Pages flagged for today's progress or tomorrow's plan."""
        filter = {
            "and": [
                {"or": [_formula_true("isToday"), _formula_true("isTomorrow")]},
                PERSON_NOT_EMPTY,
            ]
        }
        return self._run("Daily", filter)

    def fetch_weekly(self, date: str) -> List[dict]:
        first, last = self.calendar.week_range(date)
        filter = {"and": [PERSON_NOT_EMPTY, *_date_between(first, last)]}
        return self._run("Weekly", filter)

    def fetch_monthly(self, date: str) -> List[dict]:
        first, last = self.calendar.month_range(date)
        filter = {"and": [PERSON_NOT_EMPTY, *_date_between(first, last)]}
        return self._run("Monthly", filter)
