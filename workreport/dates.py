import math
from datetime import date, datetime, timedelta
from typing import Callable, Container, Optional, Tuple, Union
from zoneinfo import ZoneInfo

import holidays

from workreport.constants import WEEKDAY_LABELS

DateLike = Union[str, date]

# Bounds the forward search for the next business day (long holiday runs)
_MAX_LOOKAHEAD_DAYS = 31


def to_date(value: DateLike) -> date:
    """
    Accept `date`, `datetime` or an ISO string (timestamps are cut to their
    date part) and return a `date`.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_iso(value: DateLike) -> str:
    return to_date(value).isoformat()


class BusinessCalendar:
    """
    Date helpers pinned to one civil timezone.

    `today()` is the single source of "today" for the whole pipeline so runs
    near midnight never drift between UTC and local time.
    """

    def __init__(
        self,
        tz_name: str = "Asia/Seoul",
        holiday_dates: Optional[Container] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.tz = ZoneInfo(tz_name)
        self.holiday_dates = (
            holiday_dates if holiday_dates is not None else holidays.country_holidays("KR")
        )
        self._clock = clock

    # -------------------------------------------------
    # Today / offsets
    # -------------------------------------------------
    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock().astimezone(self.tz)
        return datetime.now(self.tz)

    def today(self) -> str:
        return self.now().date().isoformat()

    def next_day(self, value: DateLike) -> str:
        return (to_date(value) + timedelta(days=1)).isoformat()

    # -------------------------------------------------
    # Ranges and labels
    # -------------------------------------------------
    def week_number_of_month(self, value: DateLike) -> int:
        d = to_date(value)
        # Sunday-based offset of the 1st (Sunday = 0 ... Saturday = 6)
        first_offset = (d.replace(day=1).weekday() + 1) % 7
        return math.ceil((d.day + first_offset) / 7)

    def week_of_month(self, value: DateLike) -> str:
        d = to_date(value)
        return f"{d.month}월 {self.week_number_of_month(d)}주차"

    def month_range(self, value: DateLike) -> Tuple[str, str]:
        d = to_date(value)
        first = d.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return first.isoformat(), (next_month - timedelta(days=1)).isoformat()

    def week_range(self, value: DateLike) -> Tuple[str, str]:
        """Monday..Sunday of the week containing `value`."""
        d = to_date(value)
        monday = d - timedelta(days=d.weekday())
        return monday.isoformat(), (monday + timedelta(days=6)).isoformat()

    def short_date(self, value: DateLike) -> str:
        """YYYY-MM-DD -> YY.MM.DD"""
        return to_date(value).strftime("%y.%m.%d")

    def weekday_label(self, value: DateLike) -> str:
        return WEEKDAY_LABELS[to_date(value).weekday()]

    # -------------------------------------------------
    # Holidays / business days
    # -------------------------------------------------
    def is_weekend(self, value: DateLike) -> bool:
        return to_date(value).weekday() >= 5

    def is_holiday(self, value: DateLike) -> bool:
        d = to_date(value)
        return self.is_weekend(d) or d in self.holiday_dates

    def is_business_day(self, value: DateLike) -> bool:
        return not self.is_holiday(value)

    def next_business_day(self, value: DateLike) -> str:
        d = to_date(value)
        for _ in range(_MAX_LOOKAHEAD_DAYS):
            d += timedelta(days=1)
            if self.is_business_day(d):
                return d.isoformat()
        raise ValueError(f"No business day within {_MAX_LOOKAHEAD_DAYS} days of {value}")

    def is_last_business_day_of_week(self, value: DateLike) -> bool:
        d = to_date(value)
        if not self.is_business_day(d):
            return False
        nxt = to_date(self.next_business_day(d))
        return nxt.isocalendar()[:2] != d.isocalendar()[:2]

    def is_last_business_day_of_month(self, value: DateLike) -> bool:
        d = to_date(value)
        if not self.is_business_day(d):
            return False
        nxt = to_date(self.next_business_day(d))
        return (nxt.year, nxt.month) != (d.year, d.month)
