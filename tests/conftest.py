from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from workreport.dates import BusinessCalendar
from workreport.members import MemberDirectory
from workreport.models import DateRange, TaskRecord

SEOUL = ZoneInfo("Asia/Seoul")

# Fixed holiday set so the tests do not depend on the installed holidays data
HOLIDAYS_2025 = {
    date(2025, 10, 3),
    date(2025, 10, 6),
    date(2025, 10, 7),
    date(2025, 10, 8),
    date(2025, 10, 9),
    date(2025, 12, 25),
}

MEMBERS = {
    "a@example.com": {"name": "A", "priority": 1},
    "b@example.com": {"name": "B", "priority": 2},
    "c@example.com": {"name": "C", "priority": 0},
}


@pytest.fixture
def directory():
    return MemberDirectory(MEMBERS)


def make_calendar(today: str = "2025-10-02") -> BusinessCalendar:
    y, m, d = (int(p) for p in today.split("-"))
    now = datetime(y, m, d, 17, 30, tzinfo=SEOUL)
    return BusinessCalendar("Asia/Seoul", holiday_dates=HOLIDAYS_2025, clock=lambda: now)


@pytest.fixture
def calendar():
    return make_calendar()


def make_record(**overrides) -> TaskRecord:
    fields = dict(
        title="Task",
        customer="",
        group="Dev",
        sub_group="분석",
        person="A",
        progress_rate=50,
        date=DateRange(start="2025-10-02"),
        is_today=True,
        is_tomorrow=False,
        effort=1,
    )
    fields.update(overrides)
    return TaskRecord(**fields)


def make_page(
    title="Task",
    group="Dev",
    sub_group="분석",
    people=("a@example.com",),
    progress=0.5,
    start="2025-10-02",
    end=None,
    is_today=True,
    is_tomorrow=False,
    effort=1,
    customer=None,
    pms=None,
    pms_link=None,
    page_id="page",
):
    props = {
        "Name": {"title": [{"plain_text": title}]},
        "Group": {"select": {"name": group} if group else None},
        "SubGroup": {"select": {"name": sub_group} if sub_group else None},
        "Customer": {"select": {"name": customer} if customer else None},
        "Person": {"people": [{"person": {"email": e}} for e in people]},
        "Progress": {"number": progress},
        "Date": {"date": {"start": start, "end": end} if start else None},
        "isToday": {"formula": {"boolean": is_today}},
        "isTomorrow": {"formula": {"boolean": is_tomorrow}},
        "ManHour": {"number": effort},
        "PmsNumber": {"number": pms},
        "PmsLink": {"formula": {"string": pms_link}},
    }
    return {"id": page_id, "properties": props}


class FakeStore:
    """In-memory stand-in for NotionClient."""

    def __init__(self, pages=None, fail_queries=0, fail_creates=()):
        self.pages = list(pages or [])
        self.queries = []
        self.created = []
        self.appended = []
        self.fail_queries = fail_queries
        self.fail_creates = set(fail_creates)

    def query_all(self, filter=None, sorts=None):
        self.queries.append((filter, sorts))
        if len(self.queries) <= self.fail_queries:
            raise RuntimeError("query failed")
        return list(self.pages)

    def create_page(self, properties, children, icon=None):
        tag = properties.get("Tags", {}).get("select", {}).get("name")
        if tag in self.fail_creates:
            raise RuntimeError(f"create failed for {tag}")
        page_id = f"page-{len(self.created) + 1}"
        self.created.append(
            {"id": page_id, "properties": properties, "children": children, "icon": icon}
        )
        return {"id": page_id}

    def append_blocks(self, page_id, blocks):
        self.appended.append((page_id, blocks))


@pytest.fixture
def store():
    return FakeStore()
