"""
Report pipeline value types.

Every value here is request-scoped: built from the fetched pages on each run
and thrown away afterwards.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class SectionType(str, Enum):
    IN_PROGRESS = "진행업무"
    PLANNED = "예정업무"
    COMPLETED = "완료업무"


@dataclass
class DateRange:
    start: str = ""
    end: Optional[str] = None


@dataclass
class TaskRecord:
    title: str = ""
    customer: str = ""
    group: str = ""
    sub_group: str = ""
    person: str = ""
    progress_rate: float = 0
    date: DateRange = field(default_factory=DateRange)
    is_today: bool = False
    is_tomorrow: bool = False
    effort: float = 0
    external_id: Optional[int] = None
    external_link: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.date.start and self.group and self.sub_group and self.person)

    @property
    def reference_date(self) -> str:
        """End date when present, otherwise start date."""
        return self.date.end or self.date.start or ""

    def copy(self) -> "TaskRecord":
        return copy.deepcopy(self)


@dataclass
class SubGroupItems:
    sub_group: str
    items: List[TaskRecord] = field(default_factory=list)


@dataclass
class GroupedReport:
    group: str
    sub_groups: List[SubGroupItems] = field(default_factory=list)


@dataclass
class ReportSection:
    type: SectionType
    groups: List[GroupedReport] = field(default_factory=list)


@dataclass
class LeaveEntry:
    date: str
    day_of_week: str
    kind: str


@dataclass
class PersonSummary:
    name: str
    total_effort: float
    records: List[TaskRecord] = field(default_factory=list)
    is_complete: Optional[bool] = None
    leave_info: List[LeaveEntry] = field(default_factory=list)


GroupSummary = Dict[str, float]


@dataclass
class ReportPayload:
    report_type: ReportType
    date: str
    title: str
    sections: List[ReportSection]
    text: str
    effort_text: str
    group_effort_text: str
    person_summaries: List[PersonSummary] = field(default_factory=list)
    record_count: int = 0


@dataclass
class ReportRun:
    date: str
    payloads: Dict[ReportType, ReportPayload] = field(default_factory=dict)
    errors: Dict[ReportType, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors
