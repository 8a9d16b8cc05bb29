"""
Report aggregation: day-window partitioning, group/subgroup hierarchies and
effort summaries.

All orderings here are total so the same fetched data always renders to the
same text regardless of the order the store returned it in.
"""

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from workreport.constants import (
    INSUFFICIENT_DATA_GROUP,
    LEAVE_SUB_GROUPS,
    PLACEHOLDER,
    PRIORITY_GROUP,
    SITE_SUPPORT_GROUP,
    SPECIAL_GROUPS,
    SUB_GROUP_ORDER,
)
from workreport.dates import BusinessCalendar, to_date
from workreport.members import MemberDirectory
from workreport.models import (
    GroupedReport,
    GroupSummary,
    LeaveEntry,
    PersonSummary,
    ReportSection,
    SectionType,
    SubGroupItems,
    TaskRecord,
)


class UnknownSubGroupOrder(Enum):
    """Where subgroups missing from SUB_GROUP_ORDER are placed."""

    FIRST = "first"  # legacy placement (before every listed subgroup)
    LAST = "last"


# =================================================
# Completeness / day windows
# =================================================
@dataclass
class DayPartition:
    complete_today: List[TaskRecord] = field(default_factory=list)
    complete_tomorrow: List[TaskRecord] = field(default_factory=list)
    incomplete_today: List[TaskRecord] = field(default_factory=list)
    incomplete_tomorrow: List[TaskRecord] = field(default_factory=list)


def split_complete(
    records: Iterable[TaskRecord],
) -> Tuple[List[TaskRecord], List[TaskRecord]]:
    complete, incomplete = [], []
    for r in records:
        (complete if r.is_complete else incomplete).append(r)
    return complete, incomplete


def rolls_over(record: TaskRecord, today: str) -> bool:
    """An unfinished task due today is carried into tomorrow's plan."""
    return record.reference_date == today and record.progress_rate < 100


def partition_by_day(records: Sequence[TaskRecord], today: str) -> DayPartition:
    complete_today, incomplete_today = split_complete(r for r in records if r.is_today)
    complete_tomorrow, incomplete_tomorrow = split_complete(
        r for r in records if r.is_tomorrow
    )

    seen = {id(r) for r in complete_tomorrow}
    for r in complete_today:
        if rolls_over(r, today) and id(r) not in seen:
            complete_tomorrow.append(r)
            seen.add(id(r))

    return DayPartition(
        complete_today=complete_today,
        complete_tomorrow=complete_tomorrow,
        incomplete_today=incomplete_today,
        incomplete_tomorrow=incomplete_tomorrow,
    )


def split_monthly(
    records: Iterable[TaskRecord],
) -> Tuple[List[TaskRecord], List[TaskRecord]]:
    """(in progress: 0 < p < 100, completed: p == 100). Untouched tasks are in neither."""
    in_progress, completed = [], []
    for r in records:
        if r.progress_rate >= 100:
            completed.append(r)
        elif r.progress_rate > 0:
            in_progress.append(r)
    return in_progress, completed


# =================================================
# Ordering
# =================================================
def _text_key(value: str) -> Tuple[str, str]:
    # case-insensitive first, exact text breaks ties
    value = value or ""
    return value.casefold(), value


def group_sort_key(group: str) -> Tuple[int, int, Tuple[str, str]]:
    if group == PRIORITY_GROUP:
        return 0, 0, ("", "")
    if group in SPECIAL_GROUPS:
        return 2, SPECIAL_GROUPS.index(group), ("", "")
    return 1, 0, _text_key(group)


def sub_group_sort_key(
    name: str, policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST
) -> Tuple[int, int, Tuple[str, str]]:
    if name in SUB_GROUP_ORDER:
        return 1, SUB_GROUP_ORDER.index(name), ("", "")
    if policy is UnknownSubGroupOrder.FIRST:
        return 0, 0, _text_key(name)
    return 2, 0, _text_key(name)


def item_sort_key(record: TaskRecord, directory: MemberDirectory) -> Tuple:
    return (
        -record.progress_rate,
        directory.priority_of_name(record.person),
        _text_key(record.person),
        _text_key(record.title),
        _text_key(record.customer),
        record.date.start,
        record.date.end or "",
        -record.effort,
        record.external_id if record.external_id is not None else -1,
    )


# =================================================
# Grouping
# =================================================
def _sub_group_of(record: TaskRecord, group: str) -> str:
    if group == SITE_SUPPORT_GROUP:
        return record.customer or PLACEHOLDER
    return record.sub_group


def _with_placeholders(record: TaskRecord) -> TaskRecord:
    return replace(
        record.copy(),
        title=record.title or PLACEHOLDER,
        customer=record.customer or PLACEHOLDER,
        group=record.group or PLACEHOLDER,
        sub_group=record.sub_group or PLACEHOLDER,
        person=record.person or PLACEHOLDER,
        progress_rate=record.progress_rate or 0,
        effort=record.effort or 0,
    )


def insufficient_data_group(
    records: Sequence[TaskRecord], directory: MemberDirectory
) -> GroupedReport:
    items = sorted(
        (_with_placeholders(r) for r in records),
        key=lambda r: item_sort_key(r, directory),
    )
    return GroupedReport(
        group=INSUFFICIENT_DATA_GROUP,
        sub_groups=[SubGroupItems(sub_group=PLACEHOLDER, items=items)],
    )


def group_records(
    records: Sequence[TaskRecord],
    directory: MemberDirectory,
    incomplete: Sequence[TaskRecord] = (),
    policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST,
) -> List[GroupedReport]:
    """
    Build the group -> subgroup -> items hierarchy.

    Groups: priority group, general groups A..Z, then SPECIAL_GROUPS in
    their listed order. Subgroups follow SUB_GROUP_ORDER (site support is
    keyed by customer). Items: progress desc, member priority, name.
    Incomplete records are appended as one insufficient-data group.
    """
    by_group: Dict[str, List[TaskRecord]] = defaultdict(list)
    for r in records:
        by_group[r.group].append(r)

    grouped: List[GroupedReport] = []
    for group in sorted(by_group, key=group_sort_key):
        by_sub: Dict[str, List[TaskRecord]] = defaultdict(list)
        for r in by_group[group]:
            by_sub[_sub_group_of(r, group)].append(r.copy())

        sub_groups = [
            SubGroupItems(
                sub_group=sub,
                items=sorted(by_sub[sub], key=lambda r: item_sort_key(r, directory)),
            )
            for sub in sorted(by_sub, key=lambda s: sub_group_sort_key(s, policy))
        ]
        grouped.append(GroupedReport(group=group, sub_groups=sub_groups))

    if incomplete:
        grouped.append(insufficient_data_group(incomplete, directory))

    return grouped


# =================================================
# Sections per report tier
# =================================================
def build_daily_sections(
    records: Sequence[TaskRecord],
    today: str,
    directory: MemberDirectory,
    policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST,
) -> List[ReportSection]:
    part = partition_by_day(records, today)
    return [
        ReportSection(
            SectionType.IN_PROGRESS,
            group_records(part.complete_today, directory, part.incomplete_today, policy),
        ),
        ReportSection(
            SectionType.PLANNED,
            group_records(
                part.complete_tomorrow, directory, part.incomplete_tomorrow, policy
            ),
        ),
    ]


def build_weekly_sections(
    records: Sequence[TaskRecord],
    directory: MemberDirectory,
    policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST,
) -> List[ReportSection]:
    complete, incomplete = split_complete(records)
    return [
        ReportSection(
            SectionType.IN_PROGRESS,
            group_records(complete, directory, incomplete, policy),
        )
    ]


def build_monthly_sections(
    records: Sequence[TaskRecord],
    directory: MemberDirectory,
    policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST,
) -> List[ReportSection]:
    in_progress, completed = split_monthly(records)
    sections = []
    for section_type, subset in (
        (SectionType.IN_PROGRESS, in_progress),
        (SectionType.COMPLETED, completed),
    ):
        complete, incomplete = split_complete(subset)
        sections.append(
            ReportSection(
                section_type, group_records(complete, directory, incomplete, policy)
            )
        )
    return sections


# =================================================
# Effort summaries
# =================================================
def person_summary(
    records: Sequence[TaskRecord],
    directory: MemberDirectory,
    skip_zero: bool = False,
) -> List[PersonSummary]:
    if skip_zero:
        records = [r for r in records if r.effort > 0]

    by_person: Dict[str, List[TaskRecord]] = defaultdict(list)
    for r in records:
        by_person[r.person or PLACEHOLDER].append(r)

    summaries = []
    for name in sorted(by_person, key=directory.sort_key):
        person_records = sorted(
            by_person[name],
            key=lambda r: (group_sort_key(r.group), item_sort_key(r, directory)),
        )
        summaries.append(
            PersonSummary(
                name=name,
                total_effort=sum(r.effort or 0 for r in person_records),
                records=person_records,
            )
        )
    return summaries


def group_summary(records: Iterable[TaskRecord]) -> GroupSummary:
    totals: GroupSummary = {}
    for r in records:
        group = r.group or PLACEHOLDER
        totals[group] = totals.get(group, 0) + (r.effort or 0)
    return totals


def mark_completion(summaries: List[PersonSummary], threshold: float) -> None:
    """Flag people whose logged effort reaches a full working day."""
    for s in summaries:
        s.is_complete = s.total_effort >= threshold


# =================================================
# Leave
# =================================================
def leave_entries(
    records: Iterable[TaskRecord], calendar: BusinessCalendar
) -> Dict[str, List[LeaveEntry]]:
    """person -> leave days taken, one entry per business day covered."""
    entries: Dict[str, Dict[Tuple[str, str], LeaveEntry]] = defaultdict(dict)

    for r in records:
        if r.sub_group not in LEAVE_SUB_GROUPS or not r.date.start:
            continue
        start = to_date(r.date.start)
        end = to_date(r.date.end) if r.date.end else start

        days = []
        d = start
        while d <= end:
            if calendar.is_business_day(d):
                days.append(d)
            d += timedelta(days=1)
        if not days:
            days = [start]

        for d in days:
            iso = d.isoformat()
            entries[r.person or PLACEHOLDER][(iso, r.sub_group)] = LeaveEntry(
                date=iso, day_of_week=calendar.weekday_label(d), kind=r.sub_group
            )

    return {
        person: sorted(found.values(), key=lambda e: (e.date, e.kind))
        for person, found in entries.items()
    }


def attach_leave(
    summaries: List[PersonSummary],
    records: Iterable[TaskRecord],
    calendar: BusinessCalendar,
) -> None:
    leave = leave_entries(records, calendar)
    for s in summaries:
        s.leave_info = leave.get(s.name, [])
