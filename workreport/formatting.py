"""
Structured report data -> plain text.

Everything here is a pure function of its input; two runs over the same
records produce byte-identical text.
"""

from typing import Iterable, List, Optional, Sequence, Union

from workreport.constants import COMPLETION_MARK, TEXT_CHUNK_SIZE
from workreport.dates import BusinessCalendar, to_date
from workreport.models import (
    GroupSummary,
    LeaveEntry,
    PersonSummary,
    ReportSection,
    ReportType,
    SectionType,
    TaskRecord,
)

SECTION_TITLES = {
    ReportType.DAILY: {
        SectionType.IN_PROGRESS: "업무 진행 사항",
        SectionType.PLANNED: "업무 계획 사항",
        SectionType.COMPLETED: "완료된 업무",
    },
    ReportType.WEEKLY: {
        SectionType.IN_PROGRESS: "금주 진행 사항",
        SectionType.PLANNED: "차주 계획 사항",
        SectionType.COMPLETED: "완료된 업무",
    },
    ReportType.MONTHLY: {
        SectionType.IN_PROGRESS: "진행 중인 업무",
        SectionType.PLANNED: "예정 업무",
        SectionType.COMPLETED: "완료된 업무",
    },
}


# =================================================
# Numbers
# =================================================
def format_effort(value: Union[int, float, None]) -> str:
    """8.0 -> '8', 0.1 + 0.2 -> '0.3'"""
    value = round(float(value or 0), 2)
    if value == int(value):
        return str(int(value))
    return str(value)


format_progress = format_effort


# =================================================
# Chunking
# =================================================
def split_into_chunks(text: str, size: int = TEXT_CHUNK_SIZE) -> List[str]:
    """
    Slice `text` into pieces of at most `size` characters.

    Python strings index by code point, so a slice never splits a multi-byte
    character and `"".join(chunks) == text` always holds.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [text[i : i + size] for i in range(0, len(text), size)]


def split_many_into_chunks(
    texts: Iterable[str], size: int = TEXT_CHUNK_SIZE
) -> List[str]:
    chunks: List[str] = []
    for text in texts:
        chunks.extend(split_into_chunks(text, size))
    return chunks


# =================================================
# Titles
# =================================================
def daily_title(team: str, date: str, calendar: BusinessCalendar) -> str:
    return f"{team} 일일업무 보고 ({calendar.short_date(date)})"


def weekly_title(team: str, date: str, calendar: BusinessCalendar) -> str:
    return f"{team} 주간업무 보고 ({calendar.week_of_month(date)})"


def monthly_title(team: str, date: str) -> str:
    d = to_date(date)
    return f"{team} 월간업무 보고 ({d.year}년 {d.month}월)"


def section_title(section_type: SectionType, report_type: ReportType) -> str:
    return SECTION_TITLES[report_type].get(section_type, section_type.value)


# =================================================
# Sections
# =================================================
def includes_progress(section_type: SectionType) -> bool:
    # Plans have no progress yet
    return section_type is not SectionType.PLANNED


def format_item_title(record: TaskRecord) -> str:
    if record.customer:
        return f"[{record.customer}] {record.title}"
    return record.title


def format_item(record: TaskRecord, include_progress: bool = True) -> str:
    """- [customer] title(person, NN%)"""
    progress = f", {format_progress(record.progress_rate)}%" if include_progress else ""
    return f"- {format_item_title(record)}({record.person}{progress})"


def render_section(
    section: ReportSection, title: str, include_progress: Optional[bool] = None
) -> str:
    if include_progress is None:
        include_progress = includes_progress(section.type)

    lines = [title]
    for index, group in enumerate(section.groups, start=1):
        lines.append(f"{index}. {group.group}")
        for sub in group.sub_groups:
            lines.append(f"[{sub.sub_group}]")
            lines.extend(format_item(item, include_progress) for item in sub.items)
            lines.append("")
    return "\n".join(lines) + "\n"


def render_report(
    title: str, sections: Sequence[ReportSection], report_type: ReportType
) -> str:
    text = f"{title}\n\n"
    for section in sections:
        text += render_section(section, section_title(section.type, report_type))
        text += "\n"
    return text


# =================================================
# Effort summaries
# =================================================
def render_effort_summary(
    summary: Union[GroupSummary, Sequence[PersonSummary]],
    is_group_level: bool = False,
    unit: str = "m/h",
) -> str:
    """
    [인원별 공수] / [그룹별 공수] block.

    Group totals are ordered by value (largest first); person summaries are
    already in member priority order and are kept as given.
    """
    header = f"[{'그룹별' if is_group_level else '인원별'} 공수]\n"

    if isinstance(summary, dict):
        entries = sorted(summary.items(), key=lambda kv: (-kv[1], kv[0]))
    else:
        entries = [(s.name, s.total_effort) for s in summary]

    return header + "".join(
        f"- {name}: {format_effort(value)} {unit}\n" for name, value in entries
    )


def format_leave_info(leave_info: Sequence[LeaveEntry], calendar: BusinessCalendar) -> str:
    return ", ".join(
        f"{calendar.short_date(e.date)}({e.day_of_week}) {e.kind}" for e in leave_info
    )


def render_person_details(
    summaries: Sequence[PersonSummary],
    calendar: BusinessCalendar,
    unit: str = "m/h",
    include_completion: bool = False,
    include_leave: bool = False,
) -> str:
    result = "[인원별 공수]\n"
    for s in summaries:
        line = f"- {s.name}: {format_effort(s.total_effort)} {unit}"
        if include_completion and s.is_complete is True:
            line += f" ({COMPLETION_MARK})"
        if include_leave and s.leave_info:
            line += f" ({format_leave_info(s.leave_info, calendar)})"
        result += line + "\n"
    return result
