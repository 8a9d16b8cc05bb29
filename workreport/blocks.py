"""
Notion block / page property builders for report pages.
"""

from typing import List, Optional, Sequence, Union

from workreport.constants import (
    EFFORT_HEADERS,
    MEETING_GROUP,
    PERSON_SECTION_TITLE,
    REPORT_ICONS,
    REPORT_TAGS,
)
from workreport.formatting import (
    format_effort,
    format_item,
    format_progress,
    includes_progress,
    section_title,
    split_into_chunks,
)
from workreport.models import (
    PersonSummary,
    ReportPayload,
    ReportSection,
    ReportType,
    SectionType,
)

TableCell = Union[str, dict]  # plain text or {"text": ..., "link": ...}


# =================================================
# Primitive blocks
# =================================================
def _rich_text(content: str, link: Optional[str] = None, color: Optional[str] = None) -> dict:
    text = {"content": content}
    if link:
        text["link"] = {"url": link}
    rt = {"type": "text", "text": text}
    if color:
        rt["annotations"] = {"color": color}
    return rt


def _chunked_rich_text(text: str, color: Optional[str] = None) -> List[dict]:
    return [_rich_text(chunk, color=color) for chunk in split_into_chunks(text)] or [
        _rich_text("")
    ]


def _text_block(block_type: str, text: str, color: Optional[str] = None) -> dict:
    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": _chunked_rich_text(text, color)},
    }


def heading_1(text: str) -> dict:
    return _text_block("heading_1", text)


def heading_2(text: str, color: Optional[str] = None) -> dict:
    return _text_block("heading_2", text, color)


def heading_3(text: str) -> dict:
    return _text_block("heading_3", text)


def paragraph(text: str) -> dict:
    return _text_block("paragraph", text)


def bulleted_item(text: str) -> dict:
    return _text_block("bulleted_list_item", text)


def divider() -> dict:
    return {"object": "block", "type": "divider", "divider": {}}


def code_blocks(text: str, language: str = "plain text") -> List[dict]:
    """One code block per text chunk."""
    return [
        {
            "object": "block",
            "type": "code",
            "code": {"rich_text": [_rich_text(chunk)], "language": language},
        }
        for chunk in split_into_chunks(text)
    ]


def _table_cell(cell: TableCell) -> List[dict]:
    if isinstance(cell, dict):
        return [_rich_text(cell.get("text", ""), link=cell.get("link"))]
    return [_rich_text(cell)]


def table(rows: Sequence[Sequence[TableCell]], has_column_header: bool = True) -> dict:
    if not rows:
        raise ValueError("table needs at least one row")
    return {
        "object": "block",
        "type": "table",
        "table": {
            "table_width": len(rows[0]) or 1,
            "has_column_header": has_column_header,
            "has_row_header": False,
            "children": [
                {
                    "object": "block",
                    "type": "table_row",
                    "table_row": {"cells": [_table_cell(c) for c in row]},
                }
                for row in rows
            ],
        },
    }


# =================================================
# Page properties
# =================================================
def page_properties(title: str, date: str, report_type: ReportType) -> dict:
    props = {
        "title": {"title": [{"text": {"content": title}}]},
        "Date": {"date": {"start": date}},
    }
    tag = REPORT_TAGS.get(report_type.value)
    if tag:
        props["Tags"] = {"select": {"name": tag}}
    return props


def page_icon(report_type: ReportType) -> Optional[dict]:
    emoji = REPORT_ICONS.get(report_type.value)
    return {"type": "emoji", "emoji": emoji} if emoji else None


# =================================================
# Report bodies
# =================================================
def section_blocks(sections: Sequence[ReportSection], report_type: ReportType) -> List[dict]:
    blocks: List[dict] = []
    for section in sections:
        if section.type is SectionType.COMPLETED:
            blocks.append(divider())
        blocks.append(heading_2(section_title(section.type, report_type), "yellow_background"))

        include_progress = includes_progress(section.type)
        for index, group in enumerate(section.groups, start=1):
            blocks.append(heading_3(f"{index}. {group.group}"))
            for sub in group.sub_groups:
                blocks.append(paragraph(f"[{sub.sub_group}]"))
                for item in sub.items:
                    # bullets render their own marker
                    blocks.append(bulleted_item(format_item(item, include_progress)[2:]))
    return blocks


def build_report_blocks(payload: ReportPayload) -> List[dict]:
    blocks = [
        heading_2(EFFORT_HEADERS[payload.report_type.value]),
        paragraph(payload.effort_text),
    ]
    if payload.group_effort_text:
        blocks.append(paragraph(payload.group_effort_text))

    if payload.report_type is ReportType.DAILY:
        blocks.extend(code_blocks(payload.text))
    else:
        blocks.append(heading_1(payload.title))
        blocks.extend(section_blocks(payload.sections, payload.report_type))
    return blocks


def _clean_title(title: str) -> str:
    if title.startswith("#-"):
        return title[2:].strip()
    return title


def _ticket_cell(record) -> TableCell:
    if record.external_id is None:
        return ""
    label = f"#{record.external_id}"
    if record.external_link:
        return {"text": label, "link": record.external_link}
    return label


def build_person_blocks(summaries: Sequence[PersonSummary], unit: str = "m/h") -> List[dict]:
    if not summaries:
        return []

    blocks = [heading_2(PERSON_SECTION_TITLE)]
    for s in summaries:
        blocks.append(
            heading_3(f"{s.name} - total: {format_effort(s.total_effort)}{unit}, {len(s.records)}건")
        )

        # meetings last, otherwise keep summary order
        rows = sorted(
            (r for r in s.records if r.effort > 0),
            key=lambda r: r.group == MEETING_GROUP,
        )
        if not rows:
            continue

        header = ["번호", "PMS 관리 번호", "타이틀", "그룹", "진행도", f"공수({unit})"]
        body = [
            [
                str(i),
                _ticket_cell(r),
                _clean_title(r.title or ""),
                r.group or "",
                f"{format_progress(r.progress_rate)}%",
                format_effort(r.effort),
            ]
            for i, r in enumerate(rows, start=1)
        ]
        blocks.append(table([header, *body]))
    return blocks
