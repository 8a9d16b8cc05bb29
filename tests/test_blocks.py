import pytest

from workreport.blocks import (
    build_person_blocks,
    build_report_blocks,
    code_blocks,
    page_icon,
    page_properties,
    table,
)
from workreport.models import PersonSummary, ReportPayload, ReportSection, ReportType, SectionType

from conftest import make_record


def _payload(report_type, text="body", sections=()):
    return ReportPayload(
        report_type=report_type,
        date="2025-10-02",
        title="title",
        sections=list(sections),
        text=text,
        effort_text="[인원별 공수]\n",
        group_effort_text="[그룹별 공수]\n",
    )


def test_page_properties_and_icon():
    props = page_properties("주간 보고", "2025-10-02", ReportType.WEEKLY)

    assert props["title"]["title"][0]["text"]["content"] == "주간 보고"
    assert props["Date"] == {"date": {"start": "2025-10-02"}}
    assert props["Tags"] == {"select": {"name": "주간"}}
    assert page_icon(ReportType.MONTHLY) == {"type": "emoji", "emoji": "📊"}


def test_code_blocks_split_long_text():
    blocks = code_blocks("가" * 4500)
    assert len(blocks) == 3
    assert all(b["type"] == "code" for b in blocks)
    assert "".join(b["code"]["rich_text"][0]["text"]["content"] for b in blocks) == "가" * 4500


def test_daily_body_is_code_blocks():
    blocks = build_report_blocks(_payload(ReportType.DAILY))

    assert [b["type"] for b in blocks] == ["heading_2", "paragraph", "paragraph", "code"]
    assert blocks[0]["heading_2"]["rich_text"][0]["text"]["content"] == "일일 공수 현황"


def test_monthly_body_has_sections():
    sections = [
        ReportSection(SectionType.IN_PROGRESS, []),
        ReportSection(SectionType.COMPLETED, []),
    ]
    blocks = build_report_blocks(_payload(ReportType.MONTHLY, sections=sections))

    types = [b["type"] for b in blocks]
    assert types == ["heading_2", "paragraph", "paragraph", "heading_1", "heading_2", "divider", "heading_2"]
    assert blocks[-1]["heading_2"]["rich_text"][0]["text"]["content"] == "완료된 업무"


def test_person_blocks_table():
    records = [
        make_record(title="회의", group="회의", effort=1, progress_rate=100),
        make_record(title="#-API 설계", external_id=12, external_link="https://pms/12", effort=3),
        make_record(title="zero", effort=0),
    ]
    blocks = build_person_blocks([PersonSummary("A", 4, records)])

    assert blocks[1]["heading_3"]["rich_text"][0]["text"]["content"] == "A - total: 4m/h, 3건"
    rows = blocks[2]["table"]["children"]
    assert len(rows) == 3
    first = rows[1]["table_row"]["cells"]
    assert first[1][0]["text"] == {"content": "#12", "link": {"url": "https://pms/12"}}
    assert first[2][0]["text"]["content"] == "API 설계"
    assert rows[2]["table_row"]["cells"][3][0]["text"]["content"] == "회의"


def test_person_blocks_empty():
    assert build_person_blocks([]) == []


def test_table_needs_rows():
    with pytest.raises(ValueError):
        table([])
