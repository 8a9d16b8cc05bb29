import pytest

from workreport.models import ReportType
from workreport.report_service import ReportService, ReportWriteError

from conftest import FakeStore, make_calendar, make_page


def _service(store, directory, today="2025-10-02"):
    return ReportService(store, directory, make_calendar(today))


def _pages():
    return [
        make_page(title="API 설계", effort=8, progress=0.5, page_id="p1"),
        make_page(
            title="배포 준비",
            people=("b@example.com",),
            is_today=False,
            is_tomorrow=True,
            start="2025-10-10",
            effort=2,
            page_id="p2",
        ),
    ]


def test_holiday_is_a_no_op(directory):
    store = FakeStore(_pages())
    service = _service(store, directory, "2025-10-03")

    assert service.generate_reports() is None
    assert service.generate_and_save_reports() is None
    assert store.queries == []


@pytest.mark.parametrize(
    "today, tiers",
    [
        ("2025-10-16", [ReportType.DAILY]),
        ("2025-10-02", [ReportType.DAILY, ReportType.WEEKLY]),
        ("2025-10-31", [ReportType.DAILY, ReportType.WEEKLY, ReportType.MONTHLY]),
        ("2025-12-31", [ReportType.DAILY, ReportType.MONTHLY]),
    ],
)
def test_due_tiers(directory, today, tiers):
    assert _service(FakeStore(), directory, today).due_tiers(today) == tiers


def test_daily_payload(directory):
    service = _service(FakeStore(_pages()), directory)

    payload = service.build_daily("2025-10-02")

    assert payload.report_type is ReportType.DAILY
    assert payload.title == "큐브 파트 일일업무 보고 (25.10.02)"
    assert payload.effort_text == "[인원별 공수]\n- A: 8 m/h (작성 완료)\n"
    assert payload.group_effort_text == "[그룹별 공수]\n- Dev: 8 m/h\n"
    assert "업무 진행 사항\n1. Dev\n[분석]\n- API 설계(A, 50%)\n" in payload.text
    # unfinished and due today, so it also shows up in tomorrow's plan
    assert "업무 계획 사항\n1. Dev\n[분석]\n- API 설계(A)\n- 배포 준비(B)\n" in payload.text


def test_pipeline_is_idempotent(directory):
    first = _service(FakeStore(_pages()), directory).generate_reports("2025-10-31")
    second = _service(FakeStore(list(reversed(_pages()))), directory).generate_reports("2025-10-31")

    for tier in first.payloads:
        assert first.payloads[tier].text == second.payloads[tier].text


def test_failed_tier_does_not_block_others(directory):
    store = FakeStore(_pages(), fail_queries=1)

    run = _service(store, directory).generate_reports("2025-10-02")

    assert list(run.errors) == [ReportType.DAILY]
    assert list(run.payloads) == [ReportType.WEEKLY]
    assert not run.ok


def test_save_writes_page_and_person_blocks(directory):
    store = FakeStore(_pages())

    run = _service(store, directory).generate_and_save_reports("2025-10-16")

    assert list(run.payloads) == [ReportType.DAILY]
    (page,) = store.created
    assert page["properties"]["Tags"] == {"select": {"name": "일간"}}
    assert page["icon"]["emoji"] == "📝"
    (page_id, blocks), = store.appended
    assert page_id == page["id"]
    assert blocks[0]["heading_2"]["rich_text"][0]["text"]["content"] == "개인별 공수 및 진행 상황"


def test_write_failure_is_reported(directory):
    store = FakeStore(_pages(), fail_creates={"주간"})

    with pytest.raises(ReportWriteError) as exc:
        _service(store, directory).generate_and_save_reports("2025-10-02")

    assert exc.value.saved == 1
    assert exc.value.total == 2
    assert list(exc.value.failures) == [ReportType.WEEKLY]
    assert len(store.created) == 1


def _leave_page(start, page_id):
    return make_page(
        title="연차",
        group="기타",
        sub_group="연차",
        people=("b@example.com",),
        progress=0,
        start=start,
        effort=8,
        page_id=page_id,
    )


@pytest.mark.parametrize(
    "builder, date",
    [("build_weekly", "2025-10-17"), ("build_monthly", "2025-10-31")],
)
def test_same_titled_leave_pages_keep_every_day(directory, builder, date):
    store = FakeStore([_leave_page("2025-10-13", "l1"), _leave_page("2025-10-15", "l2")])

    payload = getattr(_service(store, directory), builder)(date)

    (summary,) = payload.person_summaries
    assert [e.date for e in summary.leave_info] == ["2025-10-13", "2025-10-15"]
    assert payload.effort_text == (
        "[인원별 공수]\n- B: 16 m/h (25.10.13(월) 연차, 25.10.15(수) 연차)\n"
    )


def test_period_summaries_are_order_independent(directory):
    pages = _pages() + [_leave_page("2025-10-13", "l1"), _leave_page("2025-10-15", "l2")]
    first = _service(FakeStore(pages), directory).build_monthly("2025-10-31")
    second = _service(FakeStore(list(reversed(pages))), directory).build_monthly("2025-10-31")

    assert first.text == second.text
    assert first.effort_text == second.effort_text
    assert first.group_effort_text == second.group_effort_text
    assert [
        (s.name, [r.title for r in s.records]) for s in first.person_summaries
    ] == [(s.name, [r.title for r in s.records]) for s in second.person_summaries]
