"""
Report orchestration - daily / weekly / monthly tiers
"""

import logging
from typing import Callable, Dict, List, Optional

from workreport import aggregation
from workreport.aggregation import UnknownSubGroupOrder
from workreport.blocks import build_person_blocks, build_report_blocks, page_icon, page_properties
from workreport.constants import BLOCK_LIMIT
from workreport.dates import BusinessCalendar
from workreport.dedupe import dedupe
from workreport.fetcher import RecordFetcher
from workreport.formatting import (
    daily_title,
    monthly_title,
    render_effort_summary,
    render_person_details,
    render_report,
    weekly_title,
)
from workreport.members import MemberDirectory
from workreport.models import ReportPayload, ReportRun, ReportType, TaskRecord
from workreport.normalizer import normalize_records

logger = logging.getLogger("report-service")


class ReportWriteError(RuntimeError):
    def __init__(self, failures: Dict[ReportType, Exception], saved: int, total: int):
        names = ", ".join(t.value for t in failures)
        super().__init__(f"Failed to save {len(failures)}/{total} report pages ({names})")
        self.failures = failures
        self.saved = saved
        self.total = total


def _day_window(record: TaskRecord):
    return record.is_today, record.is_tomorrow


class ReportService:
    """
    Composes fetch -> normalize -> dedupe -> aggregate -> format for each
    report tier and writes the resulting pages.

    Per run: holiday short-circuit, then daily, then weekly on the last
    business day of the week, then monthly on the last business day of the
    month. Tiers share no state; one failing never blocks the others.
    """

    def __init__(
        self,
        store,
        directory: MemberDirectory,
        calendar: BusinessCalendar,
        team_name: str = "큐브 파트",
        effort_property: str = "ManHour",
        effort_unit: str = "m/h",
        daily_work_hours: float = 8,
        sub_group_policy: UnknownSubGroupOrder = UnknownSubGroupOrder.LAST,
    ):
        self.store = store
        self.directory = directory
        self.calendar = calendar
        self.fetcher = RecordFetcher(store, calendar)
        self.team_name = team_name
        self.effort_property = effort_property
        self.effort_unit = effort_unit
        self.daily_work_hours = daily_work_hours
        self.sub_group_policy = sub_group_policy

    # -------------------------------------------------
    # Shared pipeline steps
    # -------------------------------------------------
    def _normalize(self, pages: List[dict]) -> List[TaskRecord]:
        return normalize_records(pages, self.directory, self.effort_property)

    def _group_effort_text(self, records: List[TaskRecord]) -> str:
        return render_effort_summary(
            aggregation.group_summary(records), is_group_level=True, unit=self.effort_unit
        )

    # -------------------------------------------------
    # Tiers
    # -------------------------------------------------
    def build_daily(self, date: str) -> ReportPayload:
        records = dedupe(self._normalize(self.fetcher.fetch_daily()), scope=_day_window)
        today_records = [r for r in records if r.is_today]

        sections = aggregation.build_daily_sections(
            records, date, self.directory, self.sub_group_policy
        )
        summaries = aggregation.person_summary(today_records, self.directory, skip_zero=True)
        aggregation.mark_completion(summaries, self.daily_work_hours)

        title = daily_title(self.team_name, date, self.calendar)
        return ReportPayload(
            report_type=ReportType.DAILY,
            date=date,
            title=title,
            sections=sections,
            text=render_report(title, sections, ReportType.DAILY),
            effort_text=render_person_details(
                summaries, self.calendar, self.effort_unit, include_completion=True
            ),
            group_effort_text=self._group_effort_text(today_records),
            person_summaries=summaries,
            record_count=len(records),
        )

    def _build_period(
        self,
        report_type: ReportType,
        date: str,
        pages: List[dict],
        build_sections: Callable,
        title: str,
    ) -> ReportPayload:
        normalized = self._normalize(pages)
        records = dedupe(normalized)
        sections = build_sections(records, self.directory, self.sub_group_policy)

        summaries = aggregation.person_summary(records, self.directory)
        # leave days come from every page, before duplicates collapse
        aggregation.attach_leave(summaries, normalized, self.calendar)

        return ReportPayload(
            report_type=report_type,
            date=date,
            title=title,
            sections=sections,
            text=render_report(title, sections, report_type),
            effort_text=render_person_details(
                summaries, self.calendar, self.effort_unit, include_leave=True
            ),
            group_effort_text=self._group_effort_text(records),
            person_summaries=summaries,
            record_count=len(records),
        )

    def build_weekly(self, date: str) -> ReportPayload:
        return self._build_period(
            ReportType.WEEKLY,
            date,
            self.fetcher.fetch_weekly(date),
            aggregation.build_weekly_sections,
            weekly_title(self.team_name, date, self.calendar),
        )

    def build_monthly(self, date: str) -> ReportPayload:
        return self._build_period(
            ReportType.MONTHLY,
            date,
            self.fetcher.fetch_monthly(date),
            aggregation.build_monthly_sections,
            monthly_title(self.team_name, date),
        )

    # -------------------------------------------------
    # Run
    # -------------------------------------------------
    def due_tiers(self, date: str) -> List[ReportType]:
        tiers = [ReportType.DAILY]
        if self.calendar.is_last_business_day_of_week(date):
            tiers.append(ReportType.WEEKLY)
        if self.calendar.is_last_business_day_of_month(date):
            tiers.append(ReportType.MONTHLY)
        return tiers

    def generate_reports(self, date: Optional[str] = None) -> Optional[ReportRun]:
        date = date or self.calendar.today()

        if self.calendar.is_holiday(date):
            logger.info(f"🏖️ {date} is a holiday, no reports generated")
            return None

        builders = {
            ReportType.DAILY: self.build_daily,
            ReportType.WEEKLY: self.build_weekly,
            ReportType.MONTHLY: self.build_monthly,
        }

        run = ReportRun(date=date)
        for tier in self.due_tiers(date):
            try:
                payload = builders[tier](date)
            except Exception as e:
                logger.error(f"❌ {tier.value} report failed for {date}", exc_info=True)
                run.errors[tier] = e
                continue
            run.payloads[tier] = payload
            logger.info(
                f"✅ {tier.value} report built ({payload.record_count} records)"
            )
        return run

    # -------------------------------------------------
    # Persistence
    # -------------------------------------------------
    def save_report(self, payload: ReportPayload) -> str:
        blocks = build_report_blocks(payload)
        page = self.store.create_page(
            page_properties(payload.title, payload.date, payload.report_type),
            blocks[:BLOCK_LIMIT],
            page_icon(payload.report_type),
        )
        page_id = page["id"]

        remaining = blocks[BLOCK_LIMIT:]
        if remaining:
            self.store.append_blocks(page_id, remaining)

        person_blocks = build_person_blocks(payload.person_summaries, self.effort_unit)
        if person_blocks:
            self.store.append_blocks(page_id, person_blocks)

        logger.info(f"📄 {payload.report_type.value} report page created: {page_id}")
        return page_id

    def generate_and_save_reports(self, date: Optional[str] = None) -> Optional[ReportRun]:
        run = self.generate_reports(date)
        if run is None:
            return None

        failures: Dict[ReportType, Exception] = {}
        for tier, payload in run.payloads.items():
            try:
                self.save_report(payload)
            except Exception as e:
                logger.error(f"❌ Saving {tier.value} report failed", exc_info=True)
                failures[tier] = e

        total = len(run.payloads)
        saved = total - len(failures)
        logger.info(
            f"💾 Saved {saved}/{total} report pages for {run.date}"
            + (f", {len(run.errors)} tier(s) not built" if run.errors else "")
        )

        if failures:
            raise ReportWriteError(failures, saved, total)
        return run
