"""
Raw Notion page -> TaskRecord
"""

import logging
from typing import Iterable, List, Optional

from workreport.members import MemberDirectory
from workreport.models import DateRange, TaskRecord

logger = logging.getLogger("normalizer")

REQUIRED_PROPERTIES = ("Name", "Group", "SubGroup")


class MalformedRecordError(ValueError):
    pass


def _select_name(props: dict, name: str) -> str:
    select = (props.get(name) or {}).get("select") or {}
    return select.get("name") or ""


def _number(props: dict, name: str) -> Optional[float]:
    value = (props.get(name) or {}).get("number")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _formula(props: dict, name: str, kind: str):
    formula = (props.get(name) or {}).get("formula") or {}
    return formula.get(kind)


def _title(props: dict) -> str:
    parts = (props.get("Name") or {}).get("title") or []
    return "".join(p.get("plain_text", "") for p in parts).strip()


def _date_range(props: dict) -> DateRange:
    raw = (props.get("Date") or {}).get("date") or {}
    start = (raw.get("start") or "")[:10]
    end = (raw.get("end") or "")[:10] or None
    return DateRange(start=start, end=end)


def _assignee_identities(props: dict) -> List[str]:
    identities = []
    for p in (props.get("Person") or {}).get("people") or []:
        email = (p.get("person") or {}).get("email")
        identities.append(email or p.get("name") or p.get("id") or "")
    return identities


def _progress(props: dict) -> float:
    # Stored as a 0..1 fraction
    raw = _number(props, "Progress") or 0
    return min(100.0, max(0.0, round(raw * 100, 2)))


def _effort(props: dict, effort_property: str) -> float:
    value = _number(props, effort_property)
    if value is None and effort_property != "ManDay":
        value = _number(props, "ManDay")
    return max(0.0, value or 0.0)


def _external_id(props: dict) -> Optional[int]:
    value = _number(props, "PmsNumber")
    return int(value) if value is not None else None


def normalize_page(
    page: dict, directory: MemberDirectory, effort_property: str = "ManHour"
) -> List[TaskRecord]:
    """
    Map one raw page to one TaskRecord per assignee.

    Multi-assignee pages fan out into independent deep copies carrying the
    page's full effort, so each person sees the whole record. A page with no
    assignee yields a single record with an empty person, which lands in the
    insufficient-data bucket downstream.
    """
    props = page.get("properties")
    if not isinstance(props, dict):
        raise MalformedRecordError(f"page {page.get('id')} has no properties")
    missing = [name for name in REQUIRED_PROPERTIES if name not in props]
    if missing:
        raise MalformedRecordError(
            f"page {page.get('id')} is missing {', '.join(missing)}"
        )

    base = TaskRecord(
        title=_title(props),
        customer=_select_name(props, "Customer"),
        group=_select_name(props, "Group"),
        sub_group=_select_name(props, "SubGroup"),
        person="",
        progress_rate=_progress(props),
        date=_date_range(props),
        is_today=bool(_formula(props, "isToday", "boolean")),
        is_tomorrow=bool(_formula(props, "isTomorrow", "boolean")),
        effort=_effort(props, effort_property),
        external_id=_external_id(props),
        external_link=_formula(props, "PmsLink", "string") or None,
    )

    identities = _assignee_identities(props)
    if not identities:
        return [base]

    records = []
    for identity in identities:
        record = base.copy()
        record.person = directory.name_of(identity)
        records.append(record)
    return records


def normalize_records(
    pages: Iterable[dict],
    directory: MemberDirectory,
    effort_property: str = "ManHour",
) -> List[TaskRecord]:
    """Normalize a batch, skipping (and logging) malformed pages."""
    records: List[TaskRecord] = []
    skipped = 0

    for page in pages:
        try:
            records.extend(normalize_page(page, directory, effort_property))
        except MalformedRecordError as e:
            skipped += 1
            logger.warning(f"⚠️ Skipping malformed page: {e}")

    if skipped:
        logger.info(f"Normalized {len(records)} records, skipped {skipped} pages")
    return records
