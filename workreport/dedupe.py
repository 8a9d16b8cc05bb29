import re
from typing import Callable, Dict, Hashable, List, Optional, Tuple

from workreport.models import TaskRecord

_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    return _WHITESPACE.sub("", title or "")


def dedupe_key(record: TaskRecord) -> Tuple:
    # Person is always part of the key so two people never merge
    if record.external_id is not None:
        return record.person, "id", record.external_id
    return record.person, "title", normalize_title(record.title)


def dedupe(
    records: List[TaskRecord],
    scope: Optional[Callable[[TaskRecord], Hashable]] = None,
) -> List[TaskRecord]:
    """
    Collapse records that describe the same logical task.

    - effort is summed across the whole key group
    - remaining fields come from the record with the latest end date
      (start date when there is no end); ties keep the first one seen
    - output keeps first-seen key order

    `scope` adds a prefix to the key, so records in different scopes never
    merge even when they share a ticket or title.
    """
    kept: Dict[Hashable, TaskRecord] = {}
    effort_sums: Dict[Hashable, float] = {}

    for record in records:
        key = dedupe_key(record)
        if scope is not None:
            key = (scope(record), key)

        effort_sums[key] = effort_sums.get(key, 0) + (record.effort or 0)

        existing = kept.get(key)
        if existing is None or record.reference_date > existing.reference_date:
            kept[key] = record

    result = []
    for key, record in kept.items():
        merged = record.copy()
        merged.effort = effort_sums[key]
        result.append(merged)
    return result
