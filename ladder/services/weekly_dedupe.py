"""
Weekly eval deduplication.

One weekly eval per (youth_id, ISO week). Weeks start on Monday; a record
dated on a Sunday belongs to the week that began six days earlier.

When two records land on the same key the one with the greater
`updated_at` wins. Equal or missing timestamps resolve to whichever record
came later in the input (last write wins). Output order follows the first
appearance of each key, and every output record carries its week's Monday
as `week_date`.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, TypeVar, Union

from ladder.schemas.ratings import NormalizedWeeklyEval, WeeklyEvalRecord

WeeklyRecord = TypeVar("WeeklyRecord", bound=Union[WeeklyEvalRecord, NormalizedWeeklyEval])


def week_start(day: date) -> date:
    """Monday on or before `day`."""
    return day - timedelta(days=day.weekday())


def dedupe_key(record: Union[WeeklyEvalRecord, NormalizedWeeklyEval]) -> tuple[str, date]:
    return record.youth_id, week_start(record.week_date)


def dedupe_weekly(records: Iterable[WeeklyRecord]) -> list[WeeklyRecord]:
    by_youth_week: dict[tuple[str, date], WeeklyRecord] = {}
    for record in records:
        key = dedupe_key(record)
        current = by_youth_week.get(key)
        if current is not None and (record.updated_at or "") < (current.updated_at or ""):
            continue
        if record.week_date != key[1]:
            record = record.model_copy(update={"week_date": key[1]})
        by_youth_week[key] = record
    return list(by_youth_week.values())
