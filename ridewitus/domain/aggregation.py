"""
Activity aggregation for charts and summary statistics.

All functions are pure and accept any records exposing ``date``, ``type``,
``distance``, ``duration`` (minutes) and ``maintenance_cost``.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from ridewitus.domain.models import ActivityType, DailyTotal


RecordT = TypeVar("RecordT")


def group_by_day(records: Iterable[RecordT]) -> Dict[date, List[RecordT]]:
    """
    Group records by calendar day.

    The day is the date portion of each record's own datetime; no timezone
    normalization is applied.
    """
    grouped: Dict[date, List[RecordT]] = defaultdict(list)
    for record in records:
        grouped[record.date.date()].append(record)
    return dict(grouped)


def daily_totals(grouped: Dict[date, Sequence[RecordT]]) -> List[DailyTotal]:
    """Per-day sums, sorted ascending by day."""
    return [
        DailyTotal(
            day=day,
            total_distance=total_distance(day_records),
            total_duration=total_duration(day_records),
            total_maintenance_cost=total_maintenance_cost(day_records),
        )
        for day, day_records in sorted(grouped.items())
    ]


def total_distance(records: Iterable[RecordT]) -> float:
    return sum((record.distance for record in records), 0.0)


def total_duration(records: Iterable[RecordT]) -> float:
    return sum((record.duration for record in records), 0.0)


def total_maintenance_cost(records: Iterable[RecordT]) -> float:
    return sum((record.maintenance_cost or 0.0 for record in records), 0.0)


def average_speed(records: Sequence[RecordT]) -> float:
    """Distance per hour; 0 for an empty set or zero total duration."""
    if not records:
        return 0.0
    hours = total_duration(records) / 60
    if hours <= 0:
        return 0.0
    return total_distance(records) / hours


def filter_by_type(records: Iterable[RecordT], types: Iterable[ActivityType]) -> List[RecordT]:
    wanted = {ActivityType(t) for t in types}
    return [record for record in records if ActivityType(record.type) in wanted]


def filter_by_time_range(
    records: Iterable[RecordT],
    days: int,
    now: Optional[datetime] = None,
) -> List[RecordT]:
    """
    Records dated on or after ``now - days``.

    Naive record dates are compared against the cutoff in local time.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    if cutoff.tzinfo is not None:
        naive_cutoff = cutoff.astimezone().replace(tzinfo=None)
        aware_cutoff = cutoff
    else:
        naive_cutoff = cutoff
        aware_cutoff = cutoff.astimezone()

    selected = []
    for record in records:
        threshold = naive_cutoff if record.date.tzinfo is None else aware_cutoff
        if record.date >= threshold:
            selected.append(record)
    return selected
