"""
Unit tests for activity aggregation.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from ridewitus.domain import aggregation
from ridewitus.domain.models import ActivityRecord, ActivityType


def record(day: datetime, activity_type=ActivityType.RUNNING, distance=5.0, duration=30.0, cost=None):
    return ActivityRecord(
        id=f"{day.isoformat()}-{activity_type.value}-{distance}",
        date=day,
        type=activity_type,
        distance=distance,
        duration=duration,
        maintenance_cost=cost,
    )


@pytest.fixture
def records():
    return [
        record(datetime(2026, 3, 2, 18, 0), distance=10, duration=60),
        record(datetime(2026, 3, 1, 7, 30), ActivityType.BIKING, distance=20, duration=45, cost=2.5),
        record(datetime(2026, 3, 1, 21, 0), ActivityType.DRIVING, distance=30, duration=40, cost=7.5),
        record(datetime(2026, 2, 27, 6, 0), ActivityType.WALKING, distance=3, duration=35),
    ]


class TestGrouping:

    def test_groups_by_calendar_day(self, records):
        grouped = aggregation.group_by_day(records)
        assert set(grouped) == {date(2026, 3, 2), date(2026, 3, 1), date(2026, 2, 27)}
        assert len(grouped[date(2026, 3, 1)]) == 2

    def test_daily_totals_are_sorted_ascending(self, records):
        totals = aggregation.daily_totals(aggregation.group_by_day(records))
        assert [t.day for t in totals] == sorted(t.day for t in totals)

    def test_daily_totals_conserve_the_overall_sums(self, records):
        totals = aggregation.daily_totals(aggregation.group_by_day(records))
        assert sum(t.total_distance for t in totals) == pytest.approx(aggregation.total_distance(records))
        assert sum(t.total_duration for t in totals) == pytest.approx(aggregation.total_duration(records))
        assert sum(t.total_maintenance_cost for t in totals) == pytest.approx(10.0)

    def test_empty_input(self):
        assert aggregation.group_by_day([]) == {}
        assert aggregation.daily_totals({}) == []


class TestTotals:

    def test_totals(self, records):
        assert aggregation.total_distance(records) == 63
        assert aggregation.total_duration(records) == 180
        assert aggregation.total_maintenance_cost(records) == 10

    def test_average_speed_is_distance_per_hour(self, records):
        assert aggregation.average_speed(records) == pytest.approx(63 / 3)

    def test_average_speed_of_empty_set_is_zero(self):
        assert aggregation.average_speed([]) == 0

    def test_average_speed_with_zero_duration_is_zero(self):
        assert aggregation.average_speed([record(datetime(2026, 3, 1), duration=0)]) == 0


class TestFilters:

    def test_filter_by_type(self, records):
        selected = aggregation.filter_by_type(records, [ActivityType.BIKING, ActivityType.DRIVING])
        assert {r.type for r in selected} == {ActivityType.BIKING, ActivityType.DRIVING}

    def test_filter_by_type_with_no_types_selects_nothing(self, records):
        assert aggregation.filter_by_type(records, []) == []

    def test_filter_by_time_range_with_naive_dates(self, records):
        now = datetime(2026, 3, 3, 0, 0)
        selected = aggregation.filter_by_time_range(records, days=2, now=now)
        assert {r.date.date() for r in selected} == {date(2026, 3, 1), date(2026, 3, 2)}

    def test_filter_by_time_range_with_aware_dates(self):
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        recent = record(now - timedelta(days=1))
        old = record(now - timedelta(days=8))
        assert aggregation.filter_by_time_range([recent, old], days=7, now=now) == [recent]
