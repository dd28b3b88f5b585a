"""
Tests for aggregation: grouping time entries by date, component and user.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from aggregation import (
    CLOCK_IN_LABEL,
    group_by_component,
    group_by_date,
    group_by_user,
    local_date,
    summarize_time,
)
from conftest import make_entry
from records import UNKNOWN_COMPONENT, UNKNOWN_USER

FRAMING, ROOFING = 10, 11
COMPONENTS = {FRAMING: "Framing", ROOFING: "Roofing"}
USERS = {1: "carlos", 2: "dana"}


def mixed_entries():
    day1 = datetime(2024, 6, 3, 7, 0)
    day2 = datetime(2024, 6, 4, 7, 0)
    return [
        make_entry(day1, 8, crew_count=3),
        make_entry(day1, 4, component_id=FRAMING, crew_count=5, worker_names=["Alice", "Bob"]),
        make_entry(day1, 2, component_id=ROOFING, user_id=2),
        make_entry(day2, 6, component_id=FRAMING, user_id=2, crew_count=2),
        make_entry(day2, 1, user_id=99),
    ]


class TestLocalDate:
    def test_naive_timestamp_is_already_local(self):
        assert local_date(datetime(2024, 6, 3, 23, 45)) == date(2024, 6, 3)

    def test_aware_timestamp_uses_local_zone_not_utc(self):
        """04:30 UTC is still the previous evening five hours west of UTC."""
        tz = timezone(timedelta(hours=-5))
        ts = datetime(2024, 6, 4, 4, 30, tzinfo=timezone.utc)
        assert local_date(ts, tz) == date(2024, 6, 3)


class TestGroupByDate:
    def test_example_scenario_same_date(self):
        """8h x crew 3 plus 4h x two named workers is 32 man-hours over 2 entries."""
        start = datetime(2024, 6, 3, 7, 0)
        entries = [
            make_entry(start, 8, crew_count=3),
            make_entry(start + timedelta(hours=1), 4, crew_count=5, worker_names=["Alice", "Bob"]),
        ]
        groups = group_by_date(entries)
        assert len(groups) == 1
        assert groups[0].total_man_hours == 32.0
        assert groups[0].entry_count == 2

    def test_split_into_component_and_generic_time(self):
        groups = group_by_date(mixed_entries(), COMPONENTS)
        day1 = next(g for g in groups if g.date == date(2024, 6, 3))
        assert day1.generic_entry_count == 1
        assert day1.generic_man_hours == 24.0
        assert day1.component_entry_count == 2
        assert day1.component_man_hours == 10.0
        assert day1.total_man_hours == 34.0

    def test_newest_date_first(self):
        groups = group_by_date(mixed_entries())
        assert [g.date for g in groups] == [date(2024, 6, 4), date(2024, 6, 3)]

    def test_entries_straddling_local_midnight_land_on_different_dates(self):
        """23:45 and 00:15 local are 30 minutes apart but on two dates."""
        tz = timezone(timedelta(hours=-5))
        late = datetime(2024, 6, 3, 23, 45, tzinfo=tz)
        early = late + timedelta(minutes=30)
        groups = group_by_date([make_entry(late, 1), make_entry(early, 1)], tz=tz)
        assert sorted(g.date for g in groups) == [date(2024, 6, 3), date(2024, 6, 4)]

    @pytest.mark.parametrize("count", [0, 1, 5, 17])
    def test_date_groups_account_for_every_entry(self, count):
        base = datetime(2024, 1, 1, 6, 0)
        entries = [
            make_entry(base + timedelta(hours=7 * i), 1.5, component_id=(FRAMING if i % 3 else None))
            for i in range(count)
        ]
        groups = group_by_date(entries)
        assert sum(g.entry_count for g in groups) == count
        assert sum(sum(c.entry_count for c in g.components) for g in groups) == count

    def test_per_component_breakdown_sorted_by_man_hours(self):
        groups = group_by_date(mixed_entries(), COMPONENTS)
        day1 = next(g for g in groups if g.date == date(2024, 6, 3))
        assert [c.component_name for c in day1.components] == [CLOCK_IN_LABEL, "Framing", "Roofing"]


class TestGroupByComponent:
    def test_totals_and_sort_order(self):
        summaries = group_by_component(mixed_entries(), COMPONENTS)
        names = [s.component_name for s in summaries]
        assert names == [CLOCK_IN_LABEL, "Framing", "Roofing"]
        framing = summaries[1]
        assert framing.entry_count == 2
        assert framing.total_hours == 10.0
        assert framing.total_man_hours == 20.0

    def test_shares_sum_to_one_hundred(self):
        summaries = group_by_component(mixed_entries(), COMPONENTS)
        assert sum(s.share_percent for s in summaries) == pytest.approx(100.0)

    def test_shares_are_zero_when_total_is_zero(self):
        start = datetime(2024, 6, 3, 7, 0)
        summaries = group_by_component([make_entry(start, 0, component_id=FRAMING)], COMPONENTS)
        assert [s.share_percent for s in summaries] == [0.0]

    def test_ties_are_ordered_by_name(self):
        start = datetime(2024, 6, 3, 7, 0)
        entries = [make_entry(start, 2, component_id=ROOFING), make_entry(start, 2, component_id=FRAMING)]
        assert [s.component_name for s in group_by_component(entries, COMPONENTS)] == ["Framing", "Roofing"]

    def test_unresolved_component_is_kept_as_unknown(self):
        start = datetime(2024, 6, 3, 7, 0)
        summaries = group_by_component([make_entry(start, 3, component_id=404)], COMPONENTS)
        assert summaries[0].component_name == UNKNOWN_COMPONENT
        assert summaries[0].total_man_hours == 3.0

    def test_per_date_breakdown(self):
        summaries = group_by_component(mixed_entries(), COMPONENTS)
        framing = next(s for s in summaries if s.component_id == FRAMING)
        assert [(d.date, d.total_man_hours) for d in framing.dates] == [
            (date(2024, 6, 4), 12.0),
            (date(2024, 6, 3), 8.0),
        ]


class TestGroupByUser:
    def test_hours_and_component_breakdown(self):
        users = group_by_user(mixed_entries(), USERS, COMPONENTS)
        carlos = next(u for u in users if u.user_name == "carlos")
        assert carlos.total_hours == 12.0
        assert carlos.clock_in_man_hours == 24.0
        assert carlos.component_man_hours == 8.0
        assert {c.component_name: c.total_hours for c in carlos.components} == {
            CLOCK_IN_LABEL: 8.0,
            "Framing": 4.0,
        }

    def test_unresolved_user_is_kept_as_unknown(self):
        users = group_by_user(mixed_entries(), USERS, COMPONENTS)
        unknown = [u for u in users if u.user_name == UNKNOWN_USER]
        assert len(unknown) == 1
        assert unknown[0].total_hours == 1.0

    def test_user_totals_cover_all_entries(self):
        entries = mixed_entries()
        users = group_by_user(entries, USERS, COMPONENTS)
        assert sum(u.entry_count for u in users) == len(entries)


class TestSummarizeTime:
    def test_job_totals(self):
        summary = summarize_time(mixed_entries(), component_names=COMPONENTS, user_names=USERS)
        assert summary.entry_count == 5
        assert summary.total_hours == 21.0
        assert summary.clock_in_man_hours == 25.0
        assert summary.component_man_hours == 22.0
        assert summary.total_man_hours == 47.0
        assert summary.first_work_date == date(2024, 6, 3)
        assert summary.last_work_date == date(2024, 6, 4)
        assert summary.crew_members == ["carlos", "dana"]

    def test_clock_in_only(self):
        summary = summarize_time(mixed_entries(), clock_in_only=True)
        assert summary.entry_count == 2
        assert summary.component_man_hours == 0.0
        assert summary.total_man_hours == 25.0

    def test_empty_job(self):
        summary = summarize_time([])
        assert summary.date_groups == []
        assert summary.first_work_date is None
        assert summary.total_man_hours == 0.0
