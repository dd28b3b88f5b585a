"""
Tests for durations: crew size, man-hours, timestamp-derived hours.
"""
from datetime import datetime, timedelta

import pytest

from durations import effective_crew_size, hours_between, man_hours, resolve_crew, round_to_quarter_hour
from errors import ValidationError


class TestEffectiveCrewSize:
    def test_worker_names_override_crew_count(self):
        """A non-empty worker list is the crew size, whatever crew_count says."""
        assert effective_crew_size(5, ["Alice", "Bob"]) == 2

    def test_crew_count_used_without_names(self):
        assert effective_crew_size(3, []) == 3
        assert effective_crew_size(3, None) == 3

    @pytest.mark.parametrize("count", [None, 0, -2])
    def test_missing_zero_or_negative_count_clamps_to_one(self, count):
        assert effective_crew_size(count) == 1


class TestManHours:
    def test_crew_count_multiplies_hours(self):
        """8 hours with a crew of 3 is 24 man-hours."""
        assert man_hours(8, 3, []) == 24.0

    def test_named_workers_ignore_stored_count(self):
        """4 hours with two named workers is 8 man-hours even if crew_count is 5."""
        assert man_hours(4, 5, ["Alice", "Bob"]) == 8.0

    @pytest.mark.parametrize(
        "hours,count,names",
        [(0.0, 1, []), (1.5, -1, []), (2.25, 0, []), (7.0, 4, []), (3.0, 1, ["A", "B", "C"])],
    )
    def test_man_hours_never_below_hours(self, hours, count, names):
        assert man_hours(hours, count, names) >= hours

    def test_missing_hours_count_as_zero(self):
        assert man_hours(None, 3) == 0.0


class TestHoursBetween:
    def test_exact_duration_in_hours(self):
        start = datetime(2024, 5, 1, 7, 0)
        assert hours_between(start, start + timedelta(hours=8)) == 8.0

    def test_rounds_to_nearest_quarter_hour(self):
        """7h 05m rounds down to 7.0, 7h 10m rounds up to 7.25."""
        start = datetime(2024, 5, 1, 7, 0)
        assert hours_between(start, start + timedelta(hours=7, minutes=5)) == 7.0
        assert hours_between(start, start + timedelta(hours=7, minutes=10)) == 7.25

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(minutes=37, seconds=30), 0.75),
            (timedelta(hours=1, minutes=7, seconds=30), 1.25),
            (timedelta(hours=2, minutes=22, seconds=30), 2.5),
        ],
    )
    def test_halfway_rounds_up(self, delta, expected):
        """Exactly halfway between two quarter hours goes to the later one."""
        start = datetime(2024, 5, 1, 7, 0)
        assert hours_between(start, start + delta) == expected

    def test_unrounded_when_requested(self):
        start = datetime(2024, 5, 1, 7, 0)
        assert hours_between(start, start + timedelta(minutes=10), quarter_hour=False) == pytest.approx(1 / 6)

    @pytest.mark.parametrize("delta", [timedelta(0), timedelta(hours=-1)])
    def test_end_not_after_start_is_rejected(self, delta):
        start = datetime(2024, 5, 1, 7, 0)
        with pytest.raises(ValidationError, match="End time must be after start time"):
            hours_between(start, start + delta)

    def test_missing_end_is_rejected(self):
        with pytest.raises(ValidationError):
            hours_between(datetime(2024, 5, 1, 7, 0), None)

    def test_quarter_hour_rule(self):
        assert round_to_quarter_hour(1.13) == 1.25
        assert round_to_quarter_hour(1.12) == 1.0
        assert round_to_quarter_hour(2.6) == 2.5

    @pytest.mark.parametrize("hours, expected", [(0.125, 0.25), (0.375, 0.5), (2.625, 2.75)])
    def test_quarter_hour_ties_round_up(self, hours, expected):
        assert round_to_quarter_hour(hours) == expected


class TestResolveCrew:
    def test_select_workers_requires_a_name(self):
        with pytest.raises(ValidationError, match="Select at least one worker"):
            resolve_crew(select_workers=True, worker_names=[])

    def test_select_workers_sets_count_from_names(self):
        assert resolve_crew(4, ["Alice", " Bob "], select_workers=True) == (2, ["Alice", "Bob"])

    def test_default_crew_is_one(self):
        assert resolve_crew() == (1, [])

    def test_zero_crew_count_rejected_on_write(self):
        with pytest.raises(ValidationError):
            resolve_crew(0)
