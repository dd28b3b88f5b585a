"""
Duration normalizer: turns a time entry's hours and crew into man-hours.
"""
import math
from datetime import datetime
from typing import Sequence

from errors import ValidationError


def effective_crew_size(
    crew_count: int | None, worker_names: Sequence[str] | None = None
) -> int:
    """Named workers win over the stored crew count; counts below 1 become 1."""
    if worker_names:
        return len(worker_names)
    if crew_count is None or crew_count < 1:
        return 1
    return int(crew_count)


def man_hours(
    total_hours: float | None,
    crew_count: int | None = 1,
    worker_names: Sequence[str] | None = None,
) -> float:
    """Return total_hours multiplied by the effective crew size."""
    return float(total_hours or 0.0) * effective_crew_size(crew_count, worker_names)


def entry_man_hours(entry) -> float:
    """man_hours for any object exposing total_hours, crew_count, worker_names."""
    return man_hours(entry.total_hours, entry.crew_count, entry.worker_names)


def round_to_quarter_hour(hours: float) -> float:
    """Nearest quarter hour, halves rounding up."""
    return math.floor(hours * 4 + 0.5) / 4


def hours_between(start: datetime, end: datetime, *, quarter_hour: bool = True) -> float:
    """Duration in hours between two timestamps.

    Raises ValidationError unless end is strictly after start. By default the
    result is rounded to the nearest quarter hour, which is how every
    timestamp-derived duration is stored.
    """
    if start is None or end is None:
        raise ValidationError("Start and end time are both required.")
    if end <= start:
        raise ValidationError("End time must be after start time.")
    hours = (end - start).total_seconds() / 3600.0
    return round_to_quarter_hour(hours) if quarter_hour else hours


def resolve_crew(
    crew_count: int | None = None,
    worker_names: Sequence[str] | None = None,
    *,
    select_workers: bool = False,
) -> tuple[int, list[str]]:
    """Validate a crew selection and return (crew_count, worker_names).

    In select-workers mode at least one name is required and the count follows
    the list. Otherwise crew_count must be a positive integer (default 1) and
    the worker list is empty.
    """
    names = [n.strip() for n in (worker_names or []) if n and n.strip()]
    if select_workers:
        if not names:
            raise ValidationError("Select at least one worker.")
        return len(names), names
    if names:
        return len(names), names
    if crew_count is None:
        return 1, []
    if int(crew_count) < 1:
        raise ValidationError("Crew count must be at least 1.")
    return int(crew_count), []
