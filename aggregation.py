"""
Aggregator: groups a job's time entries by calendar date, by component and by
user. Every grouping is total over its input: entries whose component or user
no longer resolves are kept under a placeholder name.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Iterable, Mapping

from durations import entry_man_hours
from records import UNKNOWN_COMPONENT, UNKNOWN_USER

CLOCK_IN_LABEL = "Clock-In"


def local_date(ts: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of a timestamp in the local zone.

    Naive timestamps are taken as already local. Aware ones are converted to
    ``tz`` (the system zone when tz is None).
    """
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


def share_percent(part: float, total: float) -> float:
    if not total:
        return 0.0
    return part / total * 100


@dataclass
class ComponentWork:
    """One component's work on one date."""

    component_id: int | None
    component_name: str
    entry_count: int = 0
    total_hours: float = 0.0
    total_man_hours: float = 0.0


@dataclass
class DateGroup:
    date: date
    component_entry_count: int = 0
    component_man_hours: float = 0.0
    generic_entry_count: int = 0
    generic_man_hours: float = 0.0
    total_hours: float = 0.0
    components: list[ComponentWork] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return self.component_entry_count + self.generic_entry_count

    @property
    def total_man_hours(self) -> float:
        return self.component_man_hours + self.generic_man_hours


@dataclass
class DateSummary:
    date: date
    entry_count: int = 0
    total_hours: float = 0.0
    total_man_hours: float = 0.0


@dataclass
class ComponentTimeSummary:
    component_id: int | None
    component_name: str
    entry_count: int = 0
    total_hours: float = 0.0
    total_man_hours: float = 0.0
    share_percent: float = 0.0
    dates: list[DateSummary] = field(default_factory=list)


@dataclass
class UserSummary:
    user_id: int | None
    user_name: str
    entry_count: int = 0
    total_hours: float = 0.0
    total_man_hours: float = 0.0
    component_man_hours: float = 0.0
    clock_in_man_hours: float = 0.0
    components: list[ComponentWork] = field(default_factory=list)
    dates: list[DateSummary] = field(default_factory=list)


@dataclass
class TimeSummary:
    """Everything the time views of a job need, computed in one pass."""

    date_groups: list[DateGroup]
    components: list[ComponentTimeSummary]
    users: list[UserSummary]
    entry_count: int
    total_hours: float
    total_man_hours: float
    clock_in_man_hours: float
    component_man_hours: float
    first_work_date: date | None
    last_work_date: date | None
    crew_members: list[str]


def _component_name(component_id, component_names: Mapping) -> str:
    if component_id is None:
        return CLOCK_IN_LABEL
    return component_names.get(component_id) or UNKNOWN_COMPONENT


def _user_name(user_id, user_names: Mapping) -> str:
    if user_id is None:
        return UNKNOWN_USER
    return user_names.get(user_id) or UNKNOWN_USER


def _by_hours_then_name(item) -> tuple:
    name = getattr(item, "component_name", None) or getattr(item, "user_name", "")
    return (-item.total_man_hours, -item.total_hours, name.lower())


def _add(target, entry, hours: float, mh: float) -> None:
    target.entry_count += 1
    target.total_hours += hours
    target.total_man_hours += mh


def only_clock_in(entries: Iterable) -> list:
    """Entries with no component (generic on-site time)."""
    return [e for e in entries if e.component_id is None]


def group_by_date(
    entries: Iterable,
    component_names: Mapping | None = None,
    tz: tzinfo | None = None,
) -> list[DateGroup]:
    """Date buckets, newest first, each split into component work and generic time."""
    component_names = component_names or {}
    groups: dict[date, DateGroup] = {}
    per_component: dict[date, dict] = defaultdict(dict)
    for entry in entries:
        day = local_date(entry.start_time, tz)
        group = groups.get(day)
        if group is None:
            group = groups[day] = DateGroup(date=day)
        hours = float(entry.total_hours or 0.0)
        mh = entry_man_hours(entry)
        group.total_hours += hours
        if entry.component_id is None:
            group.generic_entry_count += 1
            group.generic_man_hours += mh
        else:
            group.component_entry_count += 1
            group.component_man_hours += mh
        work = per_component[day].get(entry.component_id)
        if work is None:
            work = per_component[day][entry.component_id] = ComponentWork(
                entry.component_id, _component_name(entry.component_id, component_names)
            )
        _add(work, entry, hours, mh)
    for day, group in groups.items():
        group.components = sorted(per_component[day].values(), key=_by_hours_then_name)
    return sorted(groups.values(), key=lambda g: g.date, reverse=True)


def _date_summaries(entries_by_date: dict) -> list[DateSummary]:
    return sorted(entries_by_date.values(), key=lambda d: d.date, reverse=True)


def group_by_component(
    entries: Iterable,
    component_names: Mapping | None = None,
    tz: tzinfo | None = None,
) -> list[ComponentTimeSummary]:
    """Per-component totals sorted by hours, descending, with share of the grand total."""
    component_names = component_names or {}
    groups: dict = {}
    dates: dict = defaultdict(dict)
    grand_total = 0.0
    for entry in entries:
        cid = entry.component_id
        summary = groups.get(cid)
        if summary is None:
            summary = groups[cid] = ComponentTimeSummary(cid, _component_name(cid, component_names))
        hours = float(entry.total_hours or 0.0)
        mh = entry_man_hours(entry)
        _add(summary, entry, hours, mh)
        grand_total += mh
        day = local_date(entry.start_time, tz)
        ds = dates[cid].get(day)
        if ds is None:
            ds = dates[cid][day] = DateSummary(day)
        _add(ds, entry, hours, mh)
    for cid, summary in groups.items():
        summary.share_percent = share_percent(summary.total_man_hours, grand_total)
        summary.dates = _date_summaries(dates[cid])
    return sorted(groups.values(), key=_by_hours_then_name)


def group_by_user(
    entries: Iterable,
    user_names: Mapping | None = None,
    component_names: Mapping | None = None,
    tz: tzinfo | None = None,
) -> list[UserSummary]:
    """Per-user totals with a nested per-component breakdown."""
    user_names = user_names or {}
    component_names = component_names or {}
    users: dict = {}
    components: dict = defaultdict(dict)
    dates: dict = defaultdict(dict)
    for entry in entries:
        uid = entry.user_id
        summary = users.get(uid)
        if summary is None:
            summary = users[uid] = UserSummary(uid, _user_name(uid, user_names))
        hours = float(entry.total_hours or 0.0)
        mh = entry_man_hours(entry)
        _add(summary, entry, hours, mh)
        if entry.component_id is None:
            summary.clock_in_man_hours += mh
        else:
            summary.component_man_hours += mh
        cid = entry.component_id
        work = components[uid].get(cid)
        if work is None:
            work = components[uid][cid] = ComponentWork(cid, _component_name(cid, component_names))
        _add(work, entry, hours, mh)
        day = local_date(entry.start_time, tz)
        ds = dates[uid].get(day)
        if ds is None:
            ds = dates[uid][day] = DateSummary(day)
        _add(ds, entry, hours, mh)
    for uid, summary in users.items():
        summary.components = sorted(components[uid].values(), key=_by_hours_then_name)
        summary.dates = _date_summaries(dates[uid])
    return sorted(users.values(), key=_by_hours_then_name)


def summarize_time(
    entries: Iterable,
    *,
    component_names: Mapping | None = None,
    user_names: Mapping | None = None,
    tz: tzinfo | None = None,
    clock_in_only: bool = False,
) -> TimeSummary:
    """Build every time grouping for a job's entries."""
    entries = list(entries)
    if clock_in_only:
        entries = only_clock_in(entries)
    user_names = user_names or {}
    days = [local_date(e.start_time, tz) for e in entries]
    clock_in = sum(entry_man_hours(e) for e in entries if e.component_id is None)
    component = sum(entry_man_hours(e) for e in entries if e.component_id is not None)
    crew = sorted({user_names[e.user_id] for e in entries if e.user_id in user_names and user_names[e.user_id]})
    return TimeSummary(
        date_groups=group_by_date(entries, component_names, tz),
        components=group_by_component(entries, component_names, tz),
        users=group_by_user(entries, user_names, component_names, tz),
        entry_count=len(entries),
        total_hours=sum(float(e.total_hours or 0.0) for e in entries),
        total_man_hours=clock_in + component,
        clock_in_man_hours=clock_in,
        component_man_hours=component,
        first_work_date=min(days) if days else None,
        last_work_date=max(days) if days else None,
        crew_members=crew,
    )
