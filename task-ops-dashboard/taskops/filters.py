"""Filter pipeline for the task table.

Every axis of :class:`FilterConfig` narrows the list independently and the
axes are ANDed together. The result keeps the order of the input list, which
the store returns newest first.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, NamedTuple, Optional

from taskops.models import Task


ALL = "all"

STATUS_OPTIONS: Dict[str, str] = {
    "all": "All Status",
    "boh": "BOH Only",
    "foh": "FOH Only",
    "both": "Both BOH & FOH",
    "none": "Neither",
}

DATE_PRESET_OPTIONS: Dict[str, str] = {
    "all": "All Time",
    "today": "Today",
    "7days": "Last 7 Days",
    "30days": "Last 30 Days",
    "thisMonth": "This Month",
    "lastMonth": "Last Month",
    "custom": "Custom Range",
}

STAT_FILTERS = ("all", "boh", "foh", "unclassified")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_local(dt: datetime, tz: Optional[tzinfo]) -> datetime:
    """Naive UTC -> naive wall time in ``tz`` (unchanged when tz is None)."""
    if tz is None:
        return dt
    return dt.replace(tzinfo=timezone.utc).astimezone(tz).replace(tzinfo=None)


def to_utc(dt: Optional[datetime], tz: Optional[tzinfo]) -> Optional[datetime]:
    """Naive wall time in ``tz`` -> naive UTC."""
    if dt is None or tz is None:
        return dt
    return dt.replace(tzinfo=tz).astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class FilterConfig:
    search: str = ""
    assistant: str = ALL
    client: str = ALL
    status: str = ALL
    date_preset: str = ALL
    custom_start: Optional[datetime] = None
    custom_end: Optional[datetime] = None
    stat_filter: str = ALL

    def __post_init__(self):
        if self.status not in STATUS_OPTIONS:
            raise ValueError(f"unknown status filter: {self.status!r}")
        if self.date_preset not in DATE_PRESET_OPTIONS:
            raise ValueError(f"unknown date preset: {self.date_preset!r}")
        if self.stat_filter not in STAT_FILTERS:
            raise ValueError(f"unknown stat filter: {self.stat_filter!r}")


class DateRange(NamedTuple):
    start: Optional[datetime]
    end: Optional[datetime]


@dataclass(frozen=True)
class TaskStats:
    total: int
    boh: int
    foh: int
    unclassified: int

    @staticmethod
    def _pct(n: int, total: int) -> float:
        return (n / total) * 100 if total > 0 else 0.0

    @property
    def boh_percentage(self) -> float:
        return self._pct(self.boh, self.total)

    @property
    def foh_percentage(self) -> float:
        return self._pct(self.foh, self.total)

    @property
    def unclassified_percentage(self) -> float:
        return self._pct(self.unclassified, self.total)


def _start_of_month(dt: datetime) -> datetime:
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _end_of_month(dt: datetime) -> datetime:
    last_day = calendar.monthrange(dt.year, dt.month)[1]
    return dt.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)


def date_range_for_preset(
    preset: str,
    now: datetime,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
) -> DateRange:
    if preset == "today":
        return DateRange(now.replace(hour=0, minute=0, second=0, microsecond=0), now)
    if preset == "7days":
        return DateRange(now - timedelta(days=7), now)
    if preset == "30days":
        return DateRange(now - timedelta(days=30), now)
    if preset == "thisMonth":
        return DateRange(_start_of_month(now), _end_of_month(now))
    if preset == "lastMonth":
        last_month = _start_of_month(now) - timedelta(days=1)
        return DateRange(_start_of_month(last_month), _end_of_month(last_month))
    if preset == "custom":
        return DateRange(custom_start, custom_end)
    return DateRange(None, None)


def _matches_status(t: Task, status: str) -> bool:
    if status == "boh":
        return t.boh
    if status == "foh":
        return t.foh
    if status == "both":
        return t.boh and t.foh
    if status in ("none", "unclassified"):
        return not t.boh and not t.foh
    return True


def filter_tasks(
    tasks: Iterable[Task],
    config: FilterConfig,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[Task]:
    """Apply every axis of ``config``.

    ``now`` and task timestamps are naive UTC. Day and month boundaries of the
    date presets, and custom range bounds, are wall times in ``tz`` (UTC when
    omitted).
    """
    result = list(tasks)

    if config.search.strip():
        query = config.search.lower()
        result = [
            t for t in result
            if query in t.task_name.lower() or query in t.task_description.lower()
        ]

    if config.assistant != ALL:
        result = [t for t in result if t.assistant == config.assistant]

    if config.client != ALL:
        result = [t for t in result if t.client == config.client]

    if config.status != ALL:
        result = [t for t in result if _matches_status(t, config.status)]

    if config.date_preset != ALL:
        now = now or utcnow()
        start, end = date_range_for_preset(
            config.date_preset, to_local(now, tz), config.custom_start, config.custom_end
        )
        start, end = to_utc(start, tz), to_utc(end, tz)
        if start is not None:
            end = end or now
            result = [
                t for t in result
                if t.created_at is not None and start <= t.created_at <= end
            ]

    # Stat tiles stack on top of the status dropdown.
    if config.stat_filter != ALL:
        result = [t for t in result if _matches_status(t, config.stat_filter)]

    return result


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    total = boh = foh = unclassified = 0
    for t in tasks:
        total += 1
        boh += t.boh
        foh += t.foh
        unclassified += not t.boh and not t.foh
    return TaskStats(total=total, boh=boh, foh=foh, unclassified=unclassified)


def distinct_values(tasks: Iterable[Task], field: str) -> List[str]:
    """Non-empty values of a text field in first-seen order."""
    seen: Dict[str, None] = {}
    for t in tasks:
        value = getattr(t, field)
        if value:
            seen.setdefault(value, None)
    return list(seen)
