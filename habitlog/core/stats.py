"""
Aggregation engine: streaks and windowed summaries over the daily log.

Pure functions. `now` is always injected; nothing here reads the clock or
touches the store. Every function first puts the records in ascending date
order, since storage order is not guaranteed to be chronological.
"""
from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from habitlog.models import DailyRecord, as_day, parse_beers, parse_minutes, parse_weight

MONTH_WINDOW_DAYS = 30


@dataclass
class StreakSummary:
    exercise: int = 0
    no_alcohol: int = 0
    longest_exercise: int = 0


@dataclass
class WeekSummary:
    exercise_days: int = 0
    total_minutes: int = 0
    total_beers: int = 0
    avg_weight: Optional[float] = None


@dataclass
class MonthSummary:
    total_days: int = 0
    exercise_days: int = 0
    no_alcohol_days: int = 0
    beer_free_rate: int = 0


def ordered(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    """Ascending by date, one record per day (the later-stored one wins)."""
    by_day: dict[date, DailyRecord] = {}
    for rec in records:
        day = as_day(rec.date)
        if day is None:
            continue
        by_day[day] = rec
    return [by_day[d] for d in sorted(by_day)]


def _today(now: datetime | date) -> date:
    day = as_day(now)
    if day is None:
        raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")
    return day


def _trailing_streak(
    records: Iterable[DailyRecord],
    now: datetime | date,
    qualifies: Callable[[DailyRecord], bool],
) -> int:
    today = _today(now)
    history = [r for r in ordered(records) if as_day(r.date) <= today]

    streak = 0
    newer: date | None = None
    for rec in reversed(history):
        day = as_day(rec.date)
        # A hole between two stored days ends the run; a missing row for
        # today does not, only rows that exist are inspected.
        if newer is not None and (newer - day).days > 1:
            break
        if not qualifies(rec):
            break
        streak += 1
        newer = day
    return streak


def current_exercise_streak(records: Iterable[DailyRecord], now: datetime | date) -> int:
    """Consecutive exercise days ending at the most recent record."""
    return _trailing_streak(records, now, lambda r: r.is_exercise_day)


def current_no_alcohol_streak(records: Iterable[DailyRecord], now: datetime | date) -> int:
    """Consecutive no-alcohol days ending at the most recent record."""
    return _trailing_streak(records, now, lambda r: r.is_no_alcohol_day)


def longest_exercise_streak(records: Iterable[DailyRecord]) -> int:
    """Longest run of consecutive exercise rows. Only rest/empty rows reset
    the run; calendar holes between rows do not."""
    longest = 0
    current = 0
    for rec in ordered(records):
        if rec.is_exercise_day:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def streak_summary(records: Iterable[DailyRecord], now: datetime | date) -> StreakSummary:
    records = list(records)
    return StreakSummary(
        exercise=current_exercise_streak(records, now),
        no_alcohol=current_no_alcohol_streak(records, now),
        longest_exercise=longest_exercise_streak(records),
    )


def week_start(now: datetime | date) -> date:
    """Monday of the week containing `now`."""
    today = _today(now)
    return today - timedelta(days=today.weekday())


def _window(records: Iterable[DailyRecord], start: date, end: date) -> list[DailyRecord]:
    return [r for r in ordered(records) if start <= as_day(r.date) <= end]


def week_summary(records: Iterable[DailyRecord], now: datetime | date) -> WeekSummary:
    """Totals from Monday 00:00 of the current week through `now`."""
    today = _today(now)
    window = _window(records, week_start(today), today)

    weights = [w for w in (parse_weight(r.weight_kg) for r in window) if w is not None]
    return WeekSummary(
        exercise_days=sum(1 for r in window if r.is_exercise_day),
        total_minutes=sum(parse_minutes(r.exercise_minutes) or 0 for r in window),
        total_beers=sum(parse_beers(r.beer_count) or 0 for r in window),
        avg_weight=statistics.mean(weights) if weights else None,
    )


def month_summary(records: Iterable[DailyRecord], now: datetime | date) -> MonthSummary:
    """Counts over the last 30 days, both ends inclusive."""
    today = _today(now)
    window = _window(records, today - timedelta(days=MONTH_WINDOW_DAYS), today)

    total_days = len(window)
    no_alcohol_days = sum(1 for r in window if r.is_no_alcohol_day)
    rate = 0
    if total_days > 0:
        # half-up, not banker's rounding
        rate = int(math.floor(no_alcohol_days / total_days * 100 + 0.5))
    return MonthSummary(
        total_days=total_days,
        exercise_days=sum(1 for r in window if r.is_exercise_day),
        no_alcohol_days=no_alcohol_days,
        beer_free_rate=rate,
    )
