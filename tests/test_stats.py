"""Tests for habitlog.core.stats — streaks, week and month summaries."""
import pytest
from datetime import date, datetime, timedelta
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from habitlog.core.stats import (
    current_exercise_streak,
    current_no_alcohol_streak,
    longest_exercise_streak,
    month_summary,
    ordered,
    streak_summary,
    week_start,
    week_summary,
)
from habitlog.models import DailyRecord, ExerciseType

MON = date(2024, 1, 1)  # a Monday
TUE, WED, THU = MON + timedelta(1), MON + timedelta(2), MON + timedelta(3)
SUN_BEFORE = MON - timedelta(1)


def rec(day, kind=None, **kw):
    return DailyRecord(date=day, exercise_type=ExerciseType.parse(kind) if kind else None, **kw)


# ── Current streaks ──────────────────────────────────────────────────────────

class TestCurrentExerciseStreak:
    def test_empty(self):
        assert current_exercise_streak([], MON) == 0

    def test_single_exercise_day(self):
        assert current_exercise_streak([rec(MON, "Gym")], MON) == 1

    def test_rest_day_breaks(self):
        records = [rec(MON, "Gym"), rec(TUE, "Rest Day")]
        assert current_exercise_streak(records, TUE) == 0

    def test_scenario(self):
        records = [rec(MON, "Gym"), rec(TUE, "RestDay"), rec(WED, "Running"), rec(THU, "Running")]
        assert current_exercise_streak(records, THU) == 2
        assert longest_exercise_streak(records) == 2
        assert current_no_alcohol_streak(records, THU) == 4

    def test_storage_order_ignored(self):
        records = [rec(THU, "Running"), rec(TUE, "Rest Day"), rec(MON, "Gym"), rec(WED, "Running")]
        assert current_exercise_streak(records, THU) == 2

    def test_missing_today_row_does_not_break(self):
        records = [rec(MON, "Gym"), rec(TUE, "Yoga")]
        assert current_exercise_streak(records, THU) == 2

    def test_gap_between_rows_breaks(self):
        records = [rec(MON, "Gym"), rec(WED, "Gym"), rec(THU, "Gym")]
        assert current_exercise_streak(records, THU) == 2

    def test_empty_type_is_not_exercise(self):
        records = [rec(MON, "Gym"), rec(TUE)]
        assert current_exercise_streak(records, TUE) == 0

    def test_future_rows_ignored(self):
        records = [rec(MON, "Gym"), rec(TUE, "Rest Day")]
        assert current_exercise_streak(records, MON) == 1

    def test_accepts_datetime_now(self):
        assert current_exercise_streak([rec(MON, "Gym")], datetime(2024, 1, 1, 21, 0)) == 1


class TestNoAlcoholStreak:
    def test_zero_and_absent_count(self):
        records = [rec(MON, beer_count=0), rec(TUE), rec(WED, beer_count=0)]
        assert current_no_alcohol_streak(records, WED) == 3

    def test_beers_break(self):
        records = [rec(MON, beer_count=0), rec(TUE, beer_count=2), rec(WED, beer_count=0)]
        assert current_no_alcohol_streak(records, WED) == 1

    def test_malformed_beer_count_treated_as_absent(self):
        records = [rec(MON, beer_count="lots"), rec(TUE, beer_count=0)]
        assert current_no_alcohol_streak(records, TUE) == 2


# ── Longest streak ───────────────────────────────────────────────────────────

class TestLongestStreak:
    def test_empty(self):
        assert longest_exercise_streak([]) == 0

    def test_non_decreasing_as_days_added(self):
        records, seen = [], []
        for i in range(5):
            records.append(rec(MON + timedelta(i), "Cycling"))
            seen.append(longest_exercise_streak(records))
        assert seen == [1, 2, 3, 4, 5]

    def test_rest_day_keeps_max(self):
        records = [rec(MON + timedelta(i), "Gym") for i in range(3)]
        records.append(rec(THU, "Rest Day"))
        records.append(rec(THU + timedelta(1), "Gym"))
        assert longest_exercise_streak(records) == 3
        assert current_exercise_streak(records, THU + timedelta(1)) == 1

    def test_calendar_gap_does_not_reset(self):
        records = [rec(MON, "Gym"), rec(WED, "Gym")]
        assert longest_exercise_streak(records) == 2
        # the current streak still stops at the hole
        assert current_exercise_streak(records, WED) == 1

    def test_streak_summary_bundles(self):
        s = streak_summary([rec(MON, "Gym", beer_count=1), rec(TUE, "Gym", beer_count=0)], TUE)
        assert (s.exercise, s.no_alcohol, s.longest_exercise) == (2, 1, 2)


# ── Week summary ─────────────────────────────────────────────────────────────

class TestWeekSummary:
    def test_week_start(self):
        assert week_start(WED) == MON
        assert week_start(MON) == MON
        assert week_start(date(2024, 1, 7)) == MON  # Sunday belongs to the week before

    def test_boundary_monday_midnight_in_sunday_night_out(self):
        records = [
            rec(datetime(2023, 12, 31, 23, 59), "Gym", exercise_minutes=99, beer_count=5),
            rec(datetime(2024, 1, 1, 0, 0), "Gym", exercise_minutes=30, beer_count=1),
        ]
        week = week_summary(records, datetime(2024, 1, 3, 12, 0))
        assert week.exercise_days == 1
        assert week.total_minutes == 30
        assert week.total_beers == 1

    def test_sunday_now_covers_whole_week(self):
        records = [rec(SUN_BEFORE, "Gym"), rec(MON, "Gym"), rec(date(2024, 1, 7), "Gym")]
        assert week_summary(records, date(2024, 1, 7)).exercise_days == 2

    def test_totals_and_average(self):
        records = [
            rec(MON, "Gym", exercise_minutes=45, beer_count=0, weight_kg=80.0),
            rec(TUE, "Rest Day", beer_count=3, weight_kg=81.0),
            rec(WED, "Running", exercise_minutes=30),
        ]
        week = week_summary(records, WED)
        assert week.exercise_days == 2
        assert week.total_minutes == 75
        assert week.total_beers == 3
        assert week.avg_weight == pytest.approx(80.5)

    def test_no_weights_is_none(self):
        assert week_summary([rec(MON, "Gym")], MON).avg_weight is None

    def test_empty(self):
        week = week_summary([], MON)
        assert (week.exercise_days, week.total_minutes, week.total_beers, week.avg_weight) == (0, 0, 0, None)

    def test_malformed_fields_excluded(self):
        records = [
            rec(MON, "Gym", exercise_minutes="abc", weight_kg=-3),
            rec(TUE, "Gym", exercise_minutes=20, weight_kg="heavy"),
        ]
        week = week_summary(records, TUE)
        assert week.total_minutes == 20
        assert week.avg_weight is None


# ── Month summary ────────────────────────────────────────────────────────────

class TestMonthSummary:
    def test_empty_rate_is_zero(self):
        month = month_summary([], MON)
        assert month.total_days == 0
        assert month.beer_free_rate == 0

    def test_window_is_thirty_days_inclusive(self):
        now = date(2024, 3, 31)
        records = [
            rec(now - timedelta(days=31), "Gym"),
            rec(now - timedelta(days=30), "Gym"),
            rec(now, "Gym"),
        ]
        month = month_summary(records, now)
        assert month.total_days == 2
        assert month.exercise_days == 2

    def test_rate_rounds(self):
        now = date(2024, 3, 31)
        records = [rec(now - timedelta(days=i), beer_count=(0 if i == 0 else 2)) for i in range(3)]
        assert month_summary(records, now).beer_free_rate == 33
        records = [rec(now - timedelta(days=i), beer_count=(2 if i == 0 else 0)) for i in range(3)]
        assert month_summary(records, now).beer_free_rate == 67

    def test_rate_rounds_half_up(self):
        now = date(2024, 3, 31)
        records = [rec(now - timedelta(days=i), beer_count=(0 if i == 0 else 1)) for i in range(8)]
        month = month_summary(records, now)
        assert month.no_alcohol_days == 1
        assert month.beer_free_rate == 13

    def test_counts_every_row_in_window(self):
        records = [rec(MON, "Gym", beer_count=0), rec(TUE), rec(WED, "Rest Day", beer_count=4)]
        month = month_summary(records, WED)
        assert month.total_days == 3
        assert month.exercise_days == 1
        assert month.no_alcohol_days == 2


class TestOrdered:
    def test_sorts_and_dedupes(self):
        records = [rec(WED, "Gym"), rec(MON, "Gym"), rec(WED, "Yoga")]
        out = ordered(records)
        assert [r.date for r in out] == [MON, WED]
        assert out[-1].exercise_type is ExerciseType.YOGA

    def test_drops_undated(self):
        assert ordered([DailyRecord(date="not a date")]) == []
