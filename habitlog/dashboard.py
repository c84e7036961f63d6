"""
Dashboard view: a snapshot of streaks, this week and the last 30 days.

build_dashboard() is a pure function of the record set and `now`;
render_dashboard() and to_json() only format it.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable

from habitlog.composer import format_weight
from habitlog.core.stats import (
    MonthSummary,
    StreakSummary,
    WeekSummary,
    month_summary,
    streak_summary,
    week_start,
    week_summary,
)
from habitlog.models import DailyRecord
from habitlog.utils.output import colorize_streak, streak_band


@dataclass
class Dashboard:
    generated_at: str
    week_of: str
    streaks: StreakSummary
    week: WeekSummary
    month: MonthSummary


def build_dashboard(records: Iterable[DailyRecord], now: datetime | date) -> Dashboard:
    records = list(records)
    stamp = now if isinstance(now, datetime) else datetime.combine(now, datetime.min.time())
    return Dashboard(
        generated_at=stamp.strftime("%Y-%m-%d %H:%M"),
        week_of=week_start(now).isoformat(),
        streaks=streak_summary(records, now),
        week=week_summary(records, now),
        month=month_summary(records, now),
    )


def to_payload(dash: Dashboard) -> dict[str, Any]:
    payload = asdict(dash)
    payload["streak_bands"] = {
        "exercise": streak_band(dash.streaks.exercise),
        "no_alcohol": streak_band(dash.streaks.no_alcohol),
    }
    return payload


def render_dashboard(dash: Dashboard, color: bool = True) -> str:
    def streak(value: int) -> str:
        text = f"{value} days"
        return colorize_streak(text, value) if color else text

    rows: list[str] = [
        "Habit Tracker Dashboard",
        f"Last updated: {dash.generated_at}",
        "",
        "Current Streaks",
        f"  {'Exercise Streak':<26}{streak(dash.streaks.exercise)}",
        f"  {'No-Alcohol Streak':<26}{streak(dash.streaks.no_alcohol)}",
        f"  {'Longest Exercise Streak':<26}{dash.streaks.longest_exercise} days",
        "",
        f"This Week (from {dash.week_of})",
        f"  {'Exercise Days':<26}{dash.week.exercise_days} / 7",
        f"  {'Total Exercise Time':<26}{dash.week.total_minutes} min",
        f"  {'Total Beers':<26}{dash.week.total_beers}",
        f"  {'Avg Weight':<26}{format_weight(dash.week.avg_weight)}",
        "",
        "Last 30 Days",
        f"  {'Exercise Days':<26}{dash.month.exercise_days} / 30",
        f"  {'No-Alcohol Days':<26}{dash.month.no_alcohol_days} / 30",
        f"  {'Beer-Free Rate':<26}{dash.month.beer_free_rate}%",
    ]
    return "\n".join(rows)


def save_json(dash: Dashboard, filepath: str | Path) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_payload(dash), indent=2), encoding="utf-8")
    return path
