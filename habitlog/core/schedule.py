"""
Which guarded actions are due at a given moment.

Meant for an hourly cron tick. Actions are idempotent, so "due" only needs
to mean "at or after the configured hour"; the guard handles the rest.
"""
from __future__ import annotations

import calendar
from datetime import datetime

from habitlog.config import ScheduleConfig

ENSURE_ROW = "ensure_today_record"
REMINDER = "maybe_send_reminder"
WEEKLY = "send_weekly_summary"


def due_actions(now: datetime, cfg: ScheduleConfig) -> list[str]:
    due = []
    if now.hour >= cfg.daily_row_hour:
        due.append(ENSURE_ROW)
    if now.weekday() == cfg.weekly_summary_weekday and now.hour >= cfg.weekly_summary_hour:
        due.append(WEEKLY)
    if now.hour >= cfg.reminder_hour:
        due.append(REMINDER)
    return due


def crontab_line(command: str = "habitlog tick") -> str:
    """An hourly crontab entry that drives every action."""
    return f"0 * * * * {command} >/dev/null 2>&1"


def describe(cfg: ScheduleConfig) -> list[str]:
    weekday = calendar.day_name[cfg.weekly_summary_weekday]
    return [
        f"Daily: add today's row from {cfg.daily_row_hour:02d}:00",
        f"Daily: reminder from {cfg.reminder_hour:02d}:00",
        f"Weekly: summary on {weekday} from {cfg.weekly_summary_hour:02d}:00",
    ]
