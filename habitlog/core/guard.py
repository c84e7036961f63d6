"""
Idempotent action guard: each scheduled action happens at most once per day.

Every action runs inside HabitLock.hold(). A busy lock is a silent skip: the
next scheduler tick retries. Markers are written only after the side effect
(row insert, send) has returned without error; send failures propagate and
leave the marker alone so the action retries.
"""
from __future__ import annotations

from collections.abc import MutableMapping
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional

from habitlog.composer import Message, compose_reminder, compose_weekly_summary
from habitlog.core.lock import HabitLock
from habitlog.core.stats import streak_summary, week_summary
from habitlog.errors import LockContention
from habitlog.models import DailyRecord, as_day
from habitlog.storage.store import HabitStore
from habitlog.utils.logger import get_logger

log = get_logger("habitlog.guard")

DAILY_REMINDER = "dailyReminder"
WEEKLY_SUMMARY = "weeklySummary"

SendFn = Callable[[Message], None]


class ActionOutcome(str, Enum):
    COMPLETED = "completed"
    SKIPPED_ALREADY_DONE = "skipped_already_done"
    SKIPPED_LOCK_BUSY = "skipped_lock_busy"
    SKIPPED_PRECONDITION = "skipped_precondition"

    @property
    def completed(self) -> bool:
        return self is ActionOutcome.COMPLETED


def _today(now: datetime | date) -> date:
    day = as_day(now)
    if day is None:
        raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")
    return day


def ensure_today_record(store: HabitStore, now: datetime | date,
                        lock: HabitLock) -> ActionOutcome:
    """Append a date-only record for today unless one already exists."""
    today = _today(now)
    try:
        with lock.hold():
            if any(r.date == today for r in store.list_records()):
                log.debug("Row for %s already present", today)
                return ActionOutcome.SKIPPED_ALREADY_DONE
            store.append_record(DailyRecord(date=today))
    except LockContention as exc:
        log.debug("ensure_today_record skipped: %s", exc)
        return ActionOutcome.SKIPPED_LOCK_BUSY
    log.info("Added row for %s", today)
    return ActionOutcome.COMPLETED


def maybe_send_reminder(store: HabitStore, markers: MutableMapping,
                        now: datetime | date, send_fn: SendFn, lock: HabitLock,
                        link: str = "") -> ActionOutcome:
    """Nag once per day, and only if today's exercise hasn't been logged."""
    today = _today(now)
    try:
        with lock.hold():
            if as_day(markers.get(DAILY_REMINDER)) == today:
                log.debug("Reminder already sent for %s", today)
                return ActionOutcome.SKIPPED_ALREADY_DONE

            records = store.list_records()
            todays = [r for r in records if r.date == today]
            if todays and todays[-1].has_exercise_entry:
                log.debug("Habits for %s already recorded; no reminder", today)
                return ActionOutcome.SKIPPED_PRECONDITION

            send_fn(compose_reminder(streak_summary(records, now), link=link))
            markers[DAILY_REMINDER] = today
    except LockContention as exc:
        log.debug("maybe_send_reminder skipped: %s", exc)
        return ActionOutcome.SKIPPED_LOCK_BUSY
    log.info("Reminder sent for %s", today)
    return ActionOutcome.COMPLETED


def send_weekly_summary(store: HabitStore, now: datetime | date, send_fn: SendFn,
                        lock: HabitLock, markers: Optional[MutableMapping] = None,
                        on_sent: Optional[Callable[[], object]] = None,
                        link: str = "") -> ActionOutcome:
    """Send the week's stats. With `markers`, at most once per day."""
    today = _today(now)
    try:
        with lock.hold():
            if markers is not None and as_day(markers.get(WEEKLY_SUMMARY)) == today:
                log.debug("Weekly summary already sent for %s", today)
                return ActionOutcome.SKIPPED_ALREADY_DONE

            records = store.list_records()
            message = compose_weekly_summary(
                week_summary(records, now), streak_summary(records, now), link=link,
            )
            send_fn(message)
            if markers is not None:
                markers[WEEKLY_SUMMARY] = today
            if on_sent is not None:
                on_sent()
    except LockContention as exc:
        log.debug("send_weekly_summary skipped: %s", exc)
        return ActionOutcome.SKIPPED_LOCK_BUSY
    log.info("Weekly summary sent for week of %s", today)
    return ActionOutcome.COMPLETED
