"""
HabitTracker: the entry points a scheduler (cron) or the CLI invokes.

Wires config, store, markers, lock and transport together and delegates to
the guard. Benign skips are silent; transport and store failures are logged
and re-raised.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable

from habitlog.comm.factory import build_notifier
from habitlog.composer import Message
from habitlog.config import HabitConfig, get_config
from habitlog.core import guard
from habitlog.core.guard import ActionOutcome
from habitlog.core.lock import HabitLock
from habitlog.core.schedule import ENSURE_ROW, REMINDER, WEEKLY, due_actions
from habitlog.dashboard import Dashboard, build_dashboard, to_payload
from habitlog.errors import HabitLogError
from habitlog.models import (
    MAX_BEERS,
    DailyRecord,
    ExerciseType,
    parse_beers,
    parse_minutes,
    parse_weight,
)
from habitlog.storage.store import HabitStore, MarkerStore
from habitlog.utils.logger import get_logger


class HabitTracker:
    def __init__(self, config: HabitConfig | None = None,
                 send_fn: Callable[[Message], None] | None = None) -> None:
        self.config = config or get_config()
        self.log = get_logger(
            "habitlog.tracker",
            log_dir=self.config.log_dir,
            level=self.config.log_level,
        )
        self.store = HabitStore(self.config.db_path)
        self.markers = MarkerStore(self.store)
        self.lock = HabitLock(
            self.config.lock.path,
            timeout=self.config.lock.timeout_seconds,
            poll_interval=self.config.lock.poll_interval_seconds,
        )
        self._send_fn = send_fn
        # Outcome of the row step of the last initialize() call.
        self.today_row: ActionOutcome | None = None

    @property
    def send_fn(self) -> Callable[[Message], None]:
        # Built lazily: a misconfigured transport shouldn't break `init` or `log`.
        if self._send_fn is None:
            self._send_fn = build_notifier(self.config.notify)
        return self._send_fn

    # ── Setup ─────────────────────────────────────────────────────────────
    def initialize(self, now: datetime | date | None = None) -> bool:
        """Create the store if absent, add today's row, publish the dashboard.
        Returns True when a new database was created."""
        now = now or datetime.now()
        created = self.store.initialize()
        self.log.info("Store %s at %s", "created" if created else "already present",
                      self.config.db_path)
        self.today_row = self.ensure_today_record(now)
        self.refresh_dashboard(now)
        return created

    # ── Guarded actions ───────────────────────────────────────────────────
    def ensure_today_record(self, now: datetime | date | None = None) -> ActionOutcome:
        now = now or datetime.now()
        return guard.ensure_today_record(self.store, now, self.lock)

    def maybe_send_reminder(self, now: datetime | date | None = None) -> ActionOutcome:
        now = now or datetime.now()
        return self._run_send(
            "reminder",
            lambda: guard.maybe_send_reminder(
                self.store, self.markers, now, self.send_fn, self.lock,
                link=self.config.dashboard_url,
            ),
        )

    def send_weekly_summary(self, now: datetime | date | None = None,
                            force: bool = False) -> ActionOutcome:
        """`force` skips the once-per-day marker check (manual resend)."""
        now = now or datetime.now()
        return self._run_send(
            "weekly summary",
            lambda: guard.send_weekly_summary(
                self.store, now, self.send_fn, self.lock,
                markers=None if force else self.markers,
                on_sent=lambda: self.refresh_dashboard(now),
                link=self.config.dashboard_url,
            ),
        )

    def _run_send(self, label: str, action: Callable[[], ActionOutcome]) -> ActionOutcome:
        try:
            outcome = action()
        except HabitLogError as exc:
            self.log.error("%s failed: %s", label.capitalize(), exc)
            raise
        self.log.debug("%s: %s", label, outcome.value)
        return outcome

    # ── Dashboard ─────────────────────────────────────────────────────────
    def refresh_dashboard(self, now: datetime | date | None = None) -> Dashboard:
        """Recompute and republish the snapshot. Unlocked: it only reads records
        and overwrites the single snapshot row."""
        now = now or datetime.now()
        dash = build_dashboard(self.store.list_records(), now)
        self.store.save_dashboard(dash.generated_at, to_payload(dash))
        return dash

    # ── Scheduler tick ────────────────────────────────────────────────────
    def tick(self, now: datetime | None = None) -> dict[str, ActionOutcome]:
        """Run whatever is due. Meant to be called hourly.

        Actions are independent: a failing one doesn't stop the rest. The
        first failure is re-raised once every due action has been tried."""
        now = now or datetime.now()
        runners = {
            ENSURE_ROW: self.ensure_today_record,
            WEEKLY: self.send_weekly_summary,
            REMINDER: self.maybe_send_reminder,
        }
        results: dict[str, ActionOutcome] = {}
        errors: list[HabitLogError] = []
        for name in due_actions(now, self.config.schedule):
            try:
                results[name] = runners[name](now)
            except HabitLogError as exc:
                self.log.error("tick: %s failed: %s", name, exc)
                errors.append(exc)
        if errors:
            raise errors[0]
        return results

    # ── Manual entry ──────────────────────────────────────────────────────
    def log_day(self, day: date, *, exercise_type: Any = None, exercise_minutes: Any = None,
                beer_count: Any = None, weight_kg: Any = None,
                notes: str | None = None) -> DailyRecord:
        """Set fields for `day`, overwriting in place. Fields left as None keep
        their stored value. Invalid input raises ValueError; nothing is written."""
        updates: dict[str, Any] = {}
        if exercise_type is not None:
            kind = ExerciseType.parse(exercise_type)
            if kind is None:
                choices = ", ".join(t.value for t in ExerciseType)
                raise ValueError(f"Unknown exercise type '{exercise_type}'. Choose from: {choices}")
            updates["exercise_type"] = kind
        if exercise_minutes is not None:
            minutes = parse_minutes(exercise_minutes)
            if minutes is None:
                raise ValueError(f"Duration must be a non-negative whole number, got {exercise_minutes}")
            updates["exercise_minutes"] = minutes
        if beer_count is not None:
            beers = parse_beers(beer_count)
            if beers is None:
                raise ValueError(f"Beers must be a whole number between 0 and {MAX_BEERS}, got {beer_count}")
            updates["beer_count"] = beers
        if weight_kg is not None:
            weight = parse_weight(weight_kg)
            if weight is None:
                raise ValueError(f"Weight must be a positive number, got {weight_kg}")
            updates["weight_kg"] = weight
        if notes is not None:
            updates["notes"] = notes

        with self.lock.hold():
            record = self.store.find_record(day) or DailyRecord(date=day)
            for key, val in updates.items():
                setattr(record, key, val)
            if not self.store.update_record(record):
                self.store.append_record(record)
        self.log.info("Logged %s: %s", day, ", ".join(sorted(updates)) or "no changes")
        return record
