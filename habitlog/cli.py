"""
CLI entry point: habitlog init | add-today | log | remind | weekly |
dashboard | tick | status | crontab | config
argparse-based.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, datetime

from habitlog.errors import HabitLogError
from habitlog.models import ExerciseType, as_day


def _tracker(args):
    from habitlog.config import get_config, reload_config
    from habitlog.tracker import HabitTracker
    cfg = reload_config(args.config) if args.config else get_config()
    return HabitTracker(cfg)


def _now(args) -> datetime:
    return args.now or datetime.now()


_TODAY_ROW_NOTES = {
    "completed": "Today's row added",
    "skipped_already_done": "Today's row already present",
    "skipped_lock_busy": "Today's row skipped (tracker busy; next tick will add it)",
}


def cmd_init(args) -> None:
    from habitlog.utils.output import print_heading
    tracker = _tracker(args)
    created = tracker.initialize(_now(args))
    print_heading("Initialization complete!")
    print(f"  - Habit store {'created' if created else 'already present'}: {tracker.config.db_path}")
    print(f"  - {_TODAY_ROW_NOTES.get(tracker.today_row.value, tracker.today_row.value)}")
    print("  - Dashboard published")
    print("\nRun 'habitlog crontab' to see the cron line that enables reminders.\n")


def cmd_add_today(args) -> None:
    _tracker(args).ensure_today_record(_now(args))


def cmd_log(args) -> None:
    tracker = _tracker(args)
    day = args.date or _now(args).date()
    record = tracker.log_day(
        day,
        exercise_type=args.exercise,
        exercise_minutes=args.minutes,
        beer_count=args.beers,
        weight_kg=args.weight,
        notes=args.notes,
    )
    kind = record.exercise_type.value if record.exercise_type else (record.exercise_label or "-")
    print(f"{record.date}: exercise={kind} minutes={record.exercise_minutes} "
          f"beers={record.beer_count} weight={record.weight_kg}")


def cmd_remind(args) -> None:
    _tracker(args).maybe_send_reminder(_now(args))


def cmd_weekly(args) -> None:
    _tracker(args).send_weekly_summary(_now(args), force=args.force)


def cmd_dashboard(args) -> None:
    from habitlog.dashboard import render_dashboard, save_json
    tracker = _tracker(args)
    dash = tracker.refresh_dashboard(_now(args))
    print()
    print(render_dashboard(dash, color=sys.stdout.isatty()))
    print()
    if args.json:
        path = save_json(dash, args.json)
        print(f"JSON output saved to: {path}")


def cmd_tick(args) -> None:
    _tracker(args).tick(_now(args))


def cmd_status(args) -> None:
    from habitlog.core.stats import streak_summary
    from habitlog.utils.output import colorize_streak
    tracker = _tracker(args)
    now = _now(args)
    streaks = streak_summary(tracker.store.list_records(), now)
    markers = tracker.store.all_markers()

    print("\nHabit Tracker Status")
    print("=" * 40)
    print(f"  Exercise streak:    {colorize_streak(f'{streaks.exercise} days', streaks.exercise)}")
    print(f"  No-alcohol streak:  {colorize_streak(f'{streaks.no_alcohol} days', streaks.no_alcohol)}")
    print(f"  Longest exercise:   {streaks.longest_exercise} days")
    print(f"  Records:            {tracker.store.count_records()}")
    if markers:
        print("\n  Last completed:")
        for action, day in sorted(markers.items()):
            print(f"    {action:20s} {day}")
    print()


def cmd_crontab(args) -> None:
    from habitlog.config import get_config, reload_config
    from habitlog.core.schedule import crontab_line, describe
    cfg = reload_config(args.config) if args.config else get_config()
    print("\nAdd this line to your crontab (crontab -e):\n")
    print(f"  {crontab_line()}\n")
    print("Schedule:")
    for line in describe(cfg.schedule):
        print(f"  - {line}")
    print()


def cmd_config(args) -> None:
    from habitlog.config import get_config, reload_config
    cfg = reload_config(args.config) if args.config else get_config()
    print("\nHabit Tracker Configuration")
    print("=" * 40)
    print(f"  DB:       {cfg.db_path}")
    print(f"  Lock:     {cfg.lock.path} (timeout {cfg.lock.timeout_seconds}s)")
    print(f"  Logs:     {cfg.log_dir}")
    print(f"  Notify:   {cfg.notify.channel}")
    print()


def _parse_datetime(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date/time: {text!r}")


def _parse_date(text: str) -> date:
    day = as_day(text)
    if day is None:
        raise argparse.ArgumentTypeError(f"not an ISO date: {text!r}")
    return day


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="habitlog",
        description="Daily habit log: exercise, alcohol, weight. Streaks, reminders, weekly summary.",
    )
    parser.add_argument("--config", "-c", help="Path to config.yaml")
    parser.add_argument("--now", type=_parse_datetime,
                        help="Pretend the current time is this ISO timestamp")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("init", help="Create the habit store and today's row")
    sub.add_parser("add-today", help="Add today's row if missing")

    p_log = sub.add_parser("log", help="Record habits for a day (default: today)")
    p_log.add_argument("--date", "-d", type=_parse_date, help="Day to record (YYYY-MM-DD)")
    p_log.add_argument("--exercise", "-e",
                       help="Exercise type: " + ", ".join(t.value for t in ExerciseType))
    p_log.add_argument("--minutes", "-m", type=int, help="Exercise duration in minutes")
    p_log.add_argument("--beers", "-b", type=int, help="Beers drunk (0-20)")
    p_log.add_argument("--weight", "-w", type=float, help="Weight in kg")
    p_log.add_argument("--notes", "-n", help="Free-text notes")

    sub.add_parser("remind", help="Send today's reminder if habits are unrecorded")

    p_weekly = sub.add_parser("weekly", help="Send the weekly summary")
    p_weekly.add_argument("--force", action="store_true",
                          help="Send even if already sent today")

    p_dash = sub.add_parser("dashboard", help="Refresh and print the dashboard")
    p_dash.add_argument("--json", metavar="PATH", help="Also write the dashboard as JSON")

    sub.add_parser("tick", help="Run every action due now (for hourly cron)")
    sub.add_parser("status", help="Show streaks and last completed actions")
    sub.add_parser("crontab", help="Print the crontab line that drives reminders")
    sub.add_parser("config", help="Show current configuration")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    dispatch = {
        "init":      cmd_init,
        "add-today": cmd_add_today,
        "log":       cmd_log,
        "remind":    cmd_remind,
        "weekly":    cmd_weekly,
        "dashboard": cmd_dashboard,
        "tick":      cmd_tick,
        "status":    cmd_status,
        "crontab":   cmd_crontab,
        "config":    cmd_config,
    }

    from habitlog.utils.output import print_error
    try:
        if args.command in dispatch:
            dispatch[args.command](args)
        else:
            parser.print_help()
    except KeyboardInterrupt:
        print("\nBye.")
    except (HabitLogError, ValueError) as exc:
        print_error(str(exc))
        return 1
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
