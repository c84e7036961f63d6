"""Turns computed stats into human-readable notification text."""
from __future__ import annotations

from dataclasses import dataclass

from habitlog.core.stats import StreakSummary, WeekSummary


@dataclass
class Message:
    subject: str
    body: str

    def as_text(self) -> str:
        return f"{self.subject}\n\n{self.body}"


def format_weight(avg_weight: float | None) -> str:
    return f"{avg_weight:.1f} kg" if avg_weight is not None else "No data"


def compose_reminder(streaks: StreakSummary, link: str = "") -> Message:
    lines = [
        "Today's habits haven't been recorded yet!",
        "",
        f"Exercise Streak: {streaks.exercise} days",
        f"No-Alcohol Streak: {streaks.no_alcohol} days",
    ]
    if link:
        lines += ["", f"Record now: {link}"]
    lines += ["", "Keep it up!"]
    return Message(subject="Habit Tracker: Record Today's Habits", body="\n".join(lines))


def compose_weekly_summary(week: WeekSummary, streaks: StreakSummary, link: str = "") -> Message:
    weight_line = (
        f"Average Weight: {format_weight(week.avg_weight)}"
        if week.avg_weight is not None else "Weight: No data"
    )
    lines = [
        "=== Weekly Summary ===",
        "",
        f"Exercise Days: {week.exercise_days} / 7",
        f"Total Exercise: {week.total_minutes} min",
        f"Total Beers: {week.total_beers}",
        weight_line,
        "",
        "--- Streaks ---",
        f"Current Exercise Streak: {streaks.exercise} days",
        f"Current No-Alcohol Streak: {streaks.no_alcohol} days",
        f"All-Time Best Exercise Streak: {streaks.longest_exercise} days",
    ]
    if link:
        lines += ["", f"View details: {link}"]
    lines += ["", "Have a great week!"]
    return Message(subject="Habit Tracker: Weekly Summary", body="\n".join(lines))
