"""
Data model: one DailyRecord per calendar day.

Field coercion lives here so every reader (store rows, CLI input, tests)
normalizes the same way: dates become datetime.date, malformed values
become None.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

MAX_BEERS = 20


class ExerciseType(str, Enum):
    GYM = "Gym"
    RUNNING = "Running"
    WALKING = "Walking"
    CYCLING = "Cycling"
    SWIMMING = "Swimming"
    YOGA = "Yoga"
    HOME_WORKOUT = "Home Workout"
    OTHER = "Other"
    REST_DAY = "Rest Day"

    @classmethod
    def parse(cls, value: Any) -> Optional["ExerciseType"]:
        """Accept the label ("Rest Day") or a compact name ("RestDay", "rest_day").
        Anything else, including empty strings, is None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        key = value.strip().replace(" ", "").replace("_", "").lower()
        for member in cls:
            if key in (member.value.replace(" ", "").lower(), member.name.replace("_", "").lower()):
                return member
        return None


def as_day(value: Any) -> date | None:
    """Normalize a date, datetime or ISO string to a day-only value."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def parse_minutes(value: Any) -> int | None:
    num = _as_number(value)
    if num is None or num < 0 or num != int(num):
        return None
    return int(num)


def parse_beers(value: Any) -> int | None:
    num = _as_number(value)
    if num is None or num != int(num) or not 0 <= num <= MAX_BEERS:
        return None
    return int(num)


def parse_weight(value: Any) -> float | None:
    num = _as_number(value)
    if num is None or num <= 0:
        return None
    return num


@dataclass
class DailyRecord:
    """One day of the habit log."""
    date: date
    exercise_type: Optional[ExerciseType] = None
    exercise_minutes: Optional[int] = None
    beer_count: Optional[int] = None
    weight_kg: Optional[float] = None
    notes: str = ""
    # Stored text that isn't a known ExerciseType; kept so it round-trips.
    exercise_label: str = ""

    @property
    def is_exercise_day(self) -> bool:
        kind = ExerciseType.parse(self.exercise_type)
        return kind is not None and kind is not ExerciseType.REST_DAY

    @property
    def has_exercise_entry(self) -> bool:
        """True once anything has been written in the exercise column."""
        return ExerciseType.parse(self.exercise_type) is not None or bool(self.exercise_label.strip())

    @property
    def is_no_alcohol_day(self) -> bool:
        return not parse_beers(self.beer_count)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Optional["DailyRecord"]:
        """Build a record from raw stored values. Returns None when the date
        itself is unusable; other malformed fields degrade to None."""
        day = as_day(row.get("date"))
        if day is None:
            return None
        raw_kind = row.get("exercise_type")
        kind = ExerciseType.parse(raw_kind)
        return cls(
            date=day,
            exercise_type=kind,
            exercise_minutes=parse_minutes(row.get("exercise_minutes")),
            beer_count=parse_beers(row.get("beer_count")),
            weight_kg=parse_weight(row.get("weight_kg")),
            notes=str(row.get("notes") or ""),
            exercise_label="" if kind or raw_kind is None else str(raw_kind).strip(),
        )

    def to_row(self) -> dict[str, Any]:
        kind = ExerciseType.parse(self.exercise_type)
        return {
            "date": as_day(self.date).isoformat(),
            "exercise_type": kind.value if kind else (self.exercise_label or None),
            "exercise_minutes": self.exercise_minutes,
            "beer_count": self.beer_count,
            "weight_kg": self.weight_kg,
            "notes": self.notes,
        }
