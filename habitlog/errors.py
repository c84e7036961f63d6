"""Exception types shared by the store, guard and transports."""
from __future__ import annotations


class HabitLogError(Exception):
    """Base class for every error the tracker raises on purpose."""


class MissingStoreError(HabitLogError):
    """The record/marker store has not been initialized yet."""

    def __init__(self, db_path: str) -> None:
        super().__init__(
            f"Habit store not found at {db_path}. Run 'habitlog init' first."
        )
        self.db_path = db_path


class LockContention(HabitLogError):
    """The tracker lock could not be acquired before the timeout."""


class NotificationError(HabitLogError):
    """A notification transport failed to deliver a message."""
