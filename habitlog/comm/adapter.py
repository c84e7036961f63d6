"""Unified notification interface (abstract)."""
from __future__ import annotations

from abc import ABC, abstractmethod

from habitlog.composer import Message


class Notifier(ABC):
    """All transports implement this interface."""

    name: str = "notifier"

    @abstractmethod
    def send(self, message: Message) -> None:
        """Deliver the message or raise NotificationError."""

    def __call__(self, message: Message) -> None:
        self.send(message)
