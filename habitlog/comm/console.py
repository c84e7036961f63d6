"""stdout transport, the default when nothing else is configured."""
from __future__ import annotations

from habitlog.comm.adapter import Notifier
from habitlog.composer import Message


class ConsoleNotifier(Notifier):
    name = "console"

    def send(self, message: Message) -> None:
        print(f"\n{message.as_text()}\n", flush=True)
