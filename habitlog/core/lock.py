"""
HabitLock: one habit-tracker mutation at a time, across processes.

Advisory lock file created with O_CREAT|O_EXCL and holding the owner PID.
Overlapping cron runs and threads in one process both serialize on it.
A lock file whose PID is gone is stale and gets reclaimed.
"""
from __future__ import annotations

import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import psutil

from habitlog.errors import LockContention
from habitlog.utils.logger import get_logger

log = get_logger("habitlog.lock")

DEFAULT_TIMEOUT = 10.0


class HabitLock:
    def __init__(self, path: str | Path, timeout: float = DEFAULT_TIMEOUT,
                 poll_interval: float = 0.05) -> None:
        self.path = Path(path)
        self.timeout = timeout
        self.poll_interval = poll_interval
        # Threads of one process share a PID, so the file alone can't tell
        # them apart; this guards the in-process side.
        self._local = threading.Lock()

    @contextmanager
    def hold(self, timeout: float | None = None) -> Generator[None, None, None]:
        """Acquire for the duration of the block. Raises LockContention on timeout."""
        wait = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + wait

        if not self._local.acquire(timeout=max(wait, 0)):
            raise LockContention(f"lock busy (in-process) after {wait:.1f}s")
        try:
            self._acquire_file(deadline, wait)
            try:
                yield
            finally:
                self._release_file()
        finally:
            self._local.release()

    # ── File lock ────────────────────────────────────────────────────────
    def _acquire_file(self, deadline: float, wait: float) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        while True:
            try:
                fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                if self._reclaim_if_stale():
                    continue
                if time.monotonic() >= deadline:
                    raise LockContention(f"lock busy ({self.path}) after {wait:.1f}s")
                time.sleep(self.poll_interval)
                continue
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))
            return

    def _release_file(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            log.warning("Lock file %s vanished before release", self.path)

    def owner_pid(self) -> int | None:
        try:
            text = self.path.read_text().strip()
        except FileNotFoundError:
            return None
        return int(text) if text.isdigit() else None

    def _reclaim_if_stale(self) -> bool:
        """Remove a lock left by a dead PID. True means "retry the create"."""
        pid = self.owner_pid()
        # Empty file: owner is between create and write; treat as busy.
        if pid is None or psutil.pid_exists(pid):
            return False
        # Rename is atomic: of several waiters that judged the same owner
        # dead, exactly one moves the file away.
        aside = self.path.with_name(
            f"{self.path.name}.stale.{os.getpid()}.{threading.get_ident()}"
        )
        try:
            os.rename(self.path, aside)
        except FileNotFoundError:
            return True
        try:
            text = aside.read_text().strip()
            moved = int(text) if text.isdigit() else None
            if moved == pid:
                log.warning("Reclaimed stale lock %s held by dead PID %d", self.path, pid)
                return True
            # Another waiter reclaimed first and already holds a fresh lock.
            try:
                os.link(aside, self.path)
            except FileExistsError:
                log.warning("Lock %s was replaced while restoring it", self.path)
            return False
        finally:
            aside.unlink()
