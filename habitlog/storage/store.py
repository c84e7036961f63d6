"""
SQLite WAL-mode store: daily records, action markers, dashboard snapshot.
All queries are parameterized; no string interpolation.

The store never creates itself implicitly. `initialize()` does that, and any
other call on a missing database raises MissingStoreError.
"""
from __future__ import annotations

import json
import sqlite3
from collections.abc import MutableMapping
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Generator, Iterator

from habitlog.errors import MissingStoreError
from habitlog.models import DailyRecord, as_day

_SCHEMA = Path(__file__).parent / "schema.sql"
_TABLES = ("records", "markers", "dashboard")


class HabitStore:
    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)

    # ── DB init ──────────────────────────────────────────────────────────
    def initialize(self) -> bool:
        """Create schema if absent. Returns True if the database was new."""
        path = Path(self.db_path)
        created = not path.exists()
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._conn(require=False) as conn:
            conn.executescript(_SCHEMA.read_text())
        return created

    def is_initialized(self) -> bool:
        if not Path(self.db_path).exists():
            return False
        with self._conn(require=False) as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        return set(_TABLES) <= {r["name"] for r in rows}

    @contextmanager
    def _conn(self, require: bool = True) -> Generator[sqlite3.Connection, None, None]:
        # sqlite3.connect would silently create an empty file
        if require and not Path(self.db_path).exists():
            raise MissingStoreError(self.db_path)
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        try:
            yield conn
            conn.commit()
        except sqlite3.OperationalError as exc:
            conn.rollback()
            if require and "no such table" in str(exc):
                raise MissingStoreError(self.db_path) from exc
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ── Records ──────────────────────────────────────────────────────────
    def list_records(self) -> list[DailyRecord]:
        """All records with a usable date, in storage order."""
        with self._conn() as conn:
            rows = conn.execute("SELECT * FROM records ORDER BY id").fetchall()
        records = []
        for r in rows:
            rec = DailyRecord.from_row(dict(r))
            if rec is not None:
                records.append(rec)
        return records

    def append_record(self, record: DailyRecord) -> int:
        row = record.to_row()
        with self._conn() as conn:
            cur = conn.execute(
                "INSERT INTO records "
                "(date, exercise_type, exercise_minutes, beer_count, weight_kg, notes) "
                "VALUES (:date, :exercise_type, :exercise_minutes, :beer_count, :weight_kg, :notes)",
                row,
            )
            return cur.lastrowid  # type: ignore[return-value]

    def update_record(self, record: DailyRecord) -> bool:
        """Overwrite the stored row(s) for record.date. Returns False if none exist."""
        row = record.to_row()
        with self._conn() as conn:
            cur = conn.execute(
                "UPDATE records SET exercise_type=:exercise_type, "
                "exercise_minutes=:exercise_minutes, beer_count=:beer_count, "
                "weight_kg=:weight_kg, notes=:notes WHERE date=:date",
                row,
            )
            return cur.rowcount > 0

    def find_record(self, day: date) -> DailyRecord | None:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT * FROM records WHERE date=? ORDER BY id DESC LIMIT 1",
                (day.isoformat(),),
            ).fetchone()
        return DailyRecord.from_row(dict(row)) if row else None

    def count_records(self, day: date | None = None) -> int:
        with self._conn() as conn:
            if day is None:
                row = conn.execute("SELECT COUNT(*) AS n FROM records").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) AS n FROM records WHERE date=?", (day.isoformat(),)
                ).fetchone()
            return int(row["n"])

    # ── Markers ──────────────────────────────────────────────────────────
    def get_marker(self, action: str) -> date | None:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT last_date FROM markers WHERE action=?", (action,)
            ).fetchone()
        return as_day(row["last_date"]) if row else None

    def set_marker(self, action: str, day: date) -> None:
        with self._conn() as conn:
            conn.execute(
                "INSERT INTO markers (action, last_date, updated_at) "
                "VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(action) DO UPDATE SET "
                "last_date=excluded.last_date, updated_at=excluded.updated_at",
                (action, day.isoformat()),
            )

    def delete_marker(self, action: str) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM markers WHERE action=?", (action,))

    def all_markers(self) -> dict[str, date]:
        with self._conn() as conn:
            rows = conn.execute("SELECT action, last_date FROM markers").fetchall()
        return {r["action"]: as_day(r["last_date"]) for r in rows}

    # ── Dashboard snapshot ───────────────────────────────────────────────
    def save_dashboard(self, generated_at: str, payload: dict[str, Any]) -> None:
        with self._conn() as conn:
            conn.execute(
                "INSERT INTO dashboard (id, generated_at, payload) VALUES (1, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET "
                "generated_at=excluded.generated_at, payload=excluded.payload",
                (generated_at, json.dumps(payload)),
            )

    def load_dashboard(self) -> dict[str, Any] | None:
        with self._conn() as conn:
            row = conn.execute("SELECT payload FROM dashboard WHERE id=1").fetchone()
        return json.loads(row["payload"]) if row else None


class MarkerStore(MutableMapping):
    """ActionMarker mapping backed by the markers table.

    The guard only needs `get` and item assignment, so a plain dict works
    in its place."""

    def __init__(self, store: HabitStore) -> None:
        self._store = store

    def __getitem__(self, action: str) -> date:
        day = self._store.get_marker(action)
        if day is None:
            raise KeyError(action)
        return day

    def __setitem__(self, action: str, day: date) -> None:
        self._store.set_marker(action, day)

    def __delitem__(self, action: str) -> None:
        if self._store.get_marker(action) is None:
            raise KeyError(action)
        self._store.delete_marker(action)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.all_markers())

    def __len__(self) -> int:
        return len(self._store.all_markers())
