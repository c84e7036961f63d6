"""
HabitConfig: YAML file + environment overrides, auto-mkdir for data/logs.
Single-user, cron-driven: one SQLite file, one lock file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

ROOT = Path(__file__).parent.parent
DATA_DIR = (ROOT / "data").resolve()
LOG_DIR = (ROOT / "logs").resolve()

for _d in (DATA_DIR, LOG_DIR):
    _d.mkdir(parents=True, exist_ok=True)


@dataclass
class LockConfig:
    path: str = str(DATA_DIR / "habitlog.lock")
    timeout_seconds: float = 10.0
    poll_interval_seconds: float = 0.05


@dataclass
class ScheduleConfig:
    daily_row_hour: int = 0
    reminder_hour: int = 21          # 9 PM
    weekly_summary_weekday: int = 0  # Monday (datetime.weekday())
    weekly_summary_hour: int = 8     # 8 AM


@dataclass
class NotifyConfig:
    channel: str = "console"  # console | webhook | telegram
    webhook_url: str = ""
    telegram_token: str = ""
    telegram_chat_id: str = ""
    timeout_seconds: int = 10


@dataclass
class HabitConfig:
    # Paths
    data_dir: Path = DATA_DIR
    log_dir: Path = LOG_DIR
    db_path: str = str(DATA_DIR / "habitlog.db")

    # System
    log_level: str = "INFO"

    # Link included in reminders and summaries
    dashboard_url: str = ""

    # Components
    lock: LockConfig = field(default_factory=LockConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)

    @classmethod
    def load(cls, yaml_path: str | Path | None = None) -> "HabitConfig":
        """Load config from YAML file + environment variable overrides."""
        cfg = cls()

        if yaml_path is None:
            yaml_path = ROOT / "habitlog" / "config.yaml"
        yaml_path = Path(yaml_path)
        if yaml_path.exists():
            with yaml_path.open() as f:
                data: dict[str, Any] = yaml.safe_load(f) or {}
            cfg._apply_yaml(data)

        # ENV overrides (always win)
        cfg._apply_env()
        return cfg

    def _apply_yaml(self, data: dict[str, Any]) -> None:
        sections = {"lock": self.lock, "schedule": self.schedule, "notify": self.notify}
        for key, val in data.items():
            if key in sections and isinstance(val, dict):
                section = sections[key]
                for k, v in val.items():
                    if hasattr(section, k):
                        setattr(section, k, v)
            elif key in ("data_dir", "log_dir"):
                setattr(self, key, Path(val))
            elif hasattr(self, key):
                setattr(self, key, val)

    def _apply_env(self) -> None:
        env_map = {
            "HABITLOG_DB_PATH": ("db_path",),
            "HABITLOG_LOG_LEVEL": ("log_level",),
            "HABITLOG_DASHBOARD_URL": ("dashboard_url",),
            "HABITLOG_LOCK_PATH": ("lock", "path"),
            "HABITLOG_NOTIFY_CHANNEL": ("notify", "channel"),
            "HABITLOG_WEBHOOK_URL": ("notify", "webhook_url"),
            "TELEGRAM_BOT_TOKEN": ("notify", "telegram_token"),
            "TELEGRAM_CHAT_ID": ("notify", "telegram_chat_id"),
        }
        for env_key, path in env_map.items():
            val = os.environ.get(env_key, "")
            if not val:
                continue
            if len(path) == 1:
                setattr(self, path[0], val)
            else:
                section, attr = path
                setattr(getattr(self, section), attr, val)


# Module-level singleton, loaded on first use
_config: HabitConfig | None = None


def get_config() -> HabitConfig:
    global _config
    if _config is None:
        _config = HabitConfig.load()
    return _config


def reload_config(yaml_path: str | Path | None = None) -> HabitConfig:
    global _config
    _config = HabitConfig.load(yaml_path)
    return _config
