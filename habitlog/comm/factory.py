"""Pick the transport named in config.notify.channel."""
from __future__ import annotations

from habitlog.comm.adapter import Notifier
from habitlog.comm.console import ConsoleNotifier
from habitlog.comm.telegram import TelegramNotifier
from habitlog.comm.webhook import WebhookNotifier
from habitlog.config import NotifyConfig


def build_notifier(cfg: NotifyConfig) -> Notifier:
    channel = (cfg.channel or "console").lower()
    if channel == "console":
        return ConsoleNotifier()
    if channel == "webhook":
        return WebhookNotifier(cfg.webhook_url, timeout=cfg.timeout_seconds)
    if channel == "telegram":
        return TelegramNotifier(cfg.telegram_token, cfg.telegram_chat_id,
                                timeout=cfg.timeout_seconds)
    raise ValueError(f"Unknown notify channel: '{channel}'. Use console, webhook or telegram.")
