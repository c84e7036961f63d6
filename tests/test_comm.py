"""Tests for habitlog.comm — transports and notifier factory."""
import json

import httpx
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from habitlog.composer import Message
from habitlog.errors import NotificationError

MSG = Message(subject="Habit Tracker: Weekly Summary", body="Exercise Days: 3 / 7")


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


# ── Webhook ───────────────────────────────────────────────────────────────────

class TestWebhookNotifier:
    def test_posts_json(self):
        from habitlog.comm.webhook import WebhookNotifier
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        WebhookNotifier("https://hooks.example.test/habit", client=mock_client(handler)).send(MSG)
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"subject": MSG.subject, "body": MSG.body}

    def test_http_error_raises(self):
        from habitlog.comm.webhook import WebhookNotifier
        notifier = WebhookNotifier(
            "https://hooks.example.test/habit",
            client=mock_client(lambda r: httpx.Response(503)),
        )
        with pytest.raises(NotificationError, match="503"):
            notifier.send(MSG)

    def test_connection_error_raises(self):
        from habitlog.comm.webhook import WebhookNotifier

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NotificationError, match="failed"):
            WebhookNotifier("https://hooks.example.test/x", client=mock_client(handler)).send(MSG)

    def test_requires_url(self):
        from habitlog.comm.webhook import WebhookNotifier
        with pytest.raises(NotificationError):
            WebhookNotifier("")


# ── Telegram ──────────────────────────────────────────────────────────────────

class TestTelegramNotifier:
    def test_sends_to_chat(self):
        from habitlog.comm.telegram import TelegramNotifier
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        TelegramNotifier("123:abc", "42", client=mock_client(handler)).send(MSG)
        url = str(seen[0].url)
        assert url.startswith("https://api.telegram.org/bot")
        assert url.endswith("/sendMessage")
        payload = json.loads(seen[0].content)
        assert payload["chat_id"] == "42"
        assert MSG.subject in payload["text"]

    def test_long_message_split(self):
        from habitlog.comm.telegram import MAX_MESSAGE_CHARS, TelegramNotifier
        seen = []

        def handler(request):
            seen.append(json.loads(request.content)["text"])
            return httpx.Response(200)

        long_msg = Message(subject="s", body="x" * (MAX_MESSAGE_CHARS + 10))
        TelegramNotifier("t", "1", client=mock_client(handler)).send(long_msg)
        assert len(seen) == 2
        assert all(len(part) <= MAX_MESSAGE_CHARS for part in seen)

    def test_error_does_not_leak_token(self):
        from habitlog.comm.telegram import TelegramNotifier
        notifier = TelegramNotifier("secret-token", "1",
                                    client=mock_client(lambda r: httpx.Response(401)))
        with pytest.raises(NotificationError) as exc_info:
            notifier.send(MSG)
        assert "secret-token" not in str(exc_info.value)

    def test_requires_token_and_chat(self):
        from habitlog.comm.telegram import TelegramNotifier
        with pytest.raises(NotificationError):
            TelegramNotifier("token", "")


# ── Console + factory ────────────────────────────────────────────────────────

class TestFactory:
    def test_console_prints(self, capsys):
        from habitlog.comm.console import ConsoleNotifier
        ConsoleNotifier()(MSG)
        out = capsys.readouterr().out
        assert MSG.subject in out and MSG.body in out

    def test_builds_by_channel(self):
        from habitlog.comm.console import ConsoleNotifier
        from habitlog.comm.factory import build_notifier
        from habitlog.comm.webhook import WebhookNotifier
        from habitlog.config import NotifyConfig
        assert isinstance(build_notifier(NotifyConfig()), ConsoleNotifier)
        wh = build_notifier(NotifyConfig(channel="webhook", webhook_url="https://x.test"))
        assert isinstance(wh, WebhookNotifier)

    def test_unknown_channel(self):
        from habitlog.comm.factory import build_notifier
        from habitlog.config import NotifyConfig
        with pytest.raises(ValueError, match="Unknown notify channel"):
            build_notifier(NotifyConfig(channel="pigeon"))
