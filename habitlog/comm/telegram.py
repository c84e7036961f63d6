"""
Telegram transport: Bot API sendMessage over httpx.
Only usable when TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID are set.
"""
from __future__ import annotations

import httpx

from habitlog.comm.adapter import Notifier
from habitlog.composer import Message
from habitlog.errors import NotificationError
from habitlog.utils.logger import get_logger

log = get_logger("habitlog.comm.telegram")

API_BASE = "https://api.telegram.org"
MAX_MESSAGE_CHARS = 4096


class TelegramNotifier(Notifier):
    name = "telegram"

    def __init__(self, token: str, chat_id: str, timeout: float = 10,
                 client: httpx.Client | None = None) -> None:
        if not token or not chat_id:
            raise NotificationError(
                "Telegram not configured (TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)"
            )
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return f"{API_BASE}/bot{self.token}/sendMessage"

    def send(self, message: Message) -> None:
        chunks = _split(message.as_text(), MAX_MESSAGE_CHARS)
        try:
            if self._client is not None:
                self._post_all(self._client, chunks)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    self._post_all(client, chunks)
        except httpx.HTTPStatusError as e:
            # the URL embeds the token; log the status only
            log.error("Telegram send failed: HTTP %s", e.response.status_code)
            raise NotificationError(f"Telegram returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.error("Telegram send error: %s", type(e).__name__)
            raise NotificationError(f"Telegram request failed: {type(e).__name__}") from e
        log.info("Telegram delivered: %s (%d part(s))", message.subject, len(chunks))

    def _post_all(self, client: httpx.Client, chunks: list[str]) -> None:
        for chunk in chunks:
            resp = client.post(self.url, json={"chat_id": self.chat_id, "text": chunk},
                               timeout=self.timeout)
            resp.raise_for_status()


def _split(text: str, size: int) -> list[str]:
    return [text[i:i+size] for i in range(0, len(text), size)] or [""]
