"""
Webhook transport: JSON POST of {subject, body} to a configured URL.
Hand the message to n8n/Zapier/ntfy/etc.; retries are the next tick's job.
"""
from __future__ import annotations

import httpx

from habitlog.comm.adapter import Notifier
from habitlog.composer import Message
from habitlog.errors import NotificationError
from habitlog.utils.logger import get_logger

log = get_logger("habitlog.comm.webhook")
TIMEOUT = 10


class WebhookNotifier(Notifier):
    name = "webhook"

    def __init__(self, url: str, timeout: float = TIMEOUT,
                 client: httpx.Client | None = None) -> None:
        if not url:
            raise NotificationError("Webhook URL not configured (HABITLOG_WEBHOOK_URL)")
        self.url = url
        self.timeout = timeout
        self._client = client

    def send(self, message: Message) -> None:
        payload = {"subject": message.subject, "body": message.body}
        try:
            if self._client is not None:
                resp = self._client.post(self.url, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    resp = client.post(self.url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error("Webhook %s failed: %s", self.url, e)
            raise NotificationError(f"Webhook returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.error("Webhook %s error: %s", self.url, e)
            raise NotificationError(f"Webhook request failed: {e}") from e
        log.info("Webhook delivered: %s", message.subject)
