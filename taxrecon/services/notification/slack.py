"""Slack incoming-webhook notifications for report runs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from taxrecon.core.config import settings
from taxrecon.core.exceptions import MaxRetriesExceededError, NotifyError
from taxrecon.core.retry import RetryPolicy

logger = logging.getLogger(__name__)

SUCCESS_COLOR = "green"
FAILURE_COLOR = "red"

# Slack attachment colours for our colour tokens
_SLACK_COLORS = {
    SUCCESS_COLOR: "good",
    FAILURE_COLOR: "danger",
}


@dataclass(frozen=True)
class ReportOutcome:
    subject: str
    success: bool
    message: str

    @property
    def color(self) -> str:
        return SUCCESS_COLOR if self.success else FAILURE_COLOR


class SlackNotifier:
    """Posts messages to a Slack channel through an incoming webhook.

    Delivery is best effort: failures are logged and reported through the return
    value, never raised to the caller.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        channel: str | None = None,
        timeout: int | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self.webhook_url = webhook_url if webhook_url is not None else settings.SLACK_WEBHOOK_URL
        self.channel = channel or settings.SLACK_CHANNEL
        self.timeout = timeout or settings.SLACK_TIMEOUT_SECONDS
        self.retry_policy = retry_policy or RetryPolicy(max_tries=2, delay=1, retry_on=(NotifyError,))

    def notify(self, outcome: ReportOutcome) -> bool:
        return self.post(self.channel, outcome.subject, outcome.message, outcome.color)

    def post(self, channel: str, subject: str, body: str, color: str) -> bool:
        if not self.webhook_url:
            logger.warning("[SLACK] Not configured, would post to #%s: %s - %s", channel, subject, body)
            return False

        payload = self._build_payload(channel, subject, body, color)
        try:
            self.retry_policy.call(
                "Post Slack message",
                lambda: self._send(channel, payload),
                context=f"#{channel} {subject}",
            )
        except MaxRetriesExceededError as exc:
            logger.error("[SLACK] Giving up on #%s: %s", channel, exc.message)
            return False
        logger.info("[SLACK] Posted to #%s: %s (%s)", channel, subject, color)
        return True

    @staticmethod
    def _build_payload(channel: str, subject: str, body: str, color: str) -> dict[str, Any]:
        return {
            "channel": f"#{channel.lstrip('#')}",
            "username": subject,
            "attachments": [
                {
                    "fallback": f"{subject}: {body}",
                    "color": _SLACK_COLORS.get(color, color),
                    "title": subject,
                    "text": body,
                }
            ],
        }

    def _send(self, channel: str, payload: dict[str, Any]) -> None:
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NotifyError(channel, str(exc)) from exc
