"""Tests for Slack report notifications."""
from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from taxrecon.core.retry import RetryPolicy
from taxrecon.services.notification import slack
from taxrecon.services.notification.slack import ReportOutcome, SlackNotifier


class FakeResponse:
    def __init__(self, status_code: int = 200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def posts(monkeypatch):
    """Record webhook posts; queue HTTP status codes in ``statuses`` to simulate errors."""
    recorder = SimpleNamespace(calls=[], statuses=[])

    def fake_post(url, json=None, timeout=None):
        recorder.calls.append({"url": url, "json": json, "timeout": timeout})
        return FakeResponse(recorder.statuses.pop(0) if recorder.statuses else 200)

    monkeypatch.setattr(slack.requests, "post", fake_post)
    return recorder


def _notifier(**kwargs):
    return SlackNotifier(
        webhook_url="https://hooks.slack.test/T000/B000/XXX",
        channel="payments",
        timeout=5,
        retry_policy=RetryPolicy(max_tries=2, delay=0, retry_on=(slack.NotifyError,), sleep=lambda _: None),
        **kwargs,
    )


def test_success_outcome_posts_green_with_link(posts):
    outcome = ReportOutcome("India Sales Reporting", True, "Report ready - https://example.com/r.csv")

    assert _notifier().notify(outcome) is True

    (call,) = posts.calls
    assert call["url"] == "https://hooks.slack.test/T000/B000/XXX"
    assert call["timeout"] == 5
    payload = call["json"]
    assert payload["channel"] == "#payments"
    attachment = payload["attachments"][0]
    assert attachment["color"] == "good"
    assert attachment["title"] == "India Sales Reporting"
    assert "https://example.com/r.csv" in attachment["text"]


def test_failure_outcome_posts_red():
    outcome = ReportOutcome("India Sales Reporting", False, "boom")
    assert outcome.color == "red"
    assert SlackNotifier._build_payload("payments", outcome.subject, outcome.message, outcome.color)[
        "attachments"
    ][0]["color"] == "danger"


def test_unknown_color_passes_through():
    payload = SlackNotifier._build_payload("#ops", "s", "b", "#439FE0")
    assert payload["channel"] == "#ops"
    assert payload["attachments"][0]["color"] == "#439FE0"


def test_http_error_is_retried_then_swallowed(posts):
    posts.statuses.extend([500, 500])

    assert _notifier().post("payments", "subject", "body", "red") is False
    assert len(posts.calls) == 2


def test_transient_error_recovers_on_retry(posts):
    posts.statuses.append(503)

    assert _notifier().post("payments", "subject", "body", "green") is True
    assert len(posts.calls) == 2


def test_connection_error_is_swallowed(monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(slack.requests, "post", refuse)
    assert _notifier().post("payments", "subject", "body", "green") is False


def test_unconfigured_webhook_skips_send(posts):
    notifier = SlackNotifier(webhook_url="", channel="payments")
    assert notifier.post("payments", "subject", "body", "green") is False
    assert posts.calls == []
