"""Tests for the Celery report task (eager mode in the test environment)."""
from __future__ import annotations

import pytest

from taxrecon.core.exceptions import InvalidPeriodError
from taxrecon.services.sales_report import factory
from taxrecon.workers.celery_app import celery_app
from taxrecon.workers.tasks import create_india_sales_report

from conftest import FakeStorage, RecordingNotifier


@pytest.fixture
def wired(monkeypatch):
    storage = FakeStorage()
    notifier = RecordingNotifier()
    monkeypatch.setattr(factory, "get_s3_client", lambda: storage)
    monkeypatch.setattr(factory, "SlackNotifier", lambda: notifier)
    return storage, notifier


def test_task_is_registered_under_stable_name():
    assert "reports.create_india_sales_report" in celery_app.tasks


def test_task_runs_report_and_returns_summary(wired, purchase_factory, rate_factory):
    storage, notifier = wired
    rate_factory()
    purchase_factory(external_id="pur_task")

    summary = create_india_sales_report.delay(6, 2023).get()

    assert summary["month"] == 6
    assert summary["year"] == 2023
    assert summary["rows"] == 1
    assert summary["key"] in storage.objects
    assert [o.color for o in notifier.outcomes] == ["green"]


def test_invalid_period_is_not_retried(wired):
    storage, notifier = wired
    with pytest.raises(InvalidPeriodError):
        create_india_sales_report.delay(13, 2023)
    assert notifier.outcomes == []
    assert storage.objects == {}


def test_no_beat_schedule_in_test_env():
    assert not celery_app.conf.beat_schedule
