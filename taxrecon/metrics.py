"""Metrics facade.

Service code should ONLY call the semantic helpers here so the backend can change freely.

Metrics:
- india_sales_report_runs_total        Report runs by outcome (success/failure)
- india_sales_report_rows_total        Rows written to published reports
- india_sales_report_duration_seconds  Wall time of a report run
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("metrics")

_REPORT_RUNS = Counter(
    "india_sales_report_runs_total", "India sales report runs", ["outcome"]
)
_REPORT_ROWS = Counter("india_sales_report_rows_total", "Rows written to India sales reports")
_REPORT_DURATION = Histogram(
    "india_sales_report_duration_seconds",
    "Duration of India sales report runs",
    buckets=(1, 5, 15, 30, 60, 120, 300, 600, 1800),
)


def report_run_succeeded(rows: int, duration_seconds: float) -> None:
    _REPORT_RUNS.labels(outcome="success").inc()
    _REPORT_ROWS.inc(rows)
    _REPORT_DURATION.observe(duration_seconds)


def report_run_failed(duration_seconds: float) -> None:
    _REPORT_RUNS.labels(outcome="failure").inc()
    _REPORT_DURATION.observe(duration_seconds)
