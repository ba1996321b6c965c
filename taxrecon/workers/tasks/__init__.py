"""
Celery Tasks Module.

All tasks are registered with the Celery app.

Sub-modules:
- report_tasks: Monthly sales tax reconciliation reports
"""
from __future__ import annotations

from .report_tasks import create_india_sales_report

__all__ = [
    "create_india_sales_report",
]
