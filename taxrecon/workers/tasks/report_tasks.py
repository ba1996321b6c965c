"""
Sales Tax Report Tasks.

Celery tasks for the monthly India sales tax reconciliation report.
"""
from __future__ import annotations

import logging
from typing import Any

from celery import Task

from taxrecon.core.exceptions import InvalidPeriodError
from taxrecon.db.session import session_scope
from taxrecon.services.sales_report.factory import build_india_sales_report_job
from taxrecon.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    name="reports.create_india_sales_report",
    autoretry_for=(Exception,),
    dont_autoretry_for=(InvalidPeriodError,),
    retry_backoff=300,
    retry_jitter=True,
    retry_kwargs={"max_retries": 1},
)
def create_india_sales_report(
    self: Task, month: int | None = None, year: int | None = None
) -> dict[str, Any]:
    """Generate and publish the India sales report; defaults to the previous month."""
    logger.info(
        "[reports.create_india_sales_report] month=%s year=%s attempt=%s",
        month, year, self.request.retries + 1,
    )
    with session_scope() as db:
        job = build_india_sales_report_job(db)
        result = job.run(month, year)
    return {
        "month": result.period.month,
        "year": result.period.year,
        "key": result.artifact.key,
        "url": result.url,
        "rows": result.row_count,
    }
